"""Tests for manforge.completion -- shell completion scripts."""

from __future__ import annotations

import pytest

from manforge.completion import complete_var, completion_script, write_completion_file
from manforge.exceptions import InvalidUsageError


class TestCompletionScript:
    def test_complete_var(self):
        assert complete_var("my-tool") == "_MY_TOOL_COMPLETE"
        assert complete_var("widgets") == "_WIDGETS_COMPLETE"

    @pytest.mark.parametrize("shell", ["bash", "zsh", "fish"])
    def test_supported_shells(self, click_app, shell):
        script = completion_script(click_app, "widgets", shell)
        assert "_WIDGETS_COMPLETE" in script

    def test_unsupported_shell(self, click_app):
        with pytest.raises(InvalidUsageError, match="tcsh"):
            completion_script(click_app, "widgets", "tcsh")

    def test_write_file(self, click_app, tmp_path):
        path = write_completion_file(click_app, "widgets", tmp_path / "widgets.zsh", shell="zsh")
        assert path.read_text().startswith("#compdef widgets")
