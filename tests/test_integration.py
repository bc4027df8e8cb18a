"""Integration tests for end-to-end functionality."""

import json
import shutil
import subprocess
import sys

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class TestEndToEnd:
    def given_project(self, convex_project):
        self.project = convex_project

    def when_cli_is_executed(self, *args):
        self.result = subprocess.run(
            [sys.executable, "-m", "convex_codemod", "--project", str(self.project), *args],
            capture_output=True,
            text=True,
        )

    def then_exit_code_is(self, expected):
        assert self.result.returncode == expected

    def then_output_has_expected_structure(self):
        output = json.loads(self.result.stdout)
        assert output["project"] == str(self.project)
        assert "changed" in output
        assert "errors" in output

    @requires_git
    def test_migrates_project(self, convex_project):
        """Running the module migrates the project on disk."""
        self.given_project(convex_project)
        self.when_cli_is_executed()
        self.then_exit_code_is(0)
        self.then_output_has_expected_structure()
        app = (convex_project / "src" / "App.tsx").read_text()
        assert "useQuery(api.messages.list)" in app

    def test_invalid_project_fails(self, tmp_path):
        self.given_project(tmp_path)
        self.when_cli_is_executed()
        self.then_exit_code_is(1)
        assert "Error:" in self.result.stderr
