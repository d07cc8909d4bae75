"""Tests for GitHub Actions context and step outputs."""

import pytest

from common import GitHubContext, escape_output_value, write_github_outputs
from core.exceptions import ConfigurationException


class TestGitHubContext:
    """Tests for GitHubContext."""

    def test_from_env(self):
        context = GitHubContext.from_env({
            "GITHUB_REPOSITORY_OWNER": "Acme",
            "GITHUB_REPOSITORY": "Acme/images",
            "GITHUB_SHA": "abc123",
            "GITHUB_REF": "refs/heads/main",
            "GITHUB_ACTOR": "octocat",
            "GITHUB_TOKEN": "ghs_token",
            "GITHUB_OUTPUT": "/tmp/output",
        })
        assert context.owner == "Acme"
        assert context.repository == "Acme/images"
        assert context.token == "ghs_token"
        assert context.output_file == "/tmp/output"

    def test_from_empty_env(self):
        assert GitHubContext.from_env({}) == GitHubContext()

    def test_require_lists_missing_variables(self):
        context = GitHubContext(actor="octocat")
        with pytest.raises(ConfigurationException) as exc:
            context.require("actor", "token", "sha")
        assert "GITHUB_TOKEN" in str(exc.value)
        assert "GITHUB_SHA" in str(exc.value)
        assert "GITHUB_ACTOR" not in str(exc.value)

    def test_require_passes(self):
        GitHubContext(actor="octocat", token="t").require("actor", "token")


class TestEscapeOutputValue:
    """Tests for step output escaping."""

    def test_escapes_percent_first(self):
        assert escape_output_value("100%\n") == "100%25%0A"

    def test_escapes_carriage_return(self):
        assert escape_output_value("a\r\nb") == "a%0D%0Ab"

    def test_plain_value_unchanged(self):
        assert escape_output_value('{"include":[]}') == '{"include":[]}'


class TestWriteGitHubOutputs:
    """Tests for write_github_outputs."""

    def test_appends_lines(self, tmp_path):
        output = tmp_path / "github_output"
        output.write_text("existing=1\n")

        write_github_outputs({"matrix": '{"include":[]}'}, str(output))

        assert output.read_text() == 'existing=1\nmatrix={"include":[]}\n'

    def test_multiline_value_stays_on_one_line(self, tmp_path):
        output = tmp_path / "github_output"
        write_github_outputs({"filtered_matrix": "line1\nline2"}, str(output))
        assert output.read_text() == "filtered_matrix=line1%0Aline2\n"

    def test_no_output_file_logs(self, caplog):
        with caplog.at_level("INFO"):
            write_github_outputs({"matrix": "{}"}, None)
        assert "matrix={}" in caplog.text

    def test_unwritable_file(self, tmp_path):
        with pytest.raises(ConfigurationException):
            write_github_outputs({"matrix": "{}"}, str(tmp_path / "missing-dir" / "out"))
