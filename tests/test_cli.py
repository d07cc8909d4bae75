"""Tests for CLI argument parsing and command dispatch."""

from unittest.mock import patch

import pytest

from cli import (
    COMMANDS,
    main_dispatch,
    parse_filter_args,
    parse_matrix_args,
    parse_scan_args,
    parse_sync_args,
    parse_sync_image_args,
    run_command,
)
from core.exceptions import ConfigurationException


class TestParsers:
    """Tests for the per-command argument parsers."""

    def test_matrix_defaults(self):
        args = parse_matrix_args([])
        assert args.definitions_dir == "docker-image-sync-definitions"
        assert args.verbose is False

    def test_filter_options(self):
        args = parse_filter_args(["--matrix", '{"include":[]}', "--owner", "Acme", "--login"])
        assert args.matrix == '{"include":[]}'
        assert args.owner == "Acme"
        assert args.login is True
        assert args.registry == "ghcr.io"

    def test_sync_image_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DH_REPO", "library/nginx")
        monkeypatch.setenv("DH_TAG", "1.25")
        monkeypatch.setenv("DH_DIGEST", "sha256:" + "a" * 64)
        monkeypatch.setenv("GHCR_PKG", "nginx")
        monkeypatch.setenv("GHCR_TAG", "1.25")

        args = parse_sync_image_args([])

        assert args.source_repository == "library/nginx"
        assert args.package == "nginx"
        assert args.max_attempts == 4
        assert args.retry_waits == "30 60 300"

    def test_sync_image_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("GHCR_TAG", "1.25")
        args = parse_sync_image_args(["--tag", "stable"])
        assert args.tag == "stable"

    def test_sync_options(self):
        args = parse_sync_args(["--max-workers", "4", "--dry-run", "--no-filter", "--platform", "linux/amd64"])
        assert args.max_workers == 4
        assert args.dry_run is True
        assert args.no_filter is True
        assert args.platform == "linux/amd64"

    def test_scan_defaults(self):
        args = parse_scan_args([])
        assert args.image_name == "docker.io/my-organization/my-app"
        assert args.output == "trivy-results.sarif"
        assert args.severity == "CRITICAL,HIGH"
        assert args.timeout == "10m0s"
        assert args.no_upload is False

    def test_scan_short_output_option(self):
        assert parse_scan_args(["-o", "out.sarif"]).output == "out.sarif"


class TestDispatch:
    """Tests for main_dispatch and run_command."""

    def test_no_arguments_exits_2(self):
        with pytest.raises(SystemExit) as exc:
            main_dispatch([])
        assert exc.value.code == 2

    def test_help_exits_0(self):
        with pytest.raises(SystemExit) as exc:
            main_dispatch(["--help"])
        assert exc.value.code == 0

    def test_unknown_command(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main_dispatch(["mirror"])
        assert exc.value.code == 2
        assert "unknown command 'mirror'" in capsys.readouterr().err

    def test_every_command_registered(self):
        assert set(COMMANDS) == {"matrix", "filter", "sync-image", "sync", "scan"}

    def test_dispatch_exit_code(self):
        with patch("cli.run_command", return_value=1) as mock_run:
            with pytest.raises(SystemExit) as exc:
                main_dispatch(["sync", "--dry-run"])
        mock_run.assert_called_once_with("sync", ["--dry-run"])
        assert exc.value.code == 1

    def test_run_command_maps_errors_to_exit_1(self):
        with patch("cli.SyncOrchestrator") as mock_orchestrator:
            mock_orchestrator.return_value.run_matrix.side_effect = ConfigurationException("bad")
            assert run_command("matrix", []) == 1

    def test_run_command_returns_handler_code(self):
        with patch("cli.SyncOrchestrator") as mock_orchestrator:
            mock_orchestrator.return_value.run_filter.return_value = 0
            assert run_command("filter", ["--matrix", "{}"]) == 0
