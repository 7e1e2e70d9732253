"""Tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from devloop import cli
from devloop.exceptions import ResolutionError
from devloop.toolchain import BuildTarget


def _parse(*argv):
    return cli.build_parser().parse_args(list(argv))


class TestBuildRunConfig:
    """Tests for turning flags into RunConfig."""

    def test_flags_map_onto_config(self, tmp_path):
        options = _parse("--test", "--build", "--race", "--ignore", "*.log", "--watch", str(tmp_path), "example.com/app")

        config = cli.build_run_config(options)

        assert config.import_path == "example.com/app"
        assert config.pipeline.run_tests
        assert config.pipeline.build_binary
        assert config.pipeline.race
        assert config.pipeline.toolchain.go_command == "go"
        assert config.ignore_pattern == "*.log"
        assert config.watch_root == tmp_path
        assert config.skip_vcs
        assert not config.never_run

    def test_arguments_after_import_path_pass_through(self):
        config = cli.build_run_config(_parse("--no-run", "example.com/app", "-port", "8080", "--test"))

        assert config.args == ("-port", "8080", "--test")
        assert config.never_run
        assert not config.pipeline.run_tests

    def test_no_skip_vcs_flag(self):
        assert not cli.build_run_config(_parse("--no-skip-vcs", "example.com/app")).skip_vcs


class TestMain:
    """Tests for exit codes of main."""

    def test_missing_import_path_prints_usage_and_exits_1(self, capsys):
        assert cli.main([]) == 1
        assert capsys.readouterr().out.strip() == cli.USAGE

    @pytest.mark.parametrize("flag", ["--test", "--build", "--no-run", "--race", "--ignore GLOB", "--no-skip-vcs", "--watch DIR", "--goroot DIR", "--verbose"])
    def test_usage_lists_every_flag(self, flag):
        assert flag in cli.USAGE

    def test_invalid_goroot_exits_1(self, tmp_path, capsys):
        assert cli.main(["--goroot", str(tmp_path / "nowhere"), "example.com/app"]) == 1
        assert "goroot" in capsys.readouterr().err

    def test_resolution_error_exits_1(self):
        with patch("devloop.cli.resolve_target", AsyncMock(side_effect=ResolutionError("cannot find package"))):
            assert cli.main(["example.com/missing"]) == 1

    def test_library_target_exits_1(self, tmp_path):
        target = BuildTarget("example.com/lib", tmp_path, "lib", Path("/go/bin/lib"))

        with patch("devloop.cli.resolve_target", AsyncMock(return_value=target)):
            assert cli.main(["example.com/lib"]) == 1

    def test_keyboard_interrupt_is_a_clean_exit(self):
        with patch("devloop.cli.run", MagicMock()), patch("devloop.cli.asyncio.run", side_effect=KeyboardInterrupt):
            assert cli.main(["example.com/app"]) == 0


@pytest.mark.asyncio
async def test_run_resolves_then_drives_coordinator(tmp_path):
    target = BuildTarget("example.com/app", tmp_path, "main", Path("/go/bin/app"))
    config = cli.build_run_config(_parse("example.com/app"))
    coordinator = MagicMock()
    coordinator.run = AsyncMock()

    with patch("devloop.cli.resolve_target", AsyncMock(return_value=target)) as resolver, patch(
        "devloop.cli.Coordinator", return_value=coordinator
    ) as coordinator_cls:
        await cli.run(config)

    resolver.assert_awaited_once_with(config.pipeline.toolchain, "example.com/app")
    coordinator_cls.assert_called_once_with(config, target)
    coordinator.run.assert_awaited_once_with()
