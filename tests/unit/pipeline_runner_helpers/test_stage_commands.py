"""Tests for stage command construction."""

import pytest

from devloop.pipeline_runner_helpers import Stage, build_stage_command


@pytest.mark.parametrize(
    ("stage", "race", "expected"),
    [
        (Stage.TEST, False, ["go", "test", "-v", "example.com/app"]),
        (Stage.BUILD, True, ["go", "build", "-race", "-v", "example.com/app"]),
        (Stage.INSTALL, False, ["go", "install", "example.com/app"]),
        (Stage.INSTALL, True, ["go", "install", "-race", "example.com/app"]),
    ],
)
def test_build_stage_command(stage, race, expected):
    assert build_stage_command("go", stage, "example.com/app", race=race) == expected


def test_uses_alternate_go_command():
    argv = build_stage_command("/opt/go/bin/go", Stage.TEST, "./cmd/server")

    assert argv[0] == "/opt/go/bin/go"


def test_stage_str_is_verb():
    assert str(Stage.BUILD) == "build"
