"""Tests for ExclusionPolicy."""

import pytest

from devloop.change_scanner_helpers import ExclusionPolicy


class TestExcludesDirectory:
    """Tests for directory pruning rules."""

    @pytest.mark.parametrize("name", [".git", ".hg", ".svn"])
    def test_prunes_vcs_directories_by_default(self, name):
        assert ExclusionPolicy().excludes_directory(name)

    def test_keeps_vcs_directories_when_disabled(self):
        assert not ExclusionPolicy(skip_vcs=False).excludes_directory(".git")

    def test_matches_glob_against_base_name(self):
        policy = ExclusionPolicy(ignore_pattern="node_*")

        assert policy.excludes_directory("node_modules")
        assert not policy.excludes_directory("src")

    def test_empty_pattern_matches_nothing(self):
        assert not ExclusionPolicy(skip_vcs=False).excludes_directory("anything")


class TestExcludesFile:
    """Tests for file rules."""

    def test_vcs_rule_does_not_apply_to_files(self):
        assert not ExclusionPolicy().excludes_file(".git")

    def test_glob_applies_to_files(self):
        policy = ExclusionPolicy(ignore_pattern="*.log")

        assert policy.excludes_file("server.log")
        assert not policy.excludes_file("main.go")

    def test_only_a_glob_hides_files(self):
        assert ExclusionPolicy(ignore_pattern="*.log").hides_files
        assert not ExclusionPolicy().hides_files


def test_describe_lists_active_rules():
    assert ExclusionPolicy(ignore_pattern="*.tmp").describe() == "version-control directories and entries matching '*.tmp'"
    assert ExclusionPolicy(skip_vcs=False).describe() == "nothing"
