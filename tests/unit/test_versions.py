"""Tests for toolchain version comparison and stable resolution."""

from __future__ import annotations

import asyncio

import pytest
from semver import Version

from cratematrix.core.errors import VersionParseError
from cratematrix.core.versions import (
    ToolchainId,
    ToolchainKind,
    resolve_stable,
    versions_geq,
)
from cratematrix.models.results import CommandOutput

STABLE = Version.parse("1.60.0")


class TestToolchainId:
    def test_parse_concrete(self):
        tid = ToolchainId.parse("1.40.0")
        assert tid.kind is ToolchainKind.CONCRETE
        assert tid.version == Version.parse("1.40.0")

    def test_parse_symbolic(self):
        assert ToolchainId.parse("stable").kind is ToolchainKind.STABLE
        assert ToolchainId.parse("nightly").kind is ToolchainKind.NIGHTLY

    def test_stable_resolves_to_fetched_version(self):
        assert ToolchainId.parse("stable").resolve(STABLE) == STABLE

    @pytest.mark.parametrize("name", ["not-a-version", "01.2.3", "1.40", "1.0.0-", "v1.2.3"])
    def test_malformed_raises(self, name):
        with pytest.raises(VersionParseError):
            ToolchainId.parse(name)

    def test_parsed_ids_are_hashable(self):
        assert len({ToolchainId.parse("1.40.0"), ToolchainId.parse("1.40.0")}) == 1


class TestVersionsGeq:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("1.40.0", "1.40.0", True),
            ("1.41.0", "1.40.0", True),
            ("1.40.0", "1.41.0", False),
            ("1.40.1", "1.40.0", True),
            ("1.9.0", "1.10.0", False),
            ("2.0.0", "1.99.99", True),
            ("1.0.0", "1.0.0+build5", True),
            ("1.0.0+build5", "1.0.0", True),
            ("1.0.0-alpha.beta", "1.0.0-alpha.1", True),
            ("1.0.0-alpha.1", "1.0.0-alpha.beta", False),
            ("1.0.0-beta.11", "1.0.0-beta.2", True),
            ("1.0.0-rc.1", "1.0.0", False),
            ("1.0.0", "1.0.0-rc.1", True),
        ],
    )
    def test_concrete_matches_semver_ordering(self, a, b, expected):
        assert versions_geq(a, b, STABLE) is expected

    @pytest.mark.parametrize("other", ["1.0.0", "1.60.0", "99.0.0", "stable", "nightly"])
    def test_nightly_is_geq_everything(self, other):
        assert versions_geq("nightly", other, STABLE) is True

    @pytest.mark.parametrize("other", ["1.0.0", "1.60.0", "99.0.0", "stable"])
    def test_nothing_but_nightly_reaches_nightly(self, other):
        assert versions_geq(other, "nightly", STABLE) is False

    def test_stable_substituted_on_left(self):
        assert versions_geq("stable", "1.50.0", STABLE) is True
        assert versions_geq("stable", "1.61.0", STABLE) is False

    def test_stable_substituted_on_right(self):
        assert versions_geq("1.60.0", "stable", STABLE) is True
        assert versions_geq("1.59.0", "stable", STABLE) is False

    def test_malformed_version_is_fatal(self):
        with pytest.raises(VersionParseError):
            versions_geq("1.40.0", "garbage", STABLE)


class TestResolveStable:
    def test_parses_second_token(self, make_runner, settings):
        runner = make_runner(stable="1.72.1")
        assert asyncio.run(resolve_stable(runner, settings)) == Version.parse("1.72.1")
        args, _, _ = runner.calls[0]
        assert args == ("cargo", "+stable", "--version")

    def test_unparsable_output_raises(self, make_runner, settings):
        runner = make_runner(stable="unknown")
        with pytest.raises(VersionParseError):
            asyncio.run(resolve_stable(runner, settings))

    def test_failed_command_raises(self, settings):
        class BrokenCargo:
            async def run(self, args, *, cwd=None, env=None):
                return CommandOutput(args=tuple(args), returncode=101)

        with pytest.raises(VersionParseError):
            asyncio.run(resolve_stable(BrokenCargo(), settings))
