"""Argument builders for cargo and rustup.

This is the only module that knows the command-line syntax of the external
tools; everything else passes the resulting argv to a ``CommandRunner``.
"""

from __future__ import annotations

from collections.abc import Sequence

from cratematrix.config import RunnerSettings


def _selector(toolchain: str) -> str:
    return f"+{toolchain}"


def version_args(settings: RunnerSettings, toolchain: str) -> list[str]:
    return [settings.cargo_bin, _selector(toolchain), "--version"]


def install_args(settings: RunnerSettings, toolchain: str) -> list[str]:
    return [settings.rustup_bin, "toolchain", "install", toolchain]


def generate_lockfile_args(settings: RunnerSettings, toolchain: str) -> list[str]:
    return [settings.cargo_bin, _selector(toolchain), "generate-lockfile"]


def update_precise_args(
    settings: RunnerSettings, toolchain: str, dependency: str, version: str
) -> list[str]:
    return [
        settings.cargo_bin,
        _selector(toolchain),
        "update",
        "-p",
        dependency,
        "--precise",
        version,
    ]


def cargo_test_args(settings: RunnerSettings, toolchain: str, features: Sequence[str]) -> list[str]:
    """``cargo +<toolchain> test`` with only ``features`` enabled."""
    return [
        settings.cargo_bin,
        _selector(toolchain),
        "test",
        "--no-default-features",
        "--features",
        ",".join(features),
    ]


def hfuzz_args(settings: RunnerSettings, toolchain: str, target: str) -> list[str]:
    return [settings.cargo_bin, _selector(toolchain), "hfuzz", "run", target]


def hfuzz_env(settings: RunnerSettings, duration_s: int) -> dict[str, str]:
    """Environment for honggfuzz: fixed run time, stop on the first crash."""
    return {
        "HFUZZ_BUILD_ARGS": settings.hfuzz_build_args,
        "HFUZZ_RUN_ARGS": f"--run_time {duration_s} --exit_upon_crash -v",
    }
