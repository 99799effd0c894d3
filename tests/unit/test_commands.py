"""Tests for the asyncio subprocess command backend."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

from cratematrix.core.commands import CommandRunner, SubprocessRunner


class TestSubprocessRunner:
    def test_satisfies_protocol(self):
        assert isinstance(SubprocessRunner(), CommandRunner)

    def test_captures_both_streams(self):
        script = "import sys; print('hello'); print('oops', file=sys.stderr)"
        output = asyncio.run(SubprocessRunner().run([sys.executable, "-c", script]))
        assert output.succeeded
        assert output.stdout.strip() == "hello"
        assert output.stderr.strip() == "oops"

    def test_nonzero_exit(self):
        output = asyncio.run(SubprocessRunner().run([sys.executable, "-c", "raise SystemExit(3)"]))
        assert output.returncode == 3
        assert not output.succeeded

    def test_cwd_and_env(self, tmp_path: Path):
        script = "import os; print(os.getcwd()); print(os.environ['HFUZZ_RUN_ARGS'])"
        output = asyncio.run(
            SubprocessRunner().run(
                [sys.executable, "-c", script], cwd=tmp_path, env={"HFUZZ_RUN_ARGS": "-v"}
            )
        )
        cwd, env_value = output.stdout.splitlines()
        assert Path(cwd).resolve() == tmp_path.resolve()
        assert env_value == "-v"

    def test_missing_program_raises_oserror(self):
        with pytest.raises(OSError):
            asyncio.run(SubprocessRunner().run(["definitely-not-a-real-binary-xyz"]))

    def test_cancel_propagates_to_caller(self):
        async def scenario():
            runner = SubprocessRunner(kill_on_cancel=True)
            task = asyncio.create_task(
                runner.run([sys.executable, "-c", "import time; time.sleep(30)"])
            )
            await asyncio.sleep(0.5)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(asyncio.wait_for(scenario(), timeout=10))
