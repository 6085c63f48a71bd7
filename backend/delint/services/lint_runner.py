"""
Lint Runner
Runs the external lint tooling inside a cloned workspace.

Two policies exist:
    - single-pass: one script that lints and autofixes in the same run
    - two-phase: a check command, followed by a fix command only when the
      check fails. The check result is what gets reported.
"""

import asyncio
import os
import shlex
import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from delint.core.config import Settings
from delint.core.errors import LintProcessError
from delint.utils.logger import logger

Command = Union[str, Sequence[str]]


@dataclass(frozen=True)
class LintOutcome:
    """Exit code and combined stdout/stderr of one lint run"""

    exit_code: int
    output: str

    @property
    def passed(self) -> bool:
        return self.exit_code == 0


def _split(command: Command) -> list:
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


async def run_command(command: Command, cwd: Path, timeout: float) -> LintOutcome:
    """
    Run a command in cwd and capture stdout and stderr as one text blob.

    Raises:
        LintProcessError: the process could not be started or timed out
    """
    args = _split(command)
    logger.info(f"[LintRunner] Executing: {' '.join(args)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            start_new_session=True,
        )
    except OSError as e:
        raise LintProcessError(f"Failed to start '{args[0]}': {e}") from e

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        _kill_group(process)
        await process.wait()
        raise LintProcessError(f"'{' '.join(args)}' did not finish within {timeout} seconds") from e

    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    return LintOutcome(exit_code=process.returncode, output=output)


def _kill_group(process):
    """Kill the process and every child it spawned (npm, tslint, ...)"""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class SinglePassPolicy:
    """One command that lints and fixes; its own exit code is the outcome"""

    name = "single_pass"

    def __init__(self, command: Command):
        self.command = command

    async def run(self, cwd: Path, timeout: float) -> LintOutcome:
        return await run_command(self.command, cwd, timeout)


class TwoPhasePolicy:
    """Check first, fix only when the check fails"""

    name = "two_phase"

    def __init__(self, check_command: Command, fix_command: Command):
        self.check_command = check_command
        self.fix_command = fix_command

    async def run(self, cwd: Path, timeout: float) -> LintOutcome:
        check = await run_command(self.check_command, cwd, timeout)
        if not check.passed:
            try:
                fix = await run_command(self.fix_command, cwd, timeout)
            except LintProcessError as e:
                logger.warning(f"[LintRunner] Fix phase did not run: {e}")
            else:
                logger.info(f"[LintRunner] Fix phase exited with {fix.exit_code}")
        return check


class LintRunner:

    def __init__(self, policy, timeout: float = 600):
        self.policy = policy
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "LintRunner":
        if settings.LINT_POLICY == "two_phase":
            policy = TwoPhasePolicy(settings.LINT_CHECK_COMMAND, settings.LINT_FIX_COMMAND)
        else:
            policy = SinglePassPolicy(settings.LINT_SCRIPT)
        return cls(policy, timeout=settings.LINT_TIMEOUT_SECONDS)

    async def run(self, base_dir: Path) -> LintOutcome:
        outcome = await self.policy.run(Path(base_dir), self.timeout)
        logger.info(f"[LintRunner] {self.policy.name} lint exited with {outcome.exit_code}")
        return outcome
