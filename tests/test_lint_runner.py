"""Tests for the lint policies."""

from __future__ import annotations

import asyncio
import shlex
import sys

import pytest

from delint.core.config import PROJECT_ROOT, Settings
from delint.core.errors import LintProcessError
from delint.services.lint_runner import LintRunner, SinglePassPolicy, TwoPhasePolicy, run_command


def py(code: str) -> list:
    return [sys.executable, "-c", code]


FAILING_LINT = py(
    "import sys; print('file.ts:3 unused var'); "
    "print('warning on stderr', file=sys.stderr); sys.exit(1)"
)
PASSING_LINT = py("print('all good')")
WRITE_FIX = py("open('fixed.txt', 'w').write('fixed'); import sys; sys.exit(3)")


@pytest.mark.asyncio
async def test_run_command_combines_streams(tmp_path):
    outcome = await run_command(FAILING_LINT, tmp_path, timeout=30)

    assert outcome.exit_code == 1
    assert not outcome.passed
    assert "file.ts:3 unused var" in outcome.output
    assert "warning on stderr" in outcome.output


@pytest.mark.asyncio
async def test_run_command_uses_working_directory(tmp_path):
    outcome = await run_command(py("import os; print(os.getcwd())"), tmp_path, timeout=30)

    assert outcome.output.strip().endswith(tmp_path.name)


@pytest.mark.asyncio
async def test_single_pass_reports_its_own_exit_code(tmp_path):
    runner = LintRunner(SinglePassPolicy(WRITE_FIX), timeout=30)

    outcome = await runner.run(tmp_path)

    assert outcome.exit_code == 3
    assert (tmp_path / "fixed.txt").exists()


@pytest.mark.asyncio
async def test_two_phase_runs_fix_after_failed_check(tmp_path):
    runner = LintRunner(TwoPhasePolicy(FAILING_LINT, WRITE_FIX), timeout=30)

    outcome = await runner.run(tmp_path)

    # check exit code is surfaced, not the fix's
    assert outcome.exit_code == 1
    assert "file.ts:3 unused var" in outcome.output
    assert (tmp_path / "fixed.txt").exists()


@pytest.mark.asyncio
async def test_two_phase_skips_fix_when_check_passes(tmp_path):
    runner = LintRunner(TwoPhasePolicy(PASSING_LINT, WRITE_FIX), timeout=30)

    outcome = await runner.run(tmp_path)

    assert outcome.passed
    assert not (tmp_path / "fixed.txt").exists()


@pytest.mark.asyncio
async def test_missing_executable_is_a_process_error(tmp_path):
    with pytest.raises(LintProcessError):
        await run_command(["definitely-not-a-lint-tool-xyz"], tmp_path, timeout=30)


@pytest.mark.asyncio
async def test_timeout_is_a_process_error(tmp_path):
    with pytest.raises(LintProcessError):
        await run_command(py("import time; time.sleep(10)"), tmp_path, timeout=0.2)


def test_policy_selected_from_settings():
    single = LintRunner.from_settings(Settings(GITHUB_TOKEN="t", LINT_SCRIPT="bash lint.bash"))
    two_phase = LintRunner.from_settings(
        Settings(GITHUB_TOKEN="t", LINT_POLICY="two_phase", LINT_TIMEOUT_SECONDS=42)
    )

    assert isinstance(single.policy, SinglePassPolicy)
    assert single.policy.command == "bash lint.bash"
    assert isinstance(two_phase.policy, TwoPhasePolicy)
    assert two_phase.policy.check_command == "npm run lint"
    assert two_phase.timeout == 42


@pytest.mark.asyncio
async def test_two_phase_keeps_check_outcome_when_fixer_is_missing(tmp_path):
    runner = LintRunner(TwoPhasePolicy(FAILING_LINT, [str(tmp_path / "no-such-fixer")]), timeout=30)

    outcome = await runner.run(tmp_path)

    assert outcome.exit_code == 1
    assert "file.ts:3 unused var" in outcome.output


@pytest.mark.asyncio
async def test_two_phase_keeps_check_outcome_when_fixer_times_out(tmp_path):
    runner = LintRunner(TwoPhasePolicy(FAILING_LINT, py("import time; time.sleep(10)")), timeout=1)

    outcome = await runner.run(tmp_path)

    assert outcome.exit_code == 1


def _is_running(pid: int) -> bool:
    try:
        with open(f"/proc/{pid}/stat") as stat:
            return stat.read().split(")")[-1].split()[0] != "Z"
    except FileNotFoundError:
        return False


@pytest.mark.asyncio
@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="reads /proc")
async def test_timeout_kills_child_processes(tmp_path):
    spawner = py(
        "import subprocess, sys, time; "
        "child = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(60)']); "
        "open('child.pid', 'w').write(str(child.pid)); time.sleep(60)"
    )

    with pytest.raises(LintProcessError):
        await run_command(spawner, tmp_path, timeout=2)

    pid = int((tmp_path / "child.pid").read_text())
    for _ in range(50):
        if not _is_running(pid):
            break
        await asyncio.sleep(0.1)
    assert not _is_running(pid)


def test_default_script_survives_paths_with_spaces():
    script = Settings(GITHUB_TOKEN="t").LINT_SCRIPT

    assert shlex.split(script) == ["bash", str(PROJECT_ROOT / "scripts" / "run-lint.bash")]
