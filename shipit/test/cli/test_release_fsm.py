from __future__ import annotations

from dataclasses import dataclass, replace

from shipit.cli.release_fsm import ABORTED, DONE, StepOutcome, advance, run_state_machine
from shipit.core.result import Err, Ok, Result
from shipit.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class _State:
    step: str
    counter: int


def test_run_state_machine_advances_until_done() -> None:
    seen: list[_State] = []

    def step_a(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        seen.append(s)
        return Ok(advance(replace(s, step="b", counter=s.counter + 1)))

    def step_b(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        seen.append(s)
        return Ok(DONE)

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": step_a, "b": step_b},
    )

    assert result == Ok(DONE)
    assert seen == [_State(step="a", counter=0), _State(step="b", counter=1)]


def test_run_state_machine_reports_abort() -> None:
    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": lambda s: Ok(ABORTED)},
    )

    assert isinstance(result, Ok)
    assert result.value.aborted


def test_run_state_machine_unknown_step_fails() -> None:
    result = run_state_machine(
        initial_state=_State(step="missing", counter=0),
        get_step=lambda s: s.step,
        handlers={},
    )

    assert isinstance(result, Err)
    assert result.error.message == "unknown release step: missing"


def test_run_state_machine_stops_on_handler_error() -> None:
    calls: list[str] = []

    def bad_step(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        calls.append("a")
        return Err(ReleaseError(kind="command_failed", message="boom", exit_code=7))

    def never(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        calls.append("b")
        return Ok(DONE)

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": bad_step, "b": never},
    )

    assert isinstance(result, Err)
    assert result.error.exit_code == 7
    assert calls == ["a"]
