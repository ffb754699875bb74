from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from shipit.core.result import Err, Ok, Result
from shipit.release.errors import ReleaseError

S = TypeVar("S")

FinishReason = Literal["done", "aborted"]


@dataclass(frozen=True, slots=True)
class StepAdvance(Generic[S]):
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish:
    reason: FinishReason

    @property
    def aborted(self) -> bool:
        return self.reason == "aborted"


StepOutcome = StepAdvance[S] | StepFinish
StepHandler = Callable[[S], Result[StepOutcome[S], ReleaseError]]
GetStep = Callable[[S], Hashable]


DONE = StepFinish(reason="done")
ABORTED = StepFinish(reason="aborted")


def advance(session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def run_state_machine(
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[Hashable, StepHandler[S]],
) -> Result[StepFinish, ReleaseError]:
    """Drive handlers until one finishes or fails.

    Each handler names the next step through the session it returns; there
    is no retry and no way back.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(
                ReleaseError(
                    kind="invalid_config",
                    message=f"unknown release step: {step}",
                )
            )

        outcome = handler(current)
        if isinstance(outcome, Err):
            return outcome

        if isinstance(outcome.value, StepFinish):
            return Ok(outcome.value)

        current = outcome.value.session
