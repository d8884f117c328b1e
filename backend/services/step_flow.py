# backend/services/step_flow.py
"""
Five-step application wizard as a pure state machine.

``transition(state, event)`` never mutates and never raises: an event that is
not allowed in the current state returns the state unchanged. The API uses the
same predicates to gate persisted step changes and submission.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

from core.catalog import ROLE_IDS, VIDEO_QUESTION_COUNT
from services.answer_merge import deep_merge

FIRST_STEP = 1
LAST_STEP = 5

STEP_NAMES = {
    1: "Personality",
    2: "AI Usage",
    3: "Domain",
    4: "Domain Basics + Coding",
    5: "Video",
}

AVAILABILITY_OPTIONS = {"0-1h", "1-2h", "2-4h", "4h+"}


class StepGateError(Exception):
    def __init__(self, step: int, message: str):
        super().__init__(message)
        self.step = step
        self.message = message


# ---------------------------
# Per-step predicates
# ---------------------------

def _filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _hobbies_filled(value: Any) -> bool:
    if isinstance(value, list):
        return any(_filled(v) for v in value)
    return _filled(value)


def _availability_set(value: Any) -> bool:
    if isinstance(value, str):
        return value in AVAILABILITY_OPTIONS
    if isinstance(value, Mapping):
        schedule = value.get("schedule") or []
        return bool(value.get("timezone")) and any(
            isinstance(s, Mapping) and s.get("days") and s.get("ranges") for s in schedule
        )
    return False


def personality_complete(answers: Mapping) -> bool:
    p = answers.get("personality") or {}
    return (
        _hobbies_filled(p.get("hobbies"))
        and _availability_set(p.get("dailyAvailability"))
        and _filled(p.get("pressureNotes"))
        and p.get("honestyCommitment") is True
    )


def domain_selected(answers: Mapping) -> bool:
    return (answers.get("domain") or {}).get("selectedRoleId") in ROLE_IDS


def uploaded_video_indices(answers: Mapping) -> set:
    recordings = (answers.get("video") or {}).get("recordings") or []
    return {r.get("questionIndex") for r in recordings if isinstance(r, Mapping)}


def all_videos_uploaded(answers: Mapping) -> bool:
    return set(range(VIDEO_QUESTION_COUNT)) <= uploaded_video_indices(answers)


def _always(_: Mapping) -> bool:
    return True


STEP_PREDICATES: Dict[int, Callable[[Mapping], bool]] = {
    1: personality_complete,
    2: _always,
    3: domain_selected,
    4: _always,
    5: all_videos_uploaded,
}


def step_is_valid(step: int, answers: Mapping) -> bool:
    predicate = STEP_PREDICATES.get(step)
    return bool(predicate and predicate(answers or {}))


def first_blocking_step(answers: Mapping, from_step: int, to_step: int) -> Optional[int]:
    """First step in [from_step, to_step) whose predicate fails, or None."""
    for step in range(from_step, to_step):
        if not step_is_valid(step, answers):
            return step
    return None


def check_step_change(answers: Mapping, current_step: int, requested_step: int) -> int:
    """Server-side gate for a persisted step change. Returns the step to store."""
    if not FIRST_STEP <= requested_step <= LAST_STEP:
        raise StepGateError(requested_step, f"Step must be between {FIRST_STEP} and {LAST_STEP}")
    if requested_step <= current_step:
        return requested_step
    blocking = first_blocking_step(answers, current_step, requested_step)
    if blocking is not None:
        raise StepGateError(blocking, f"Step {blocking} ({STEP_NAMES[blocking]}) is incomplete")
    return requested_step


# ---------------------------
# State machine
# ---------------------------

@dataclass(frozen=True)
class FlowState:
    step: int = FIRST_STEP
    answers: Dict[str, Any] = field(default_factory=dict)
    submitted: bool = False

    @classmethod
    def resume(cls, step: Optional[int], answers: Optional[Mapping], status: str = "in_progress") -> "FlowState":
        if not isinstance(step, int) or not FIRST_STEP <= step <= LAST_STEP:
            step = FIRST_STEP
        return cls(step=step, answers=dict(answers or {}), submitted=status == "submitted")


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class GoTo:
    step: int


@dataclass(frozen=True)
class AnswersChanged:
    patch: Dict[str, Any]


@dataclass(frozen=True)
class Submit:
    pass


Event = Union[Next, Back, GoTo, AnswersChanged, Submit]


def can_continue(state: FlowState) -> bool:
    return (
        not state.submitted
        and state.step < LAST_STEP
        and step_is_valid(state.step, state.answers)
    )


def can_submit(state: FlowState) -> bool:
    return not state.submitted and state.step == LAST_STEP and step_is_valid(LAST_STEP, state.answers)


def transition(state: FlowState, event: Event) -> FlowState:
    if state.submitted:
        return state

    if isinstance(event, AnswersChanged):
        return replace(state, answers=deep_merge(state.answers, event.patch))

    if isinstance(event, Next):
        return replace(state, step=state.step + 1) if can_continue(state) else state

    if isinstance(event, Back):
        return replace(state, step=max(FIRST_STEP, state.step - 1))

    if isinstance(event, GoTo):
        target = event.step
        if not FIRST_STEP <= target <= LAST_STEP:
            return state
        if target > state.step and first_blocking_step(state.answers, state.step, target) is not None:
            return state
        return replace(state, step=target)

    if isinstance(event, Submit):
        return replace(state, submitted=True) if can_submit(state) else state

    return state
