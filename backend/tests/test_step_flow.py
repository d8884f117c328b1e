# backend/tests/test_step_flow.py
import pytest

from conftest import complete_personality, recordings_for
from services.step_flow import (
    AnswersChanged,
    Back,
    FlowState,
    GoTo,
    Next,
    StepGateError,
    Submit,
    can_continue,
    can_submit,
    check_step_change,
    personality_complete,
    transition,
)


def _with_videos(answers):
    return {**answers, "video": {"recordings": recordings_for("a")}}


def test_step1_needs_all_four_fields():
    answers = complete_personality()
    assert personality_complete(answers)

    for field, empty in [
        ("hobbies", ""),
        ("dailyAvailability", None),
        ("pressureNotes", "   "),
        ("honestyCommitment", False),
    ]:
        broken = {"personality": {**answers["personality"], field: empty}}
        assert not personality_complete(broken), field


def test_structured_availability_counts_as_set():
    p = complete_personality()["personality"]
    p["dailyAvailability"] = {
        "timezone": "Asia/Kolkata",
        "schedule": [{"days": ["Mon"], "ranges": [{"start": "09:00", "end": "11:00"}]}],
    }
    assert personality_complete({"personality": p})


def test_continue_disabled_until_complete_and_again_when_cleared():
    state = FlowState()
    assert not can_continue(state)

    state = transition(state, AnswersChanged(complete_personality()))
    assert can_continue(state)

    state = transition(state, AnswersChanged({"personality": {"pressureNotes": ""}}))
    assert not can_continue(state)
    assert transition(state, Next()) == state


def test_next_back_and_goto():
    state = transition(FlowState(), AnswersChanged(complete_personality()))
    state = transition(state, Next())
    assert state.step == 2
    state = transition(state, Next())
    assert state.step == 3

    # domain not picked: cannot move on, cannot jump ahead
    assert transition(state, Next()).step == 3
    assert transition(state, GoTo(5)).step == 3

    state = transition(state, AnswersChanged({"domain": {"selectedRoleId": "ai_ml"}}))
    assert transition(state, GoTo(5)).step == 5

    # backward never needs validity
    assert transition(state, GoTo(1)).step == 1
    assert transition(FlowState(step=1), Back()).step == 1
    assert transition(state, GoTo(9)) == state


def test_submit_only_from_valid_step5_and_is_terminal():
    answers = _with_videos({**complete_personality(), "domain": {"selectedRoleId": "ai_ml"}})
    state = FlowState(step=4, answers=answers)
    assert not can_submit(state)
    assert transition(state, Submit()) == state

    state = transition(state, Next())
    assert state.step == 5 and can_submit(state)

    done = transition(state, Submit())
    assert done.submitted
    for event in (Next(), Back(), GoTo(1), AnswersChanged({"x": 1}), Submit()):
        assert transition(done, event) is done


def test_step5_requires_every_slot():
    answers = {"video": {"recordings": recordings_for("a", indices=[0, 1, 2, 3])}}
    assert not can_submit(FlowState(step=5, answers=answers))


def test_resume_clamps_bad_steps():
    assert FlowState.resume(0, {}).step == 1
    assert FlowState.resume(7, {}).step == 1
    assert FlowState.resume(3, {}, "submitted").submitted


def test_server_side_step_gate():
    assert check_step_change({}, 3, 1) == 1
    with pytest.raises(StepGateError) as exc:
        check_step_change({}, 1, 2)
    assert exc.value.step == 1

    with pytest.raises(StepGateError):
        check_step_change({}, 1, 6)

    assert check_step_change(complete_personality(), 1, 3) == 3
