# backend/candidate_client/application.py
from typing import Any, Dict, Optional

from candidate_client.api_client import AssessmentClient
from services.step_flow import (
    AnswersChanged,
    Back,
    Event,
    FlowState,
    GoTo,
    Next,
    Submit,
    can_continue,
    can_submit,
    transition,
)


class ApplicationSession:
    """
    Local wizard state kept in step with the server: answer edits are
    saved as patches and accepted step moves are persisted.
    """

    def __init__(self, client: AssessmentClient):
        self.client = client
        self.state = FlowState()
        self.assessment: Optional[Dict[str, Any]] = None

    def load(self) -> FlowState:
        self.assessment = self.client.load()
        self.state = FlowState.resume(
            self.assessment.get("current_step"),
            self.assessment.get("answers"),
            self.assessment.get("status", "in_progress"),
        )
        return self.state

    @property
    def can_continue(self) -> bool:
        return can_continue(self.state)

    @property
    def can_submit(self) -> bool:
        return can_submit(self.state)

    def _move(self, event: Event) -> FlowState:
        before = self.state
        after = transition(before, event)
        if after.step != before.step:
            self.client.save(current_step=after.step)
        self.state = after
        return after

    def update(self, patch: Dict[str, Any]) -> FlowState:
        if self.state.submitted:
            return self.state
        self.client.save(answers_patch=patch)
        self.state = transition(self.state, AnswersChanged(patch))
        return self.state

    def sync_recordings(self, recordings) -> FlowState:
        """Mirror committed recordings locally; the commit endpoint already stored them."""
        self.state = transition(self.state, AnswersChanged({"video": {"recordings": list(recordings)}}))
        return self.state

    def next(self) -> FlowState:
        return self._move(Next())

    def back(self) -> FlowState:
        return self._move(Back())

    def go_to(self, step: int) -> FlowState:
        return self._move(GoTo(step))

    def submit(self) -> FlowState:
        if not can_submit(self.state):
            return self.state
        self.client.submit()
        self.state = transition(self.state, Submit())
        return self.state
