"""Tests for task status policy."""

import pytest

from filing_engine.services.state_machine import (
    InvalidTransitionError,
    NoRegressionGuard,
    TaskStateMachine,
    TaskStatus,
    TransitionGuard,
    TransitionSource,
)


class TestTaskStateMachine:
    """Test the unrestricted transition policy."""

    def test_any_transition_is_allowed(self):
        """Every known status may follow every known status."""
        for from_status in TaskStatus:
            for to_status in TaskStatus:
                assert TaskStateMachine.can_transition(from_status.value, to_status.value) is True

    def test_regressions_are_allowed(self):
        # approved → new (stale resync overwrites)
        assert TaskStateMachine.can_transition("approved", "new") is True

        # not_required → approved
        assert TaskStateMachine.can_transition("not_required", "approved") is True

    def test_unknown_statuses_are_invalid(self):
        assert TaskStateMachine.can_transition("new", "done") is False
        assert TaskStateMachine.can_transition("done", "new") is False

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for unknown statuses."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            TaskStateMachine.validate_transition("new", "finished")

        assert exc_info.value.from_status == "new"
        assert exc_info.value.to_status == "finished"

    def test_enable_disable_convention(self):
        assert TaskStateMachine.DISABLED_STATUS is TaskStatus.NOT_REQUIRED
        assert TaskStateMachine.REENABLED_STATUS is TaskStatus.NEW


class TestTransitionGuards:
    """Test optional guards layered over the policy."""

    def test_base_guard_allows_everything(self):
        TransitionGuard().check(
            TaskStatus.APPROVED, TaskStatus.NEW, TransitionSource.RECONCILIATION
        )

    @pytest.mark.parametrize(
        "to_status",
        [TaskStatus.NEW, TaskStatus.PENDING_REVIEW, TaskStatus.SUBMITTED],
    )
    def test_no_regression_guard_refuses_automated_reopen(self, to_status):
        with pytest.raises(InvalidTransitionError) as exc_info:
            NoRegressionGuard().check(
                TaskStatus.APPROVED, to_status, TransitionSource.RECONCILIATION
            )
        assert exc_info.value.from_status == "approved"
        assert exc_info.value.reason

    def test_no_regression_guard_allows_manual_writes(self):
        NoRegressionGuard().check(TaskStatus.APPROVED, TaskStatus.NEW, TransitionSource.MANUAL)

    def test_no_regression_guard_allows_other_moves(self):
        guard = NoRegressionGuard()
        guard.check(TaskStatus.APPROVED, TaskStatus.REJECTED, TransitionSource.RECONCILIATION)
        guard.check(TaskStatus.NEW, TaskStatus.APPROVED, TransitionSource.RECONCILIATION)
        guard.check(TaskStatus.BLOCKED, TaskStatus.NEW, TransitionSource.RECONCILIATION)
