"""Task status set and transition policy."""

from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    """Operation task status values."""

    NEW = "new"
    PENDING_REVIEW = "pending_review"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    BLOCKED = "blocked"
    NOT_REQUIRED = "not_required"
    OVERDUE = "overdue"


class TransitionSource(str, Enum):
    """Who is writing a status."""

    RECONCILIATION = "reconciliation"
    MANUAL = "manual"


class InvalidTransitionError(Exception):
    """Raised when a guard refuses a status transition."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TaskStateMachine:
    """Status policy for operation tasks.

    Transitions are unrestricted: any status may follow any other and the
    later write wins. Stricter rules are layered on with a guard (see
    ``NoRegressionGuard``) rather than by editing this table.

    Derived conventions:
    - a template disabled for a company forces its task to not_required
    - re-enabling the template resets the task to new
    """

    DISABLED_STATUS = TaskStatus.NOT_REQUIRED
    REENABLED_STATUS = TaskStatus.NEW

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid (any known status to any known status)."""
        return cls.is_valid_status(from_status) and cls.is_valid_status(to_status)

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError for unknown statuses."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status, "unknown status")

    @classmethod
    def is_valid_status(cls, status: str) -> bool:
        return status in TaskStatus._value2member_map_


class TransitionGuard:
    """Optional check layered over the unrestricted status policy."""

    def check(
        self,
        from_status: TaskStatus,
        to_status: TaskStatus,
        source: TransitionSource,
    ) -> None:
        """Raise InvalidTransitionError to refuse a transition."""


class NoRegressionGuard(TransitionGuard):
    """Refuses automated writes that move an approved task backwards.

    Manual writes are never refused.
    """

    PROTECTED = {TaskStatus.APPROVED}
    REGRESSIONS = {TaskStatus.NEW, TaskStatus.PENDING_REVIEW, TaskStatus.SUBMITTED}

    def check(
        self,
        from_status: TaskStatus,
        to_status: TaskStatus,
        source: TransitionSource,
    ) -> None:
        if source is TransitionSource.MANUAL:
            return
        if from_status in self.PROTECTED and to_status in self.REGRESSIONS:
            raise InvalidTransitionError(
                from_status.value,
                to_status.value,
                "stale resync cannot reopen an approved task",
            )
