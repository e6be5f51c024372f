"""
Exception hierarchy for the documentation observatory.

Library callers receive these typed errors; the CLIs translate them into
stderr messages and non-zero exit codes.
"""


class ObservatoryError(Exception):
    """Base class for all observatory errors."""


class ConfigurationError(ObservatoryError):
    """Raised when configuration is missing or invalid."""


class NotFoundError(ObservatoryError, LookupError):
    """A referenced session or milestone id does not exist."""


class SessionNotFoundError(NotFoundError):
    """Raised when an onboarding session id is unknown."""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class MilestoneNotFoundError(NotFoundError):
    """Raised when a milestone id is not in the onboarding catalog."""

    def __init__(self, milestone_id: str):
        super().__init__(f"Milestone {milestone_id} not found")
        self.milestone_id = milestone_id


class SessionStateError(ObservatoryError):
    """Raised when a lifecycle transition is not allowed (completed is terminal)."""


class UnknownMetricError(ObservatoryError, ValueError):
    """Raised when a measurement references a metric id outside the catalog."""


class StoreError(ObservatoryError):
    """Raised when a persisted store cannot be read or written."""


class LockAcquisitionError(StoreError):
    """Raised when the store lock is held by another run."""


class ScanCancelled(ObservatoryError):
    """Raised when a directory walk is cancelled or exceeds its deadline."""


class ScanLimitExceeded(ObservatoryError):
    """Raised when a directory walk visits more files than allowed."""
