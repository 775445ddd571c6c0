"""Error types raised across the roster package."""


class RosterError(Exception):
    """Base class for all roster errors."""


class NotAuthenticatedError(RosterError):
    """Raised when a storage call is made without a user identity."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class MalformedRuleError(RosterError):
    """A task rule whose recurrence metadata cannot be evaluated."""

    def __init__(self, rule_code: str, reason: str):
        self.rule_code = rule_code
        self.reason = reason
        super().__init__(f"Rule {rule_code!r} is malformed: {reason}")


class AIServiceError(RosterError):
    """A call to the inference API failed or returned something unusable."""


class ScheduleParseError(AIServiceError):
    """The AI response could not be turned into a schedule."""


class EnvelopeError(RosterError):
    """An export envelope could not be read."""


class TemplateError(RosterError):
    """Invalid template operation (blank name, unknown id)."""
