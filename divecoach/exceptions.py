class DivecoachError(ValueError):
    """Base class for errors raised by divecoach."""


class RulesConfigError(DivecoachError):
    """The ENCLOSE rules file is missing, unreadable or invalid."""


class DiveLogAdapterError(DivecoachError):
    """A stored dive-log row cannot be turned into performance data."""
