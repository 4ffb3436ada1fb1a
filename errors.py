"""Failure types for the county report pipeline. Every one of them aborts the run."""


class ReportError(Exception):
    """Base class for all pipeline failures."""


class ConfigurationError(ReportError):
    """Required settings are missing or invalid."""


class SourceUnavailable(ReportError):
    """A remote source could not be reached or returned an unusable response."""


class InvalidVariable(ReportError):
    """The survey service does not recognize a requested variable code."""


class EmptyResult(ReportError):
    """The state/year combination yields no rows."""


class NoMatchingState(ReportError):
    """The registration dataset has no rows for the target state."""


class AlignmentMismatch(ReportError):
    """Input series do not cover the same set of geographies."""


class MalformedSource(ReportError):
    """The registration dataset is missing required columns or cannot be parsed."""


class MalformedRegistrationValue(ReportError):
    """A registration count is not a non-negative whole number."""
