"""Error types raised by the comparison core"""


class InvalidInputError(ValueError):
    """Rejected before tokenizing: non-string content, unknown granularity, oversized input."""


class ComparisonFailedError(RuntimeError):
    """Terminal failure while computing a comparison; the cause is chained."""
