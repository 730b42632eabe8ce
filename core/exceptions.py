"""Domain-specific exceptions"""


class FlowcastError(Exception):
    """Base exception for the analytics engine"""


class InvalidParameterError(FlowcastError, ValueError):
    """A caller supplied an out-of-range parameter"""


class MalformedTransactionError(FlowcastError, ValueError):
    """A raw transaction record could not be coerced into a Transaction"""
