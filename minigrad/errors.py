class MinigradError(Exception):
    """Base class for errors raised by minigrad."""


class ConsumedValueError(MinigradError, RuntimeError):
    """A Value was used after being consumed as an operand."""


class InvalidTopologyError(MinigradError, ValueError):
    """An MLP was described by an unusable list of layer widths."""
