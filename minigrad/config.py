import numpy as np

_default_dtype = np.float64


def get_default_dtype():
    """Scalar type used for new Values when no dtype is given."""
    return _default_dtype


def set_default_dtype(dtype):
    """
    Set the scalar type used for new Values.
    Args:
        dtype: a numpy floating type or its name (e.g. np.float32, "float32")
    """
    global _default_dtype
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise TypeError(f"Not a numpy dtype: {dtype!r}") from e
    if not np.issubdtype(resolved, np.floating):
        raise TypeError(f"Default dtype must be a floating type, got {resolved}")
    _default_dtype = resolved.type
