"""Executor slot resolution."""

# Slots advertised when the fleet does not configure any
DEFAULT_EXECUTORS = 1


def resolve_executors(requested: int | None) -> int:
    """Number of concurrent jobs an agent advertises.

    Unset, zero or negative values fall back to a single slot.
    """
    if requested is not None and requested > 0:
        return requested
    return DEFAULT_EXECUTORS
