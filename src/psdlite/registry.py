"""
Dispatch tables keyed by record identifiers.

Example::

    from psdlite.registry import new_registry

    TYPES, register = new_registry()

    @register(1005)
    class ResolutionInfo(BaseElement):
        ...

    kind = TYPES.get(key)
"""

import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_registry() -> tuple[dict[Any, Any], Callable[..., Callable[[T], T]]]:
    """
    Returns an empty dispatch table and a ``register`` decorator filling it.

    ``register`` accepts one or more keys; registering a key twice keeps the
    latest entry.
    """
    table: dict[Any, Any] = {}

    def register(*keys: Any) -> Callable[[T], T]:
        def decorator(kind: T) -> T:
            for key in keys:
                if key in table:
                    logger.debug("overriding registered type for %r" % (key,))
                table[key] = kind
            return kind

        return decorator

    return table, register
