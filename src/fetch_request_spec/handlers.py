"""
Named, reusable spec fragments.

A handler is a callback that receives a ``HandlerContext`` and configures
``ctx.spec`` in place::

    @handler("authenticated")
    def authenticated(ctx):
        ctx.spec.with_headers("Authorization", f"Bearer {ctx.data['token']}")

    spec("authenticated", {"token": "abc"}).get("/api/me")
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .errors import DuplicateHandlerError, UnknownHandlerError

if TYPE_CHECKING:
    from .builder import RequestSpec

logger = logging.getLogger(__name__)

LOG_PREFIX = "[HandlerRegistry]"


@dataclass
class HandlerContext:
    """Argument passed to a handler callback."""
    spec: "RequestSpec"
    data: Any = None


HandlerFn = Callable[[HandlerContext], Any]


class HandlerRegistry:
    """Mapping of handler names to callbacks."""

    def __init__(self) -> None:
        self._handlers: Dict[str, HandlerFn] = {}

    def register(self, name: str, callback: HandlerFn, *, replace: bool = False) -> HandlerFn:
        """
        Register ``callback`` under ``name``.

        Raises:
            DuplicateHandlerError: if ``name`` is taken and ``replace`` is False.
        """
        if not isinstance(name, str) or not name:
            raise ValueError(f"Handler name must be a non-empty string, got {name!r}")
        if not callable(callback):
            raise TypeError(f"Handler '{name}' must be callable")

        if name in self._handlers:
            if not replace:
                raise DuplicateHandlerError(name)
            logger.warning(f"{LOG_PREFIX} Overwriting existing handler '{name}'")

        self._handlers[name] = callback
        logger.debug(f"{LOG_PREFIX} Registered handler '{name}'")
        return callback

    def handler(self, name: str, *, replace: bool = False) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator form of :meth:`register`."""
        def decorator(fn: HandlerFn) -> HandlerFn:
            return self.register(name, fn, replace=replace)
        return decorator

    def get(self, name: str) -> HandlerFn:
        fn = self._handlers.get(name)
        if fn is None:
            raise UnknownHandlerError(name)
        return fn

    def has(self, name: str) -> bool:
        return name in self._handlers

    def unregister(self, name: str) -> Optional[HandlerFn]:
        return self._handlers.pop(name, None)

    def clear(self) -> None:
        self._handlers.clear()

    def names(self) -> List[str]:
        return list(self._handlers)

    def invoke(self, name: str, spec: "RequestSpec", data: Any = None) -> None:
        """
        Run handler ``name`` against ``spec``.

        The callback mutates the live spec directly; anything it raises
        propagates unchanged.
        """
        fn = self.get(name)
        logger.debug(f"{LOG_PREFIX} Applying handler '{name}'")
        fn(HandlerContext(spec=spec, data=data))

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


_default_registry = HandlerRegistry()


def get_default_registry() -> HandlerRegistry:
    return _default_registry


# Module-level aliases for cleaner imports
register_handler = _default_registry.register
handler = _default_registry.handler
