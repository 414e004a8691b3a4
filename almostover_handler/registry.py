"""
HandlerRegistry - Explicit map-handler registration pattern

Bounded Context: Map initialization pipeline
Responsibilities:
  - Register handler factories under a name (init hooks)
  - Run every factory when a map is initialized
  - Provide introspection (available_handlers, get_help)

Problem: Patching a host base class to add a capability couples the plugin to
  the host's class hierarchy.
Solution: The host's initialization pipeline calls registered factories;
  each returns a capability object with enable()/disable().
"""

from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Set

from almostover_events import LogEvent, StructuredLogger
from almostover_handler.config import AlmostOverConfig
from almostover_handler.handler import AlmostOverHandler
from almostover_handler.host import MapHost


class MapHandler(Protocol):
    """Capability object handed back by a factory (interface)."""

    @property
    def enabled(self) -> bool:
        ...

    def enable(self) -> None:
        ...

    def disable(self) -> None:
        ...


HandlerFactory = Callable[[MapHost, Mapping[str, Any]], MapHandler]


class HandlerNotAvailableError(Exception):
    """Raised when looking up a handler name that was never registered"""
    pass


class HandlerRegistry:
    """
    Registry of map handler factories.

    Key Features:
      - Fail-fast: duplicate or unknown names rejected immediately
      - Introspection: query available handlers at runtime
      - Self-Documenting: each handler has a description

    Example:
        registry = HandlerRegistry()
        registry.register('almost_over', almost_over_factory, "Pointer proximity events")

        handlers = registry.initialize(host, {'almostDistance': 10})
        handlers['almost_over'].disable()
    """

    def __init__(self):
        self._factories: Dict[str, HandlerFactory] = {}
        self._descriptions: Dict[str, str] = {}

    def register(self, name: str, factory: HandlerFactory, description: str) -> None:
        """
        Register a handler factory.

        Args:
            name: Handler name (also the attribute hosts usually expose it as)
            factory: Callable(host, options) -> handler
            description: Human-readable description for help text

        Raises:
            ValueError: If name already registered
        """
        if name in self._factories:
            raise ValueError(f"Handler '{name}' already registered")

        self._factories[name] = factory
        self._descriptions[name] = description

    def create(self, name: str, host: MapHost, options: Optional[Mapping[str, Any]] = None) -> MapHandler:
        """
        Create one handler on a host.

        Raises:
            HandlerNotAvailableError: If name not registered
        """
        if name not in self._factories:
            raise HandlerNotAvailableError(
                f"Handler '{name}' not available. "
                f"Available handlers: {', '.join(sorted(self.available_handlers))}"
            )
        return self._factories[name](host, options or {})

    def initialize(self, host: MapHost, options: Optional[Mapping[str, Any]] = None) -> Dict[str, MapHandler]:
        """
        Run every registered factory against a freshly initialized map.

        Returns:
            Handlers by name, in registration order
        """
        return {name: self.create(name, host, options) for name in self._factories}

    def is_available(self, name: str) -> bool:
        return name in self._factories

    @property
    def available_handlers(self) -> Set[str]:
        """Snapshot of registered handler names."""
        return set(self._factories.keys())

    def get_help(self) -> Dict[str, str]:
        """Snapshot of names with descriptions."""
        return dict(self._descriptions)

    def count(self) -> int:
        return len(self._factories)


def register_almost_over(
    host: MapHost,
    options: Optional[Mapping[str, Any]] = None,
    logger: Optional[StructuredLogger] = None,
) -> AlmostOverHandler:
    """
    Install an AlmostOverHandler on a map.

    Accepts host option names (almostOver, almostDistance, ...) or
    snake_case names; enables the handler unless 'enabled' is false.

    Args:
        host: Map being initialized
        options: Map options
        logger: Structured logger shared with the handler

    Returns:
        The handler (enable/disable capability)
    """
    if isinstance(options, AlmostOverConfig):
        config = options
    else:
        config = AlmostOverConfig.from_dict(dict(options or {}))

    logger = logger or StructuredLogger(component="handler")
    handler = AlmostOverHandler(host, config, logger=logger)
    logger.info(
        event=LogEvent.HANDLER_INSTALLED,
        message="Almost-over handler installed",
        metadata={'enabled': config.enabled}
    )
    if config.enabled:
        handler.enable()
    return handler


def default_registry() -> HandlerRegistry:
    """New registry with the almost-over handler registered."""
    registry = HandlerRegistry()
    registry.register(
        'almost_over',
        register_almost_over,
        "Fires almost:over/out/move/click/dblclick near registered shapes",
    )
    return registry
