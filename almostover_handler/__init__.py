"""
almostover Handler
==================

Bounded Context: Proximity tracking on a live map.

Architecture:

    almostover_handler/
    ├── config.py      # AlmostOverConfig (frozen, YAML loadable)
    ├── throttle.py    # Throttle (trailing-edge, cancellable)
    ├── host.py        # MapHost protocol, PlanarMap reference host
    ├── session.py     # ProximitySession (state machine, per map)
    ├── handler.py     # AlmostOverHandler (host wiring, enable/disable)
    └── registry.py    # HandlerRegistry, register_almost_over (init hook)

Usage:

    from almostover_geometry import GeoPoint, PolylineShape
    from almostover_handler import PlanarMap, register_almost_over

    host = PlanarMap()
    handler = register_almost_over(host, {'almostDistance': 10})
    handler.add_shape(PolylineShape([(0, 0), (0, 10)]))

    host.on("almost:over", lambda event: print(event.to_dict()))
    host.move_pointer(GeoPoint(lat=1, lng=5))
"""

from almostover_handler.config import AlmostOverConfig
from almostover_handler.throttle import Throttle, Scheduler
from almostover_handler.host import MapHost, PlanarMap
from almostover_handler.session import ProximitySession, TrackingState
from almostover_handler.handler import AlmostOverHandler
from almostover_handler.registry import (
    HandlerRegistry,
    HandlerNotAvailableError,
    register_almost_over,
    default_registry,
)

__all__ = [
    "AlmostOverConfig",
    "Throttle",
    "Scheduler",
    "MapHost",
    "PlanarMap",
    "ProximitySession",
    "TrackingState",
    "AlmostOverHandler",
    "HandlerRegistry",
    "HandlerNotAvailableError",
    "register_almost_over",
    "default_registry",
]

__version__ = "1.0.0"
