"""
Host Map Boundary
=================

Bounded Context: what the handler needs from the map it is installed on.

- MapHost: protocol a real mapping platform adapter implements
- PlanarMap: in-memory host for flat local coordinate systems
  (x = lng * 2^zoom, y = lat * 2^zoom; identity at zoom 0) with a
  listener table and a manual clock. Used by tests and by applications
  that track proximity without a rendered map.
"""

import heapq
import itertools
import math
from typing import Any, Callable, Dict, List, Optional, Protocol

import supervision as sv

from almostover_geometry import GeoPoint, Projector, euclidean_distance
from almostover_events import PointerEvent
from almostover_handler.throttle import TimerHandle


class MapHost(Projector, Protocol):
    """Protocol for the host map (projection + events + timers)."""

    def pixel_to_map_distance(self, pixels: float) -> float:
        """Map-unit length of a pixel distance at the current view."""
        ...

    def on(self, kind: str, callback: Callable[[Any], None]) -> None:
        ...

    def off(self, kind: str, callback: Callable[[Any], None]) -> None:
        ...

    def fire(self, kind: str, payload: Any = None) -> None:
        ...

    def when_ready(self, callback: Callable[[], None]) -> None:
        """Run callback once the map is initialized (immediately if it already is)."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class _Timer:
    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class PlanarMap:
    """
    In-memory MapHost over a flat coordinate system.

    Usage:
        host = PlanarMap()
        handler = register_almost_over(host)
        host.on("almost:over", print)
        host.move_pointer(GeoPoint(lat=1, lng=5))
        host.advance(0.05)
    """

    def __init__(self, zoom: float = 0, max_zoom: float = math.inf, ready: bool = True):
        """
        Args:
            zoom: Initial zoom level
            max_zoom: Maximum zoom (math.inf for unbounded)
            ready: Whether the map starts initialized
        """
        self._zoom = zoom
        self._max_zoom = max_zoom
        self._ready = ready
        self._ready_callbacks: List[Callable[[], None]] = []
        self._listeners: Dict[str, List[Callable[[Any], None]]] = {}

        # Manual clock: heap of (due_time, sequence, timer)
        self._now = 0.0
        self._timers: List[Any] = []
        self._sequence = itertools.count()

    # ---------- Projection ----------

    @staticmethod
    def _scale(zoom: float) -> float:
        return 2.0 ** zoom

    def project(self, latlng: GeoPoint, zoom: float) -> sv.Point:
        scale = self._scale(zoom)
        return sv.Point(x=latlng.lng * scale, y=latlng.lat * scale)

    def unproject(self, point: sv.Point, zoom: float) -> GeoPoint:
        scale = self._scale(zoom)
        return GeoPoint(lat=point.y / scale, lng=point.x / scale)

    def latlng_to_layer_point(self, latlng: GeoPoint) -> sv.Point:
        return self.project(latlng, self._zoom)

    def layer_point_to_latlng(self, point: sv.Point) -> GeoPoint:
        return self.unproject(point, self._zoom)

    def get_zoom(self) -> float:
        return self._zoom

    def get_max_zoom(self) -> float:
        return self._max_zoom

    def set_zoom(self, zoom: float) -> None:
        """Change zoom and notify listeners ('zoomend')."""
        if not math.isinf(self._max_zoom) and zoom > self._max_zoom:
            raise ValueError(f"zoom {zoom} exceeds max_zoom {self._max_zoom}")
        self._zoom = zoom
        self.fire("zoomend", PointerEvent(kind="zoomend"))

    def pixel_to_map_distance(self, pixels: float) -> float:
        origin = self.layer_point_to_latlng(sv.Point(x=0, y=0))
        corner = self.layer_point_to_latlng(sv.Point(x=pixels, y=pixels))
        return euclidean_distance(
            sv.Point(x=origin.lng, y=origin.lat),
            sv.Point(x=corner.lng, y=corner.lat),
        )

    # ---------- Events ----------

    def on(self, kind: str, callback: Callable[[Any], None]) -> None:
        self._listeners.setdefault(kind, []).append(callback)

    def off(self, kind: str, callback: Callable[[Any], None]) -> None:
        listeners = self._listeners.get(kind, [])
        if callback in listeners:
            listeners.remove(callback)

    def listeners(self, kind: str) -> List[Callable[[Any], None]]:
        return list(self._listeners.get(kind, []))

    def fire(self, kind: str, payload: Any = None) -> None:
        for callback in self.listeners(kind):
            callback(payload)

    def when_ready(self, callback: Callable[[], None]) -> None:
        if self._ready:
            callback()
        else:
            self._ready_callbacks.append(callback)

    def set_ready(self) -> None:
        """Mark the map initialized and flush when_ready callbacks."""
        self._ready = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    def move_pointer(self, latlng: Any) -> None:
        self.fire("mousemove", PointerEvent(kind="mousemove", latlng=GeoPoint.coerce(latlng)))

    def click(self, latlng: Any, kind: str = "click") -> None:
        self.fire(kind, PointerEvent(kind=kind, latlng=GeoPoint.coerce(latlng)))

    # ---------- Clock ----------

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Timer:
        timer = _Timer(callback)
        heapq.heappush(self._timers, (self._now + delay, next(self._sequence), timer))
        return timer

    def advance(self, seconds: float) -> None:
        """
        Move the clock forward, running every timer that falls due.

        Timers scheduled by callbacks run too if they fall inside the interval.
        """
        deadline = self._now + seconds
        while self._timers and self._timers[0][0] <= deadline:
            due, _, timer = heapq.heappop(self._timers)
            self._now = due
            if not timer.cancelled:
                timer.callback()
        self._now = deadline

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, timer in self._timers if not timer.cancelled)

    def __repr__(self) -> str:
        return f"PlanarMap(zoom={self._zoom}, max_zoom={self._max_zoom}, now={self._now})"


def latlng_of(event: Optional[PointerEvent]) -> Optional[GeoPoint]:
    """Pointer location of a host event, None when it carries none."""
    return getattr(event, "latlng", None)
