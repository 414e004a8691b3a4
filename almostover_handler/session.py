"""
Proximity Session Module
========================

Stateful tracker for "almost over" transitions on one map.

Design:
- Encapsulates the registered leaf shapes and the previously closest result
- Geometry is delegated to almostover_geometry (stateless)
- Notifications go out through an injected emit callback
- One session per map; nothing at module level

State:
    IDLE: no shape within tolerance
    TRACKING: pointer within tolerance of `tracked.shape`
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from almostover_geometry import (
    GeoPoint,
    Projector,
    ProximityError,
    SnapResult,
    expand_leaves,
    snap_to_shapes,
)
from almostover_events import LogEvent, ProximityEvent, ProximityEventType, StructuredLogger


class TrackingState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"


EmitCallback = Callable[[ProximityEvent], None]


class ProximitySession:
    """
    Tracks which registered shape the pointer is almost over.

    Transitions on each pointer sample (snap without vertex refinement):
        miss, TRACKING(s)          -> out(s), IDLE
        hit,  IDLE                 -> over(new), TRACKING(new)
        hit,  TRACKING(s), s!=new  -> out(s), over(new), TRACKING(new)
        hit,  any                  -> move(new)
        miss, IDLE                 -> nothing

    Usage:
        session = ProximitySession(host, tolerance=25, emit=on_event)
        session.register(group)
        session.on_pointer_move(latlng)
    """

    def __init__(
        self,
        projector: Projector,
        tolerance: float,
        emit: EmitCallback,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            projector: Host projection primitives
            tolerance: Pixel tolerance
            emit: Receives every ProximityEvent
            logger: Structured logger (default: component "session")
        """
        self._projector = projector
        self.tolerance = tolerance
        self._emit = emit
        self._logger = logger or StructuredLogger(component="session")

        # id(shape) -> shape, insertion ordered (first registered wins ties)
        self._shapes: Dict[int, Any] = {}
        self._tracked: Optional[SnapResult] = None
        self.tolerance_buffer = 0.0

    # ---------- Registration ----------

    @property
    def shapes(self) -> Tuple[Any, ...]:
        """Registered leaf shapes, in registration order."""
        return tuple(self._shapes.values())

    def __contains__(self, shape: Any) -> bool:
        return id(shape) in self._shapes

    def __len__(self) -> int:
        return len(self._shapes)

    def register(self, shape: Any) -> int:
        """
        Register a shape; groups are expanded into their leaves.

        Returns:
            Number of leaves newly added
        """
        added = 0
        for leaf in expand_leaves(shape):
            if id(leaf) not in self._shapes:
                self._shapes[id(leaf)] = leaf
                added += 1

        self._logger.info(
            event=LogEvent.SHAPE_REGISTERED,
            message=f"Registered {added} shape(s)",
            metadata={'shape_type': _shape_type(shape), 'added': added, 'total': len(self._shapes)}
        )
        return added

    def unregister(self, shape: Any) -> int:
        """
        Unregister a shape with the same group expansion as register().

        Always resets tracking to IDLE without emitting 'out'.

        Returns:
            Number of leaves removed
        """
        removed = 0
        for leaf in expand_leaves(shape):
            if self._shapes.pop(id(leaf), None) is not None:
                removed += 1
        self._tracked = None

        self._logger.info(
            event=LogEvent.SHAPE_UNREGISTERED,
            message=f"Unregistered {removed} shape(s)",
            metadata={'shape_type': _shape_type(shape), 'removed': removed, 'total': len(self._shapes)}
        )
        return removed

    def clear(self) -> None:
        """Drop every registration and reset to IDLE."""
        self._shapes.clear()
        self._tracked = None

    # ---------- State ----------

    @property
    def tracked(self) -> Optional[SnapResult]:
        """Previously closest result (None when IDLE)."""
        return self._tracked

    @property
    def state(self) -> TrackingState:
        return TrackingState.IDLE if self._tracked is None else TrackingState.TRACKING

    def reset(self) -> None:
        """Silently return to IDLE."""
        self._tracked = None

    def update_tolerance_buffer(self, value: float) -> None:
        """Store the tolerance expressed in map units."""
        self.tolerance_buffer = value

    # ---------- Queries ----------

    def closest(self, latlng: GeoPoint) -> Optional[SnapResult]:
        """
        Closest registered shape within tolerance.

        Raises:
            ProximityError: If a registered shape cannot be measured
        """
        return snap_to_shapes(
            self._projector,
            self._shapes.values(),
            latlng,
            tolerance=self.tolerance,
            with_vertices=False,
        )

    def _safe_closest(self, latlng: GeoPoint) -> Tuple[bool, Optional[SnapResult]]:
        try:
            return True, self.closest(latlng)
        except ProximityError as e:
            self._logger.error(
                event=LogEvent.QUERY_FAILED,
                message="Proximity query failed, event ignored",
                metadata={'lat': latlng.lat, 'lng': latlng.lng},
                exc_info=e,
            )
            return False, None

    def on_pointer_move(self, latlng: GeoPoint) -> Optional[SnapResult]:
        """
        Process one pointer sample and emit transition notifications.

        A failed query leaves the state untouched and emits nothing.

        Returns:
            The closest result for this sample (None on miss or failure)
        """
        latlng = GeoPoint.coerce(latlng)
        ok, closest = self._safe_closest(latlng)
        if not ok:
            return None

        previous = self._tracked
        if closest is not None:
            if previous is None:
                self._emit_over(closest)
            elif previous.shape is not closest.shape:
                self._emit_out(previous)
                self._emit_over(closest)

            self._emit(ProximityEvent(
                event_type=ProximityEventType.MOVE,
                shape=closest.shape,
                point=closest.point,
                distance=closest.distance,
            ))
        elif previous is not None:
            self._emit_out(previous)

        self._tracked = closest
        return closest

    def on_click(self, latlng: GeoPoint, kind: str = "click") -> Optional[SnapResult]:
        """
        One-shot snap for a click; does not touch tracking state.

        Args:
            latlng: Click location
            kind: Host click kind ('click' or 'dblclick')
        """
        latlng = GeoPoint.coerce(latlng)
        event_type = ProximityEventType.for_click(kind)
        _, closest = self._safe_closest(latlng)
        if closest is None:
            return None

        self._logger.debug(
            event=LogEvent.PROXIMITY_CLICK,
            message=f"{kind} on {_shape_type(closest.shape)}",
            metadata={'distance': closest.distance}
        )
        self._emit(ProximityEvent(
            event_type=event_type,
            shape=closest.shape,
            point=closest.point,
            distance=closest.distance,
        ))
        return closest

    def _emit_over(self, closest: SnapResult) -> None:
        self._logger.debug(
            event=LogEvent.PROXIMITY_OVER,
            message=f"Pointer almost over {_shape_type(closest.shape)}",
            metadata={'distance': closest.distance}
        )
        self._emit(ProximityEvent(
            event_type=ProximityEventType.OVER,
            shape=closest.shape,
            point=closest.point,
            distance=closest.distance,
        ))

    def _emit_out(self, previous: SnapResult) -> None:
        self._logger.debug(
            event=LogEvent.PROXIMITY_OUT,
            message=f"Pointer left {_shape_type(previous.shape)}",
        )
        self._emit(ProximityEvent(event_type=ProximityEventType.OUT, shape=previous.shape))

    def __repr__(self) -> str:
        return f"ProximitySession(shapes={len(self._shapes)}, state={self.state.value})"


def _shape_type(shape: Any) -> str:
    return getattr(shape, "shape_type", type(shape).__name__)
