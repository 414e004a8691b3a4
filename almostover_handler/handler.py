"""
Almost-Over Handler
===================

Capability object attached to one host map.

Responsibilities:
- Hook/unhook host events (enable/disable lifecycle)
- Throttle pointer moves, forward clicks unthrottled
- Keep the tolerance buffer current on viewport changes
- Fire ProximityEvents back on the host under almost:* names

NOT responsible for: geometry (almostover_geometry) or transition rules
(ProximitySession).
"""

from typing import Any, Optional

from almostover_geometry import GeoPoint, SnapResult
from almostover_events import LogEvent, PointerEvent, ProximityEvent, StructuredLogger
from almostover_handler.config import AlmostOverConfig
from almostover_handler.host import MapHost, latlng_of
from almostover_handler.session import ProximitySession
from almostover_handler.throttle import Throttle

CLICK_KINDS = ("click", "dblclick")
VIEWPORT_KINDS = ("viewreset", "zoomend")


class AlmostOverHandler:
    """
    Fires almost:over / almost:out / almost:move / almost:click /
    almost:dblclick on the host map when the pointer is near a registered
    shape.

    Usage:
        handler = AlmostOverHandler(host, AlmostOverConfig(tolerance_distance=10))
        handler.add_shape(polyline)
        handler.enable()
        host.on("almost:over", on_over)
    """

    def __init__(
        self,
        host: MapHost,
        config: Optional[AlmostOverConfig] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            host: Map the handler is attached to
            config: Options (defaults to AlmostOverConfig())
            logger: Structured logger (default: component "handler")
        """
        self.host = host
        self.config = config or AlmostOverConfig()
        self._logger = logger or StructuredLogger(component="handler")

        self.session = ProximitySession(
            projector=host,
            tolerance=self.config.tolerance_distance,
            emit=self._fire,
            logger=self._logger,
        )
        self._sampler = Throttle(self._on_pointer_move, self.config.sampling_period, host)
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ---------- Lifecycle ----------

    def enable(self) -> None:
        """Hook into host events. No-op if already enabled."""
        if self._enabled:
            return
        self._enabled = True

        if self.config.track_pointer_move:
            self.host.on("mousemove", self._sampler)
        for kind in CLICK_KINDS:
            self.host.on(kind, self._on_click)
        for kind in VIEWPORT_KINDS:
            self.host.on(kind, self._compute_buffer)
        self.host.when_ready(self._compute_buffer)

        self._logger.info(
            event=LogEvent.HANDLER_ENABLED,
            message="Proximity tracking enabled",
            metadata={
                'tolerance_distance': self.config.tolerance_distance,
                'sampling_period_ms': self.config.sampling_period_ms,
                'track_pointer_move': self.config.track_pointer_move,
            }
        )

    def disable(self) -> None:
        """Unhook host events and drop any pending pointer sample."""
        if not self._enabled:
            return
        self._enabled = False

        self.host.off("mousemove", self._sampler)
        for kind in CLICK_KINDS:
            self.host.off(kind, self._on_click)
        for kind in VIEWPORT_KINDS:
            self.host.off(kind, self._compute_buffer)
        self._sampler.cancel()
        self.session.reset()

        self._logger.info(
            event=LogEvent.HANDLER_DISABLED,
            message="Proximity tracking disabled",
            metadata={'shapes': len(self.session)}
        )

    def close(self) -> None:
        """Disable and forget every registered shape."""
        self.disable()
        self.session.clear()

    # ---------- Shapes ----------

    def add_shape(self, shape: Any) -> None:
        """Consider a shape (or every leaf of a group) for proximity."""
        self.session.register(shape)

    def remove_shape(self, shape: Any) -> None:
        """Stop considering a shape (or every leaf of a group)."""
        self.session.unregister(shape)

    def get_closest(self, latlng: Any) -> Optional[SnapResult]:
        """Closest registered shape within tolerance of latlng."""
        return self.session.closest(GeoPoint.coerce(latlng))

    @property
    def tolerance_buffer(self) -> float:
        """Tolerance in map units at the current view."""
        return self.session.tolerance_buffer

    # ---------- Host callbacks ----------

    def _fire(self, event: ProximityEvent) -> None:
        # a throttled sample may land after disable()
        if self._enabled:
            self.host.fire(event.event_type.value, event)

    def _on_pointer_move(self, event: PointerEvent) -> None:
        latlng = latlng_of(event)
        if latlng is None or not self._enabled:
            return
        self.session.on_pointer_move(latlng)

    def _on_click(self, event: PointerEvent) -> None:
        latlng = latlng_of(event)
        if latlng is None:
            return
        self.session.on_click(latlng, event.kind)

    def _compute_buffer(self, event: Any = None) -> None:
        buffer = self.host.pixel_to_map_distance(self.config.tolerance_distance)
        self.session.update_tolerance_buffer(buffer)
        self._logger.debug(
            event=LogEvent.BUFFER_RECOMPUTED,
            message="Tolerance buffer recomputed",
            metadata={'buffer': buffer, 'zoom': self.host.get_zoom()}
        )

    def __repr__(self) -> str:
        return f"AlmostOverHandler(enabled={self._enabled}, session={self.session!r})"
