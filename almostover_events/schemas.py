"""
Proximity Event Schemas
=======================

Bounded Context: Event payloads exchanged with the host map.

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Type Safety: event kinds are a str Enum, so they double as host event names
- Serialization: to_dict() for JSON export

Message Flow:
    host pointer event -> PointerEvent -> ProximitySession -> ProximityEvent -> host.fire()
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from almostover_geometry import GeoPoint


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable ISO 8601 timestamp wrapper (UTC).

    Example:
        >>> ts = Timestamp.now()
        >>> ts.value
        '2026-10-19T15:30:45.123456+00:00'
    """
    value: str

    @classmethod
    def now(cls) -> 'Timestamp':
        """Create timestamp from current time."""
        return cls(value=datetime.now(timezone.utc).isoformat())

    def to_datetime(self) -> datetime:
        """
        Parse to datetime object.

        Raises:
            ValueError: If timestamp format invalid
        """
        try:
            return datetime.fromisoformat(self.value)
        except ValueError as e:
            raise ValueError(f"Invalid ISO timestamp: {self.value}") from e

    def to_dict(self) -> str:
        """Serialize to JSON (as string)."""
        return self.value


class ProximityEventType(str, Enum):
    """Namespaced event kinds fired on the host map."""
    OVER = "almost:over"
    OUT = "almost:out"
    MOVE = "almost:move"
    CLICK = "almost:click"
    DOUBLE_CLICK = "almost:dblclick"

    @classmethod
    def for_click(cls, kind: str) -> 'ProximityEventType':
        """
        Map a host click kind ('click' / 'dblclick') to its event type.

        Raises:
            ValueError: For any other kind
        """
        try:
            return {'click': cls.CLICK, 'dblclick': cls.DOUBLE_CLICK}[kind]
        except KeyError:
            raise ValueError(f"Unknown click kind: {kind!r}")


@dataclass(frozen=True)
class ProximityEvent:
    """
    Notification that the pointer is (or stopped being) almost over a shape.

    Attributes:
        event_type: Kind of notification
        shape: Shape concerned (identity matters)
        point: Snapped point on the shape (None for OUT)
        distance: Pixel distance from the pointer (None for OUT)
        timestamp: Creation time

    Example:
        >>> event = ProximityEvent(
        ...     event_type=ProximityEventType.OVER,
        ...     shape=line,
        ...     point=GeoPoint(lat=0.0, lng=5.0),
        ...     distance=1.0,
        ... )
    """
    event_type: ProximityEventType
    shape: Any
    point: Optional[GeoPoint] = None
    distance: Optional[float] = None
    timestamp: Timestamp = field(default_factory=Timestamp.now)

    def __post_init__(self):
        """Validate invariants."""
        if self.event_type != ProximityEventType.OUT and self.point is None:
            raise ValueError(f"{self.event_type.value} events must carry a point")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict (shape summarized by its type)."""
        result = {
            'event_type': self.event_type.value,
            'shape_type': getattr(self.shape, 'shape_type', type(self.shape).__name__),
            'timestamp': self.timestamp.to_dict(),
        }
        if self.point is not None:
            result['point'] = self.point.to_dict()
        if self.distance is not None:
            result['distance'] = self.distance
        return result


@dataclass(frozen=True)
class PointerEvent:
    """
    Pointer event delivered by the host (mousemove, click, dblclick, ...).

    Attributes:
        kind: Host event kind
        latlng: Pointer location; events without one are ignored
    """
    kind: str
    latlng: Optional[GeoPoint] = None
