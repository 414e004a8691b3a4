"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Event Naming Convention:
    <category>.<action>

    category: handler, shape, proximity, buffer, error
    action: enabled, registered, over, recomputed, ...

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.shape_type
    | filter event = "proximity.over"
    | stats count() by bin(5m)
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - handler.*: Handler lifecycle on a map
    - shape.*: Registration changes
    - proximity.*: State machine transitions
    - buffer.*: Tolerance buffer maintenance
    - error.*: Error conditions
    """

    # ========== Handler Events ==========
    HANDLER_ENABLED = "handler.enabled"
    """Proximity tracking hooked into the host map."""

    HANDLER_DISABLED = "handler.disabled"
    """Proximity tracking unhooked from the host map."""

    HANDLER_INSTALLED = "handler.installed"
    """Handler created by the map initialization pipeline."""

    # ========== Shape Events ==========
    SHAPE_REGISTERED = "shape.registered"
    """Leaf shapes added to the session."""

    SHAPE_UNREGISTERED = "shape.unregistered"
    """Leaf shapes removed from the session."""

    # ========== Proximity Events ==========
    PROXIMITY_OVER = "proximity.over"
    """Pointer entered the tolerance zone of a shape."""

    PROXIMITY_OUT = "proximity.out"
    """Pointer left the tolerance zone of a shape."""

    PROXIMITY_CLICK = "proximity.click"
    """Click (or double click) resolved onto a shape."""

    # ========== Buffer Events ==========
    BUFFER_RECOMPUTED = "buffer.recomputed"
    """Tolerance buffer converted to map units."""

    # ========== Error Events ==========
    QUERY_FAILED = "error.query_failed"
    """A proximity query raised; the event was treated as a miss."""


HANDLER_EVENTS = {
    LogEvent.HANDLER_ENABLED,
    LogEvent.HANDLER_DISABLED,
    LogEvent.HANDLER_INSTALLED,
}

PROXIMITY_EVENTS = {
    LogEvent.PROXIMITY_OVER,
    LogEvent.PROXIMITY_OUT,
    LogEvent.PROXIMITY_CLICK,
}

ERROR_EVENTS = {
    LogEvent.QUERY_FAILED,
}
