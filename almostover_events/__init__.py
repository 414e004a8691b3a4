"""
almostover Events
=================

Event payloads and structured logging shared by the handler.

Public API
----------
Schemas:
    ProximityEventType, ProximityEvent, PointerEvent, Timestamp

Logging:
    LogEvent, StructuredLogger, create_logger
"""

from .schemas import (
    Timestamp,
    ProximityEventType,
    ProximityEvent,
    PointerEvent,
)
from .logging import LogEvent, StructuredLogger, create_logger

__all__ = [
    # Schemas
    'Timestamp',
    'ProximityEventType',
    'ProximityEvent',
    'PointerEvent',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
