"""DDD application layer.

Use cases live in :mod:`adjust_volume.application.adjustment_service`; only the
ports are re-exported here so infrastructure modules can import them freely.
"""

from .audio_engine import AudioEngine, EngineResult
from .event_publisher import CompositeEventPublisher, EventPublisher, NullEventPublisher

__all__ = [
    "AudioEngine",
    "EngineResult",
    "CompositeEventPublisher",
    "EventPublisher",
    "NullEventPublisher",
]
