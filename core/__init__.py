"""Core components of the chat translation service.

This package contains the shared data container together with the translation cache, the translation service,
the completion engines, the room broadcaster and the per-message chat coordinator.
"""

from core.shared_data import SharedData
from core.version import VERSION

__all__: list[str] = [
    "VERSION",
    "SharedData",
]
