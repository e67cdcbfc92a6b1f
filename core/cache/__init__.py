"""Translation cache package.

Provides the bounded in-memory translation cache and in-flight request coalescing.
"""

from __future__ import annotations

from core.cache.inflight_manager import InFlightAbandonedError, InFlightManager
from core.cache.manager import TranslationCache

__all__: list[str] = ["InFlightAbandonedError", "InFlightManager", "TranslationCache"]
