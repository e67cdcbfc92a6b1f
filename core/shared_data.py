"""Shared data management for the translation service.

This module defines the SharedData class, which serves as a centralized container for the resources shared by the
HTTP handlers and the chat coordinators: configuration, the translation cache, in-flight request coalescing, the
translation service and the room broadcaster.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cache.inflight_manager import InFlightManager
from core.cache.manager import TranslationCache
from core.chat.coordinator import ChatTranslationCoordinator
from core.trans.broadcast import RoomTranslationBroadcaster
from core.trans.manager import TransManager
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.trans.interface import CompletionInterface
    from models.config_models import Config


__all__: list[str] = ["SharedData"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class SharedData:
    _config: Config = field()
    _cache: TranslationCache = field(init=False)
    _inflight_manager: InFlightManager | None = field(init=False, default=None)
    _trans_manager: TransManager = field(init=False)
    _broadcaster: RoomTranslationBroadcaster = field(init=False)

    async def async_init(self, engine: CompletionInterface | None = None) -> None:
        """Build every shared component from the configuration.

        Args:
            engine (CompletionInterface | None): Pre-built engine; created from the configuration when None.
        """
        self._cache = TranslationCache(self.config.CACHE.MAX_SIZE, self.config.CACHE.TTL_SEC)
        if self.config.TRANSLATION.COALESCE_REQUESTS:
            self._inflight_manager = InFlightManager()
        if engine is None:
            engine = TransManager.create_engine(self.config)
        if not engine.is_available:
            logger.warning("Completion engine '%s' has no credentials; translations will fail", engine.engine_name)
        self._trans_manager = TransManager(self.config, engine, self._cache, self._inflight_manager)
        self._broadcaster = RoomTranslationBroadcaster(self._trans_manager)
        logger.info(
            "Shared components ready (cache size=%d, ttl=%.0fs)", self.config.CACHE.MAX_SIZE, self.config.CACHE.TTL_SEC
        )

    async def close(self) -> None:
        await self._trans_manager.close()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @property
    def inflight_manager(self) -> InFlightManager | None:
        return self._inflight_manager

    @property
    def trans_manager(self) -> TransManager:
        return self._trans_manager

    @property
    def broadcaster(self) -> RoomTranslationBroadcaster:
        return self._broadcaster

    def create_coordinator(self, *, local_identity: str, target_language: str) -> ChatTranslationCoordinator:
        """Create a chat coordinator bound to the shared translation service."""
        return ChatTranslationCoordinator(
            self._trans_manager, local_identity=local_identity, target_language=target_language
        )
