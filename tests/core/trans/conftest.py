"""Shared fixtures for translation tests."""

from __future__ import annotations

import pytest

from core.cache.manager import TranslationCache
from models.config_models import Config
from tests.core.trans.fakes import DummyEngine, SleepRecorder


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def cache() -> TranslationCache:
    return TranslationCache(max_size=100, ttl_sec=600.0)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def engine(config: Config) -> DummyEngine:
    dummy = DummyEngine()
    dummy.initialize(config)
    return dummy
