from __future__ import annotations

import pytest

from interlight_chat.ai.knowledge_loader import KnowledgeSource
from interlight_chat.config.settings import get_settings
from tests.helpers.data import MANUAL_TEXT


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def knowledge() -> KnowledgeSource:
    return KnowledgeSource(MANUAL_TEXT)
