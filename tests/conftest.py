#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Общие фикстуры для pytest тестов
"""

import sys
import random
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

project_root = Path(__file__).parent.parent

# Добавляем путь к src для импорта модулей
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from room_link.collaborators import EventChannel
from room_link.config import DeepLinkSettings

logger = logging.getLogger(__name__)

ROOM_LINK_ENV_VARS = (
    "DEV_KEY", "APP_ID", "DEBUG", "OUT_OF_STORE_SOURCE", "BASE_URL", "MEDIA_SOURCE",
    "CAMPAIGN_NAME", "FALLBACK_URL", "ONE_LINK_DOMAIN", "DEEP_LINK_VALUE_PARAM",
    "DEEP_LINK_SUB_PARAM", "CUSTOM_ROOM_CODE_PARAM", "EXPERIENCE_PARAM",
    "EXPERIENCE_VALUE", "FALLBACK_SCHEME", "FALLBACK_HOST",
)


class FakeAttributionSDK:
    """Тестовый SDK атрибуции: запоминает вызовы, события отправляются вручную"""

    def __init__(self):
        self.calls = []
        self.conversion_data_success = EventChannel("conversion_data_success")
        self.conversion_data_failure = EventChannel("conversion_data_failure")
        self.app_open_attribution = EventChannel("app_open_attribution")
        self.app_open_attribution_failure = EventChannel("app_open_attribution_failure")
        self.deep_link_received = EventChannel("deep_link_received")

    def set_out_of_store(self, source):
        self.calls.append(("set_out_of_store", source))

    def set_one_link_custom_domains(self, domains):
        self.calls.append(("set_one_link_custom_domains", list(domains)))

    def initialize(self, settings):
        self.calls.append(("initialize", settings.dev_key, settings.app_id))

    def set_is_debug(self, enabled):
        self.calls.append(("set_is_debug", enabled))

    def set_resolve_deep_link_urls(self, domains):
        self.calls.append(("set_resolve_deep_link_urls", list(domains)))

    def start(self):
        self.calls.append(("start",))

    @property
    def call_names(self):
        return [call[0] for call in self.calls]


class FakeTextDisplay:
    def __init__(self, text="placeholder"):
        self.text = text
        self.history = []

    def set_text(self, value):
        self.text = value
        self.history.append(value)


class FakeButton:
    def __init__(self):
        self.on_click = EventChannel("share_button.on_click")

    def click(self):
        self.on_click.emit()


@pytest.fixture
def settings():
    """Настройки с заполненным dev_key"""
    return DeepLinkSettings(
        dev_key="test-dev-key",
        app_id="id123456789",
        base_url="https://game.onelink.me/AbCd",
        media_source="FB",
        campaign_name="spring",
        one_link_domain="game.onelink.me",
    )


@pytest.fixture
def fake_sdk():
    return FakeAttributionSDK()


@pytest.fixture
def share_sheet():
    return MagicMock(name="share_sheet")


@pytest.fixture
def share_button():
    return FakeButton()


@pytest.fixture
def generated_display():
    return FakeTextDisplay()


@pytest.fixture
def received_display():
    return FakeTextDisplay()


@pytest.fixture
def seeded_rng():
    return random.Random(20240611)


@pytest.fixture
def clean_env(monkeypatch):
    """
    Очищает переменные ROOM_LINK_*. setenv перед delenv нужен, чтобы monkeypatch
    удалил после теста и переменные, выставленные через load_dotenv.
    """
    for suffix in ROOM_LINK_ENV_VARS:
        monkeypatch.setenv(f"ROOM_LINK_{suffix}", "")
        monkeypatch.delenv(f"ROOM_LINK_{suffix}")
    return monkeypatch


@pytest.fixture
def no_dotenv(clean_env):
    """Отключает чтение .env из рабочего каталога"""
    mock_load = MagicMock(return_value=False)
    clean_env.setattr("room_link.config.load_dotenv", mock_load)
    return mock_load
