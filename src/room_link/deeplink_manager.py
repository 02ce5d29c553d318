# -*- coding: utf-8 -*-
"""
Менеджер deeplink: связывает SDK атрибуции, UI и окно «Поделиться»
"""

import logging
import random
import re
from typing import Any, Dict, List, Optional

from room_link.collaborators import (
    AttributionSDK,
    ClickTrigger,
    EventChannel,
    ShareSheet,
    Subscription,
    TextDisplay,
)
from room_link.config import SHARE_SUBJECT, DeepLinkSettings, get_share_message
from room_link.security.validators import InputValidator, ValidationError
from room_link.utils.deeplink import (
    build_deep_link,
    extract_room_code,
    generate_room_code,
    parse_parameters,
)
from room_link.utils.error_handler import safe_execute
from room_link.utils.logger import app_logger

logger = logging.getLogger(__name__)

FIRST_LAUNCH_PATTERN = re.compile(r'"is_first_launch"\s*:\s*true')


class DeepLinkManager:
    """
    Обработка входящих данных атрибуции (код комнаты -> UI) и
    генерация ссылок-приглашений по нажатию кнопки «Поделиться».
    """

    def __init__(
        self,
        settings: DeepLinkSettings,
        sdk: AttributionSDK,
        share_sheet: ShareSheet,
        share_button: Optional[ClickTrigger] = None,
        generated_code_display: Optional[TextDisplay] = None,
        received_code_display: Optional[TextDisplay] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.sdk = sdk
        self.share_sheet = share_sheet
        self.share_button = share_button
        self.generated_code_display = generated_code_display
        self.received_code_display = received_code_display
        self._rng = rng

        self.room_code_received = EventChannel("room_code_received")

        self._subscriptions: List[Subscription] = []
        self.is_running = False
        self.last_received_code: Optional[str] = None
        self.last_shared_code: Optional[str] = None

        self.initialize_sdk()

    def __enter__(self) -> "DeepLinkManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    # --- Жизненный цикл ---

    def initialize_sdk(self) -> None:
        """Предварительная настройка SDK (до проверки конфигурации)"""
        self.sdk.set_out_of_store(self.settings.out_of_store_source)
        self.sdk.set_one_link_custom_domains([self.settings.one_link_domain])

    def validate_configuration(self) -> bool:
        try:
            InputValidator.validate_required(self.settings.dev_key, 'dev_key')
        except ValidationError:
            logger.error("[DeepLinkManager] Dev Key not set in settings!")
            return False
        return True

    def start(self) -> bool:
        if self.is_running:
            logger.info("[DeepLinkManager] Already running")
            return True

        if not self.validate_configuration():
            return False

        self._setup_sdk()
        self._setup_ui()
        self.is_running = True
        return True

    def _setup_sdk(self) -> None:
        self.sdk.initialize(self.settings)
        self.sdk.set_is_debug(self.settings.is_debug)
        self.sdk.set_resolve_deep_link_urls([self.settings.one_link_domain])
        self.sdk.start()

        self._subscriptions.extend([
            self.sdk.conversion_data_success.subscribe(self.on_conversion_data),
            self.sdk.conversion_data_failure.subscribe(self.on_conversion_data_failure),
            self.sdk.app_open_attribution.subscribe(self.on_app_open_attribution),
            self.sdk.app_open_attribution_failure.subscribe(self.on_app_open_attribution_failure),
            self.sdk.deep_link_received.subscribe(self.on_deep_link_received),
        ])
        logger.info("[DeepLinkManager] AppsFlyer SDK initialized")

    def _setup_ui(self) -> None:
        if self.share_button is not None:
            self._subscriptions.append(self.share_button.on_click.subscribe(self.on_share_button_clicked))

        if self.received_code_display is not None:
            self.received_code_display.set_text("")

    def stop(self) -> None:
        """Отписка от всех событий. Повторный вызов безопасен."""
        for subscription in self._subscriptions:
            subscription.cancel()
        if self._subscriptions:
            logger.info(f"[DeepLinkManager] Unsubscribed {len(self._subscriptions)} listeners")
        self._subscriptions.clear()
        self.is_running = False

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.is_running,
            "subscriptions": len(self._subscriptions),
            "last_received_code": self.last_received_code,
            "last_shared_code": self.last_shared_code,
        }

    # --- Входящие данные атрибуции ---

    def on_conversion_data(self, conversion_data: str) -> Optional[str]:
        """Данные конверсии обрабатываются только при первом запуске со ссылкой"""
        logger.info(f"[DeepLinkManager] Raw Data: {conversion_data}")

        if (self.settings.deep_link_value_param in conversion_data
                and FIRST_LAUNCH_PATTERN.search(conversion_data)):
            return self.on_payload(conversion_data)

        logger.info("[DeepLinkManager] No deep link data or not first launch")
        return None

    def on_conversion_data_failure(self, error: str) -> None:
        logger.warning(f"[DeepLinkManager] Conversion Data Failed: {error}")

    def on_app_open_attribution(self, attribution_data: str) -> Optional[str]:
        logger.info(f"[DeepLinkManager] App Open Attribution Data: {attribution_data}")
        return self.on_payload(attribution_data)

    def on_app_open_attribution_failure(self, error: str) -> None:
        logger.warning(f"[DeepLinkManager] App Open Attribution Failed: {error}")

    def on_deep_link_received(self, deep_link_data: str) -> Optional[str]:
        logger.info(f"[DeepLinkManager] Deep link received: {deep_link_data}")
        return self.on_payload(deep_link_data)

    def on_payload(self, raw: str) -> Optional[str]:
        """
        Разбор данных и извлечение кода комнаты.

        Любая ошибка при разборе логируется и считается отсутствием кода.
        Если код найден - показываем его и оповещаем подписчиков room_code_received.
        """
        logger.debug(f"[DeepLinkManager] Parsing data: {raw}")
        room_code = safe_execute(self.parse_room_code, raw, context="DeepLinkManager.parse_room_code")
        if not room_code:
            return None

        self.last_received_code = room_code
        if self.received_code_display is not None:
            self.received_code_display.set_text(room_code)
        logger.info(f"[DeepLinkManager] Room code set: {room_code}")
        app_logger.log_deeplink_event("room_code_received", room_code=room_code)

        self.room_code_received.emit(room_code)
        return room_code

    def parse_room_code(self, raw: str) -> Optional[str]:
        parameters = parse_parameters(raw)
        return extract_room_code(parameters, self.settings.recognized_keys)

    # --- Отправка приглашения ---

    def on_share_button_clicked(self) -> str:
        room_code = generate_room_code(self._rng)
        self.share_room_code(room_code)
        return room_code

    def share_room_code(self, room_code: str) -> str:
        """Показывает код, собирает ссылку и отдаёт её в окно «Поделиться»"""
        if self.generated_code_display is not None:
            self.generated_code_display.set_text(room_code)

        link = build_deep_link(self.settings.base_url, self.settings, room_code)
        self.share_sheet.share(SHARE_SUBJECT, get_share_message(room_code, link))

        self.last_shared_code = room_code
        app_logger.log_deeplink_event("room_code_shared", room_code=room_code, details={"link": link})
        return link
