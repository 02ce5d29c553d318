# -*- coding: utf-8 -*-
"""
Конфигурационные настройки deeplink (OneLink / AppsFlyer) и шаблоны сообщений
"""

import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "ROOM_LINK_"

SHARE_SUBJECT = "Join My Game Room"


def get_share_message(room_code: str, link: str) -> str:
    """Текст, который уходит в системное окно «Поделиться»"""
    return f"Join my game room with code: {room_code}\n{link}"


def _setting_to_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"false", "0", "off", "no"}


def _safe_strip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class DeepLinkSettings:
    """
    Настройки интеграции с сервисом атрибуции и генерации OneLink ссылок.

    Неизменяемы на протяжении сессии. Обязателен только dev_key, проверка
    выполняется в DeepLinkManager.start().
    """

    # Базовая конфигурация SDK
    dev_key: str = ""
    app_id: str = ""
    is_debug: bool = True
    out_of_store_source: str = "Dropbox"

    # OneLink
    base_url: str = ""
    media_source: str = ""
    campaign_name: str = ""
    fallback_url: str = ""
    one_link_domain: str = ""

    # Имена параметров deeplink
    deep_link_value_param: str = "joinroomcode"
    deep_link_sub_param: str = "deep_link_sub1"
    custom_room_code_param: str = "myroomcode"
    experience_param: str = "af_xp"
    experience_value: str = "custom"
    fallback_scheme: str = "deeplinkwithoutgoogleplay"
    fallback_host: str = "open"

    extra_flags: Tuple[Tuple[str, str], ...] = field(default=(("is_retargeting", "true"),))

    @property
    def recognized_keys(self) -> FrozenSet[str]:
        """Параметры, в которых ищется код комнаты"""
        return frozenset({self.deep_link_sub_param, self.custom_room_code_param})

    @property
    def resolved_fallback_url(self) -> str:
        if self.fallback_url:
            return self.fallback_url
        return f"{self.fallback_scheme}://{self.fallback_host}"

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


# Поле dataclass -> суффикс переменной окружения
_ENV_FIELDS = {
    'dev_key': 'DEV_KEY',
    'app_id': 'APP_ID',
    'out_of_store_source': 'OUT_OF_STORE_SOURCE',
    'base_url': 'BASE_URL',
    'media_source': 'MEDIA_SOURCE',
    'campaign_name': 'CAMPAIGN_NAME',
    'fallback_url': 'FALLBACK_URL',
    'one_link_domain': 'ONE_LINK_DOMAIN',
    'deep_link_value_param': 'DEEP_LINK_VALUE_PARAM',
    'deep_link_sub_param': 'DEEP_LINK_SUB_PARAM',
    'custom_room_code_param': 'CUSTOM_ROOM_CODE_PARAM',
    'experience_param': 'EXPERIENCE_PARAM',
    'experience_value': 'EXPERIENCE_VALUE',
    'fallback_scheme': 'FALLBACK_SCHEME',
    'fallback_host': 'FALLBACK_HOST',
}


def load_settings(env_file: Optional[Union[str, Path]] = None) -> DeepLinkSettings:
    """
    Загружает настройки из переменных окружения ROOM_LINK_* (и .env файла).

    Пустые значения переменных игнорируются, используется значение по умолчанию.
    Переменные, уже заданные в окружении, имеют приоритет над .env.
    """
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)
    else:
        load_dotenv(override=False)

    kwargs: Dict[str, object] = {}
    for field_name, suffix in _ENV_FIELDS.items():
        value = _safe_strip(os.getenv(ENV_PREFIX + suffix))
        if value is not None:
            kwargs[field_name] = value

    kwargs['is_debug'] = _setting_to_bool(os.getenv(ENV_PREFIX + 'DEBUG'), default=True)

    settings = DeepLinkSettings(**kwargs)
    logger.debug(
        f"Deep link settings loaded: base_url={settings.base_url!r}, "
        f"media_source={settings.media_source!r}, dev_key_set={bool(settings.dev_key)}"
    )
    return settings
