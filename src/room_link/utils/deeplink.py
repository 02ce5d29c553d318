#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Утилиты для работы с deeplink ссылками комнат.

Сервис атрибуции отдаёт данные в двух видах:
- JSON-подобная строка: {"af_status":"Non-organic","deep_link_sub1":"482913",...}
- URL-параметры: pid=Facebook&c=spring&deep_link_sub1=482913

Код комнаты: ровно 6 десятичных цифр (100000-999999).
"""

import logging
import random
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote, unquote

from room_link.security.validators import InputValidator

if TYPE_CHECKING:
    from room_link.config import DeepLinkSettings

logger = logging.getLogger(__name__)

ROOM_CODE_LENGTH = 6
ROOM_CODE_MIN = 100000
ROOM_CODE_MAX = 999999

MEDIA_SOURCE_PARAM = "pid"
CAMPAIGN_PARAM = "c"
FALLBACK_DEEP_LINK_PARAM = "af_dp"
FALLBACK_ROOM_CODE_PARAM = "roomcode"

_ASCII_DIGITS = frozenset("0123456789")


def parse_parameters(raw: Optional[str]) -> Dict[str, str]:
    """
    Разбирает данные атрибуции в словарь параметров.

    Формат определяется по первому символу: '{' - JSON-подобный, иначе URL-параметры.
    Некорректные пары пропускаются, исключения не выбрасываются.

    Examples:
        >>> parse_parameters("pid=Facebook&c=spring&deep_link_sub1=code99102233ref")
        {'pid': 'Facebook', 'c': 'spring', 'deep_link_sub1': 'code99102233ref'}

        >>> parse_parameters('{"deep_link_sub1":"482913","media_source":null}')
        {'deep_link_sub1': '482913'}
    """
    if not raw:
        return {}

    data = raw.strip()
    if data.startswith('{'):
        return _parse_json_format(data)
    return _parse_url_format(data)


def _parse_json_format(data: str) -> Dict[str, str]:
    """
    Упрощённый разбор JSON: без вложенности, экранирования и массивов.
    Значения null (в любом регистре) отбрасываются.
    """
    parameters: Dict[str, str] = {}
    data = data.replace('\\/', '/').strip('{}')

    for pair in data.split(','):
        key, sep, value = pair.partition(':')
        if not sep:
            continue

        key = key.strip('" ')
        value = value.strip('" ')
        if value.lower() != 'null':
            parameters[key] = value

    return parameters


def _parse_url_format(data: str) -> Dict[str, str]:
    """
    Разбор key=value&key=value. Пары не из двух частей пропускаются.
    Значения null здесь не фильтруются.
    """
    parameters: Dict[str, str] = {}

    for pair in data.split('&'):
        key_value = pair.split('=')
        if len(key_value) != 2:
            continue

        try:
            # '+' не превращается в пробел: только percent-декодирование
            parameters[unquote(key_value[0], errors='strict')] = unquote(key_value[1], errors='strict')
        except UnicodeDecodeError as e:
            logger.warning(f"Skipping undecodable parameter pair '{pair}': {e}")

    return parameters


def extract_room_code(params: Mapping[str, str], recognized_keys: Iterable[str]) -> Optional[str]:
    """
    Ищет 6-значный код комнаты в распознаваемых параметрах.

    Из значения берутся цифры в исходном порядке (не обязательно подряд),
    максимум 6. Первое значение, давшее ровно 6 цифр, возвращается.
    Порядок обхода - порядок параметров в данных атрибуции.

    Returns:
        Код комнаты или None, если кода нет
    """
    keys = frozenset(recognized_keys)

    for key, value in params.items():
        if key not in keys or value is None:
            continue

        digits = [ch for ch in value if ch in _ASCII_DIGITS][:ROOM_CODE_LENGTH]
        if len(digits) == ROOM_CODE_LENGTH:
            return ''.join(digits)

    return None


def generate_room_code(rng: Optional[random.Random] = None) -> str:
    """Случайный код комнаты, равномерно из [100000, 999999]"""
    source = rng if rng is not None else random
    return str(source.randint(ROOM_CODE_MIN, ROOM_CODE_MAX))


def build_deep_link_parameters(settings: "DeepLinkSettings", room_code: str) -> List[Tuple[str, str]]:
    """
    Формирует упорядоченный набор параметров OneLink ссылки.

    Порядок фиксирован: experience, pid, c, deep_link_value, deep_link_sub,
    af_dp, custom room code, затем дополнительные флаги из настроек.
    """
    InputValidator.validate_room_code(room_code)

    fallback = f"{settings.resolved_fallback_url}?{FALLBACK_ROOM_CODE_PARAM}={room_code}"

    parameters = [
        (settings.experience_param, settings.experience_value),
        (MEDIA_SOURCE_PARAM, settings.media_source),
        (CAMPAIGN_PARAM, settings.campaign_name),
        (settings.deep_link_value_param, settings.deep_link_value_param),
        (settings.deep_link_sub_param, room_code),
        (FALLBACK_DEEP_LINK_PARAM, fallback),
        (settings.custom_room_code_param, room_code),
    ]
    parameters.extend((str(name), str(value)) for name, value in settings.extra_flags)
    return parameters


def encode_query(parameters: Iterable[Tuple[str, str]]) -> str:
    """Percent-кодирование всех ключей и значений (безопасны только A-Z a-z 0-9 - _ . ~)"""
    return '&'.join(
        f"{quote(name, safe='')}={quote(value, safe='')}"
        for name, value in parameters
    )


def build_deep_link(base_url: str, settings: "DeepLinkSettings", room_code: str) -> str:
    """
    Создаёт OneLink ссылку для приглашения в комнату.

    Args:
        base_url: Базовый адрес OneLink (например, https://game.onelink.me/AbCd)
        settings: Настройки deeplink
        room_code: Код комнаты из 6 цифр

    Returns:
        Полная ссылка вида base_url?param=value&...

    Raises:
        ValidationError: если room_code не является кодом из 6 цифр

    Example:
        Для base_url "https://x.me/a", media_source "FB" и кода "123456" ссылка
        начинается с "https://x.me/a?af_xp=custom&pid=FB&c=&" и содержит
        пару deep_link_sub1=123456.
    """
    query = encode_query(build_deep_link_parameters(settings, room_code))
    link = f"{base_url}?{query}"
    logger.debug(f"Generated deep link for room {room_code}: {link}")
    return link


__all__ = [
    'parse_parameters', 'extract_room_code', 'generate_room_code',
    'build_deep_link_parameters', 'build_deep_link', 'encode_query',
]
