# -*- coding: utf-8 -*-
"""
Модуль для валидации входных данных
"""

import re
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

ROOM_CODE_PATTERN = re.compile(r'[0-9]{6}')
PARAM_NAME_PATTERN = re.compile(r'[A-Za-z0-9_.~-]+')


class ValidationError(Exception):
    """Исключение для ошибок валидации"""
    pass


class InputValidator:
    """Класс для валидации входных данных"""

    @staticmethod
    def validate_required(value: Any, field_name: str) -> Any:
        """Проверяет, что поле обязательно для заполнения"""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Поле '{field_name}' обязательно для заполнения")
        return value

    @staticmethod
    def validate_string(value: Any, field_name: str, min_length: int = 1, max_length: int = 255) -> str:
        """Валидирует строковое поле"""
        if not isinstance(value, str):
            raise ValidationError(f"Поле '{field_name}' должно быть строкой")

        value = value.strip()
        if len(value) < min_length:
            raise ValidationError(f"Поле '{field_name}' должно содержать минимум {min_length} символов")

        if len(value) > max_length:
            raise ValidationError(f"Поле '{field_name}' не должно превышать {max_length} символов")

        return value

    @staticmethod
    def validate_url(value: Any, field_name: str) -> str:
        """Валидирует URL (схема и хост обязательны)"""
        value = InputValidator.validate_string(value, field_name, max_length=2048)

        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValidationError(f"Поле '{field_name}' должно содержать корректный URL")

        return value

    @staticmethod
    def validate_room_code(value: Any, field_name: str = 'room_code') -> str:
        """Валидирует код комнаты: ровно 6 десятичных цифр"""
        if not isinstance(value, str):
            raise ValidationError(f"Поле '{field_name}' должно быть строкой")

        if not ROOM_CODE_PATTERN.fullmatch(value):
            raise ValidationError(f"Поле '{field_name}' должно состоять ровно из 6 цифр")

        return value

    @staticmethod
    def validate_param_name(value: Any, field_name: str) -> str:
        """Валидирует имя параметра deeplink ссылки"""
        value = InputValidator.validate_string(value, field_name, max_length=64)

        if not PARAM_NAME_PATTERN.fullmatch(value):
            raise ValidationError(
                f"Поле '{field_name}' может содержать только буквы, цифры и символы _ . ~ -"
            )

        return value

    @staticmethod
    def is_room_code(value: Any) -> bool:
        """Проверка без исключения"""
        return isinstance(value, str) and bool(ROOM_CODE_PATTERN.fullmatch(value))


def validate_settings_data(data: Dict[str, Any], required: Optional[list] = None) -> Dict[str, Any]:
    """
    Валидирует словарь настроек deeplink.

    Args:
        data: Настройки (например, результат DeepLinkSettings.as_dict())
        required: Список обязательных полей (по умолчанию только dev_key)

    Returns:
        Валидированные данные

    Raises:
        ValidationError: При ошибке валидации
    """
    validated = dict(data)

    for field_name in (required if required is not None else ['dev_key']):
        validated[field_name] = InputValidator.validate_required(data.get(field_name), field_name)

    for field_name in ('deep_link_value_param', 'deep_link_sub_param', 'custom_room_code_param', 'experience_param'):
        if field_name in data:
            try:
                validated[field_name] = InputValidator.validate_param_name(data.get(field_name), field_name)
            except ValidationError as e:
                logger.warning(f"Validation error for field '{field_name}': {e}")
                raise

    if data.get('base_url'):
        validated['base_url'] = InputValidator.validate_url(data['base_url'], 'base_url')

    return validated
