# -*- coding: utf-8 -*-
"""
Модуль для централизованной обработки ошибок
"""

import logging
import traceback
from typing import Any, Dict, Callable
from functools import wraps

from room_link.security.validators import ValidationError

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Класс для централизованной обработки ошибок"""

    def __init__(self):
        # Порядок важен: ValidationError проверяется раньше базовых типов
        self.error_mappings = {
            ValidationError: self._handle_validation_error,
            UnicodeError: self._handle_encoding_error,
            ValueError: self._handle_value_error,
            TypeError: self._handle_type_error,
            KeyError: self._handle_key_error,
        }

    def _handle_validation_error(self, error: ValidationError, context: str = "") -> Dict[str, Any]:
        """Обработка ошибок валидации (конфигурация, код комнаты, URL)"""
        logger.error(f"Validation error in {context}: {error}")
        return {
            'error': 'Validation failed',
            'message': str(error),
            'code': 'VALIDATION_ERROR',
        }

    def _handle_encoding_error(self, error: UnicodeError, context: str = "") -> Dict[str, Any]:
        """Обработка ошибок кодировки при декодировании параметров"""
        logger.warning(f"Encoding error in {context}: {error}")
        return {
            'error': 'Encoding error',
            'message': 'Не удалось декодировать параметры ссылки',
            'code': 'ENCODING_ERROR',
        }

    def _handle_value_error(self, error: ValueError, context: str = "") -> Dict[str, Any]:
        """Обработка ошибок значений"""
        logger.error(f"Value error in {context}: {error}")
        return {
            'error': 'Invalid value',
            'message': 'Некорректное значение параметра',
            'code': 'VALUE_ERROR',
        }

    def _handle_type_error(self, error: TypeError, context: str = "") -> Dict[str, Any]:
        """Обработка ошибок типов"""
        logger.error(f"Type error in {context}: {error}")
        return {
            'error': 'Type error',
            'message': 'Ошибка типа данных',
            'code': 'TYPE_ERROR',
        }

    def _handle_key_error(self, error: KeyError, context: str = "") -> Dict[str, Any]:
        """Обработка ошибок ключей"""
        logger.error(f"Key error in {context}: {error}")
        return {
            'error': 'Missing key',
            'message': 'Отсутствует обязательный параметр',
            'code': 'KEY_ERROR',
        }

    def handle_error(self, error: Exception, context: str = "") -> Dict[str, Any]:
        """Централизованная обработка ошибок"""
        error_type = type(error)

        # Ищем обработчик для конкретного типа ошибки
        for error_class, handler in self.error_mappings.items():
            if issubclass(error_type, error_class):
                return handler(error, context)

        # Обработка неизвестных ошибок
        logger.error(f"Unhandled error in {context}: {error}\n{traceback.format_exc()}")
        return {
            'error': 'Internal error',
            'message': 'Внутренняя ошибка',
            'code': 'INTERNAL_ERROR',
        }


# Глобальный экземпляр обработчика ошибок
error_handler = ErrorHandler()


def handle_exceptions(context: str = "", default_return: Any = None):
    """Декоратор: логирует исключение и возвращает default_return"""
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except Exception as e:
                error_info = error_handler.handle_error(e, context or f.__name__)
                logger.error(f"Error in {context or f.__name__}: {error_info}")
                return default_return

        return decorated_function
    return decorator


def safe_execute(func: Callable, *args, context: str = "", default_return: Any = None, **kwargs) -> Any:
    """Безопасное выполнение функции с обработкой ошибок"""
    try:
        return func(*args, **kwargs)
    except Exception as e:
        name = context or getattr(func, '__name__', repr(func))
        error_info = error_handler.handle_error(e, name)
        logger.error(f"Safe execute error in {name}: {error_info}")
        return default_return
