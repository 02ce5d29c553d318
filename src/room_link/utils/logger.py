# -*- coding: utf-8 -*-
"""
Централизованная система логирования для room_link
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any
import json

LOG_FORMAT = '%(asctime)s - [%(levelname)s] - %(name)s - (%(filename)s).%(funcName)s(%(lineno)d) - %(message)s'

_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime',
}


class StructuredLogger:
    """Структурированный логгер с поддержкой JSON и ротации файлов"""

    def __init__(self, name: str, log_dir: Optional[str] = None):
        self.name = name
        self.log_dir = Path(log_dir) if log_dir else None

        # Создаем логгер
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Очищаем существующие обработчики
        self.logger.handlers.clear()

        self._setup_formatters()
        self._setup_handlers()

    def _setup_formatters(self):
        """Настройка форматтеров для логов"""
        self.file_formatter = logging.Formatter(LOG_FORMAT)
        self.json_formatter = JSONFormatter()

    def _setup_handlers(self):
        """Настройка обработчиков логов"""
        # Без каталога логов пишем только через корневой логгер (propagate)
        if self.log_dir is None:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)

        general_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.name}.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        general_handler.setLevel(logging.INFO)
        general_handler.setFormatter(self.file_formatter)
        self.logger.addHandler(general_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / "errors.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(self.file_formatter)
        self.logger.addHandler(error_handler)

        structured_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / "structured.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        structured_handler.setLevel(logging.INFO)
        structured_handler.setFormatter(self.json_formatter)
        self.logger.addHandler(structured_handler)

    def info(self, message: str, **kwargs):
        """Логирование информационного сообщения"""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Логирование предупреждения"""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs):
        """Логирование ошибки"""
        self.logger.error(message, extra=kwargs)

    def debug(self, message: str, **kwargs):
        """Логирование отладочной информации"""
        self.logger.debug(message, extra=kwargs)

    def log_deeplink_event(self, event: str, room_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Логирование событий deeplink (получен/отправлен код комнаты)"""
        self.info(
            f"Deep link event: {event}",
            event=event,
            room_code=room_code,
            details=details or {},
            log_type="deeplink"
        )


class JSONFormatter(logging.Formatter):
    """Форматтер для JSON логов"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Добавляем дополнительные поля из extra
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


# Глобальный логгер приложения
app_logger = StructuredLogger("room_link.app", log_dir=os.getenv('ROOM_LINK_LOG_DIR'))


def get_logger(name: str, log_dir: Optional[str] = None) -> StructuredLogger:
    """Получить логгер по имени"""
    return StructuredLogger(name, log_dir=log_dir)


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None, stream=None):
    """Настройка глобального логирования (консоль по умолчанию - stdout)"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Очищаем существующие обработчики
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(numeric_level)
    console_formatter = logging.Formatter(
        '%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "application.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(console_formatter)
        root_logger.addHandler(file_handler)
