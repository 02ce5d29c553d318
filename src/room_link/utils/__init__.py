# -*- coding: utf-8 -*-
"""
Утилиты для room_link
"""

from .error_handler import handle_exceptions, safe_execute, error_handler
from .logger import app_logger, get_logger, setup_logging

__all__ = [
    'handle_exceptions', 'safe_execute', 'error_handler',
    'app_logger', 'get_logger', 'setup_logging'
]
