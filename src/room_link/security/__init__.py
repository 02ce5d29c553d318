# -*- coding: utf-8 -*-
"""
Валидация входных данных для room_link
"""

from .validators import InputValidator, ValidationError, validate_settings_data

__all__ = ['InputValidator', 'ValidationError', 'validate_settings_data']
