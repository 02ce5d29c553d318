# -*- coding: utf-8 -*-
"""
room_link: обработка deeplink ссылок приглашения в игровую комнату
"""

__version__ = "0.1.0"

from room_link.config import DeepLinkSettings, load_settings
from room_link.deeplink_manager import DeepLinkManager
from room_link.utils.deeplink import (
    build_deep_link,
    extract_room_code,
    generate_room_code,
    parse_parameters,
)

__all__ = [
    'DeepLinkSettings', 'DeepLinkManager', 'load_settings',
    'parse_parameters', 'extract_room_code', 'generate_room_code', 'build_deep_link',
]
