# -*- coding: utf-8 -*-
"""
Точка входа: разбор данных атрибуции и генерация ссылки-приглашения из консоли

    python -m room_link parse 'pid=Facebook&deep_link_sub1=482913'
    python -m room_link link --code 482913
"""

import argparse
import logging
import sys
from typing import List, Optional

from room_link.config import get_share_message, load_settings
from room_link.security.validators import InputValidator, ValidationError, validate_settings_data
from room_link.utils import setup_logging
from room_link.utils.deeplink import build_deep_link, extract_room_code, generate_room_code, parse_parameters

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="room_link", description="Deep link tools for game room invites")
    parser.add_argument("--env-file", help="Path to .env file with ROOM_LINK_* settings")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Extract a room code from attribution data")
    parse_cmd.add_argument("payload", help="Raw attribution payload (JSON-like or URL-encoded)")

    link_cmd = subparsers.add_parser("link", help="Build a share message with a deep link")
    link_cmd.add_argument("--code", help="6-digit room code (random if omitted)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    # stdout занят результатом команды
    setup_logging(log_level=args.log_level, stream=sys.stderr)
    settings = load_settings(args.env_file)

    if args.command == "parse":
        room_code = extract_room_code(parse_parameters(args.payload), settings.recognized_keys)
        if room_code is None:
            logger.info("No room code found in payload")
            return 1
        print(room_code)
        return 0

    room_code = args.code or generate_room_code()
    try:
        InputValidator.validate_room_code(room_code)
        validate_settings_data(settings.as_dict(), required=[])
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    link = build_deep_link(settings.base_url, settings, room_code)
    print(get_share_message(room_code, link))
    return 0


if __name__ == "__main__":
    sys.exit(main())
