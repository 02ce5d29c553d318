#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit-тесты для EventChannel и Subscription
"""

import pytest
import allure
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Добавляем путь к проекту
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from room_link.collaborators import EventChannel


@pytest.mark.unit
@allure.epic("Менеджер deeplink")
@allure.feature("Каналы событий")
@allure.label("package", "src.room_link.collaborators")
class TestEventChannel:
    """Тесты подписки/отписки"""

    @allure.title("Слушатели вызываются в порядке подписки")
    @allure.severity(allure.severity_level.CRITICAL)
    @allure.tag("events", "subscribe", "unit")
    def test_emit_order(self):
        channel = EventChannel("test")
        calls = []
        channel.subscribe(lambda value: calls.append(("first", value)))
        channel.subscribe(lambda value: calls.append(("second", value)))

        channel.emit("payload")

        assert calls == [("first", "payload"), ("second", "payload")]
        assert channel.listener_count == 2

    @allure.title("Отписка через дескриптор")
    @allure.description("Повторная отмена подписки ничего не делает. **Ожидаемый результат:** слушатель больше не вызывается.")
    @allure.severity(allure.severity_level.CRITICAL)
    @allure.tag("events", "unsubscribe", "unit")
    def test_cancel_subscription(self):
        channel = EventChannel("test")
        listener = MagicMock()
        subscription = channel.subscribe(listener)

        subscription.cancel()
        subscription.cancel()
        channel.unsubscribe(subscription)
        channel.emit("payload")

        listener.assert_not_called()
        assert subscription.active is False
        assert channel.listener_count == 0

    @allure.title("Ошибка слушателя не прерывает остальных")
    @allure.severity(allure.severity_level.NORMAL)
    @allure.tag("events", "error_handling", "unit")
    def test_failing_listener_isolated(self):
        channel = EventChannel("test")
        failing = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        channel.subscribe(failing)
        channel.subscribe(healthy)

        channel.emit("payload")

        failing.assert_called_once_with("payload")
        healthy.assert_called_once_with("payload")

    @allure.title("Отписка во время рассылки")
    @allure.severity(allure.severity_level.MINOR)
    @allure.tag("events", "unsubscribe", "unit")
    def test_unsubscribe_during_emit(self):
        channel = EventChannel("test")
        second = MagicMock()
        holder = {}

        def first(_):
            holder["second"].cancel()

        channel.subscribe(first)
        holder["second"] = channel.subscribe(second)
        channel.emit("payload")

        second.assert_not_called()

    @allure.title("Подписка не-callable объекта")
    @allure.severity(allure.severity_level.MINOR)
    @allure.tag("events", "validation", "unit")
    def test_subscribe_not_callable(self):
        with pytest.raises(TypeError):
            EventChannel("test").subscribe("not callable")
