# -*- coding: utf-8 -*-
"""
Интерфейсы внешних компонентов: SDK атрибуции, UI-виджеты, окно «Поделиться».

Подписка на события возвращает дескриптор Subscription, отписка выполняется
через него (или через EventChannel.unsubscribe).
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Protocol

from room_link.utils.error_handler import safe_execute

if TYPE_CHECKING:
    from room_link.config import DeepLinkSettings

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class Subscription:
    """Дескриптор подписки на EventChannel"""

    def __init__(self, channel: "EventChannel", listener: Listener):
        self._channel = channel
        self.listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Отписка. Повторный вызов ничего не делает."""
        if not self._active:
            return
        self._active = False
        self._channel._remove(self)

    def __repr__(self) -> str:
        return f"<Subscription {self._channel.name!r} active={self._active}>"


class EventChannel:
    """Канал событий с явной подпиской/отпиской"""

    def __init__(self, name: str):
        self.name = name
        self._subscriptions: List[Subscription] = []

    def subscribe(self, listener: Listener) -> Subscription:
        if not callable(listener):
            raise TypeError(f"Listener for '{self.name}' must be callable")
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.cancel()

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            logger.debug(f"Subscription already removed from '{self.name}'")

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def emit(self, *args: Any) -> None:
        """
        Вызывает слушателей в порядке подписки. Ошибка одного слушателя
        логируется и не прерывает остальных.
        """
        for subscription in list(self._subscriptions):
            if subscription.active:
                safe_execute(subscription.listener, *args, context=f"{self.name} listener")


class AttributionSDK(Protocol):
    """SDK атрибуции (AppsFlyer-подобный)"""

    conversion_data_success: EventChannel
    conversion_data_failure: EventChannel
    app_open_attribution: EventChannel
    app_open_attribution_failure: EventChannel
    deep_link_received: EventChannel

    def set_out_of_store(self, source: str) -> None: ...

    def set_one_link_custom_domains(self, domains: Iterable[str]) -> None: ...

    def initialize(self, settings: "DeepLinkSettings") -> None: ...

    def set_is_debug(self, enabled: bool) -> None: ...

    def set_resolve_deep_link_urls(self, domains: Iterable[str]) -> None: ...

    def start(self) -> None: ...


class TextDisplay(Protocol):
    """Текстовый виджет"""

    def set_text(self, value: str) -> None: ...


class ClickTrigger(Protocol):
    """Кнопка"""

    on_click: EventChannel


class ShareSheet(Protocol):
    """Системное окно «Поделиться»"""

    def share(self, subject: str, body: str) -> None: ...
