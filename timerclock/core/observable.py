from __future__ import annotations

from typing import Callable, List

from timerclock.helpers.logging_helper import log_exception, log_module_import

log_module_import(__name__)

ChangeSubscriber = Callable[[str], None]


class ChangeNotifier:
    """Synchronous property-changed fan-out shared by the engines.

    Subscribers are called in registration order, on the thread that made
    the change, with the name of the property that changed.
    """

    def __init__(self) -> None:
        self._change_subscribers: List[ChangeSubscriber] = []

    def subscribe(self, callback: ChangeSubscriber) -> None:
        if callback not in self._change_subscribers:
            self._change_subscribers.append(callback)

    def unsubscribe(self, callback: ChangeSubscriber) -> None:
        if callback in self._change_subscribers:
            self._change_subscribers.remove(callback)

    def _notify_changed(self, property_name: str) -> None:
        for callback in list(self._change_subscribers):
            try:
                callback(property_name)
            except Exception:
                log_exception(
                    f"Subscriber failed handling '{property_name}' change",
                    func_name=f"{type(self).__name__}._notify_changed",
                )

    def _clear_subscribers(self) -> None:
        self._change_subscribers.clear()
