# file: editor/event_bus.py

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

Handler = Callable[[Any], Any]


@dataclass(eq=False)
class _Listener:
    handler: Handler
    once: bool = False


class EventBus:
    """
    A synchronous publish/subscribe bus for decoupled editor components.

    Handlers run on the emitting thread, in subscription order, before
    emit() returns. A failing handler is logged and skipped so one broken
    panel cannot interrupt the rest of the editor.
    """

    def __init__(self):
        # Maps a topic (str) to its listeners, in subscription order
        self._listeners: Dict[str, List[_Listener]] = defaultdict(list)
        self.logger = logging.getLogger(self.__class__.__name__)

    def on(self, topic: str, handler: Handler) -> Callable[[], None]:
        """
        Subscribes a handler to a topic.

        Args:
            topic (str): The topic to listen for (e.g., "command:stackChanged").
            handler (Callable): Called with the payload every time the topic is emitted.

        Returns:
            Callable: A function that removes this subscription when called.
        """
        return self._add(topic, _Listener(handler))

    def once(self, topic: str, handler: Handler) -> Callable[[], None]:
        """Like on(), but the handler is removed after its first call."""
        return self._add(topic, _Listener(handler, once=True))

    def off(self, topic: str, handler: Handler):
        """Removes the first subscription of handler on topic, if any."""
        listeners = self._listeners.get(topic)
        if not listeners:
            return
        for listener in listeners:
            if listener.handler == handler:
                self._remove(topic, listener)
                break

    def emit(self, topic: str, payload: Any = None):
        """
        Delivers payload to every handler subscribed to topic.

        Emitting a topic nobody listens to is a no-op.
        """
        listeners = self._listeners.get(topic)
        if not listeners:
            return

        # Iterate over a snapshot; handlers may subscribe or unsubscribe
        for listener in list(listeners):
            if listener.once:
                self._remove(topic, listener)
            try:
                listener.handler(payload)
            except Exception as e:
                self.logger.error(f"Error in handler for '{topic}': {e}", exc_info=True)

    def clear(self, topic: Optional[str] = None):
        """Removes all handlers for topic, or for every topic if none is given."""
        if topic is None:
            self._listeners.clear()
        else:
            self._listeners.pop(topic, None)

    def has_listeners(self, topic: str) -> bool:
        return self.listener_count(topic) > 0

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, ()))

    def event_names(self) -> List[str]:
        """Returns every topic that currently has at least one handler."""
        return [topic for topic, listeners in self._listeners.items() if listeners]

    def _add(self, topic: str, listener: _Listener) -> Callable[[], None]:
        self._listeners[topic].append(listener)
        return lambda: self._remove(topic, listener)

    def _remove(self, topic: str, listener: _Listener):
        listeners = self._listeners.get(topic)
        if listeners is None:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            # Already removed (e.g., unsubscribe called twice), which is fine
            pass
        if not listeners:
            del self._listeners[topic]
