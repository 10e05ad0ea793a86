from __future__ import annotations


__copyright__ = "Copyright (C) 2024 Exam Center contributors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from django.dispatch import Signal


logger = logging.getLogger(__name__)


# Sent with keyword arguments ``room``, ``event`` and ``payload`` whenever an
# agent acts on a running exam.
exam_event = Signal()


Subscriber = Callable[[str, Any], None]


class Relay:
    """In-process room fan-out. Delivery is at most once: a subscriber that
    raises is logged and skipped.

    Rooms are assignment ids. Nothing in this app joins a room: the live
    transport serving the student clients (a websocket server, one
    subscriber per connected kiosk) calls :meth:`join` when a kiosk opens an
    exam and :meth:`leave` when it disconnects. Until one is deployed,
    :func:`center.receivers.forward_exam_event_to_relay` reports zero
    recipients and the ``exam_event`` signal is the only consumer-facing
    hook.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, list[Subscriber]] = {}
        self._lock = threading.Lock()

    def join(self, room: str, subscriber: Subscriber) -> None:
        with self._lock:
            subscribers = self._rooms.setdefault(str(room), [])
            if subscriber not in subscribers:
                subscribers.append(subscriber)

    def leave(self, room: str, subscriber: Subscriber) -> None:
        with self._lock:
            subscribers = self._rooms.get(str(room), [])
            if subscriber in subscribers:
                subscribers.remove(subscriber)
            if not subscribers:
                self._rooms.pop(str(room), None)

    def members(self, room: str) -> list[Subscriber]:
        with self._lock:
            return list(self._rooms.get(str(room), []))

    def emit(self, room: str, event: str, payload: Any = None) -> int:
        """
        :returns: the number of subscribers that accepted the event.
        """

        delivered = 0
        for subscriber in self.members(room):
            try:
                subscriber(event, payload)
            except Exception:
                logger.warning("subscriber %r in room '%s' failed on '%s'",
                        subscriber, room, event, exc_info=True)
            else:
                delivered += 1

        return delivered

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()


relay = Relay()
