"""One-shot, cross-thread shutdown notification"""

import threading
import weakref
from enum import Enum
from typing import Optional

from mdblog.errors import ShutdownMisuseError


class ShutdownState(str, Enum):
    armed = "armed"
    fired = "fired"


class Signal:
    """Receiving end: the server thread waits on this and stops when it fires."""

    def __init__(self):
        self._event = threading.Event()
        self._closed = False

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop listening. Firing after this is a usage error."""
        self._closed = True

    def _fire(self) -> None:
        self._event.set()


class _Sender:
    """Send-once capability. Holds its receiver weakly so a dropped Signal is detectable."""

    def __init__(self, receiver: Signal):
        self._receiver = weakref.ref(receiver)

    def send(self) -> None:
        receiver = self._receiver()
        if receiver is None or receiver.closed:
            raise ShutdownMisuseError("shutdown listener was dropped before shutdown was notified")
        receiver._fire()


class Shutdown:
    """Shared handle that request handlers use to ask the server to stop.

    Only the first notify() sends; later calls are no-ops.
    """

    def __init__(self, sender: _Sender):
        self._lock = threading.Lock()
        self._sender: Optional[_Sender] = sender
        self._state = ShutdownState.armed

    @classmethod
    def new(cls) -> tuple["Shutdown", Signal]:
        signal = Signal()
        return cls(_Sender(signal)), signal

    @property
    def state(self) -> ShutdownState:
        return self._state

    def notify(self) -> bool:
        """Fire the signal. Returns False if it had already fired.

        Raises ShutdownMisuseError when the Signal was closed or garbage collected.
        """
        with self._lock:
            if self._state is ShutdownState.fired:
                return False
            sender, self._sender = self._sender, None
            self._state = ShutdownState.fired
        sender.send()
        return True
