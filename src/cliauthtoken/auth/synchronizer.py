"""One-shot, unbuffered handoff between the callback handler and the flow."""

from __future__ import annotations

import threading
from typing import Optional, Union

from cliauthtoken.exceptions import TokenTimeoutError


class SessionSynchronizer:
    """Rendezvous carrying exactly one token from a producer to the flow.

    A publisher blocks until the flow has taken its value or the
    synchronizer is closed. Only the first published value can ever be
    received; later publishes are dropped and return ``False`` at once.

    A producer that cannot deliver a token (for example because writing
    the success page failed) publishes the exception instead, and
    :meth:`receive` raises it in the flow's thread.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        # Meaningful only once _offered is set.
        self._value: Union[str, BaseException] = ""
        self._offered = False
        self._received = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, value: Union[str, BaseException]) -> bool:
        """Hand *value* to the receiver and wait until it is taken.

        Returns:
            ``True`` if the receiver took *value*, ``False`` if it was
            dropped because another value came first or the synchronizer
            was closed.
        """
        with self._cond:
            if self._offered or self._closed:
                return False
            self._value = value
            self._offered = True
            self._cond.notify_all()
            while not self._received and not self._closed:
                self._cond.wait()
            return self._received

    def receive(self, timeout: Optional[float] = None) -> str:
        """Block until a value is published, at most *timeout* seconds.

        Args:
            timeout: Seconds to wait, or ``None`` to wait forever.

        Returns:
            The published token.

        Raises:
            TokenTimeoutError: If nothing was published in time.
            CLIAuthTokenError: Whatever error the producer published.
            RuntimeError: If called twice or after :meth:`close`.
        """
        with self._cond:
            if self._received:
                raise RuntimeError("SessionSynchronizer value was already received")
            self._cond.wait_for(lambda: self._offered or self._closed, timeout)
            if not self._offered:
                if self._closed:
                    raise RuntimeError("SessionSynchronizer closed before a value arrived")
                raise TokenTimeoutError(
                    f"No callback received within {timeout:g} seconds"
                )
            self._received = True
            value = self._value
            self._cond.notify_all()

        if isinstance(value, BaseException):
            raise value
        return value

    def close(self) -> None:
        """Release any blocked publisher. Safe to call more than once."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
