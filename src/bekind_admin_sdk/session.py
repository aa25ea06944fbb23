from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .credential_store import CredentialStore
from .logger import get_logger, log_event

logger = get_logger(__name__)

SessionListener = Callable[["Session"], None]


class SessionStatus(str, Enum):
    BOOTSTRAPPING = "bootstrapping"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Session:
    is_authenticated: bool
    is_loading: bool


class SessionManager:
    """Owns the authentication state derived from a CredentialStore.

    ``BOOTSTRAPPING`` is left exactly once, by ``bootstrap()`` or by an earlier
    ``login()``/``logout()``, which makes a later ``bootstrap()`` a no-op. The
    manager then moves freely between ``AUTHENTICATED`` and ``UNAUTHENTICATED``.
    Listeners are told about real transitions only, so a repeated logout does
    not notify anyone twice.
    """

    def __init__(self, store: CredentialStore) -> None:
        self.store = store
        self._status = SessionStatus.BOOTSTRAPPING
        self._is_loading = True
        self._bootstrapped = False
        self._listeners: list[SessionListener] = []

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def session(self) -> Session:
        return Session(
            is_authenticated=self._status is SessionStatus.AUTHENTICATED,
            is_loading=self._is_loading,
        )

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def credential(self) -> str | None:
        return self.store.get()

    def bootstrap(self) -> Session:
        if self._bootstrapped:
            return self.session
        self._bootstrapped = True
        token = self.store.get()
        self._is_loading = False
        self._transition(SessionStatus.AUTHENTICATED if token else SessionStatus.UNAUTHENTICATED, force_notify=True)
        log_event(logger, "session", "bootstrap", self._status.value, level=logging.DEBUG)
        return self.session

    def login(self, token: str) -> None:
        if not isinstance(token, str) or not token:
            raise ValueError("token must be a non-empty string")
        self.store.set(token)
        self._transition(SessionStatus.AUTHENTICATED)
        log_event(logger, "session", "login", "authenticated")

    def logout(self) -> None:
        self.store.clear()
        if self._transition(SessionStatus.UNAUTHENTICATED):
            log_event(logger, "session", "logout", "unauthenticated")

    def invalidate(self, reason: str) -> bool:
        """Drop the credential after the server rejected it.

        Returns True only when this call moved the session out of
        ``AUTHENTICATED``; concurrent rejections after the first return False.
        """
        was_authenticated = self.is_authenticated
        self.store.clear()
        changed = self._transition(SessionStatus.UNAUTHENTICATED)
        if changed and was_authenticated:
            log_event(logger, "session", "invalidate", "unauthenticated", level=logging.WARNING, reason=reason)
            return True
        return False

    def _transition(self, status: SessionStatus, *, force_notify: bool = False) -> bool:
        changed = status is not self._status
        self._status = status
        # An explicit login or logout settles the session without a bootstrap.
        self._is_loading = False
        self._bootstrapped = True
        if changed or force_notify:
            snapshot = self.session
            for listener in list(self._listeners):
                listener(snapshot)
        return changed
