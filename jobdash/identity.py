"""Identity session: who is signed in, plus change notifications.

The local provider replaces an interactive OAuth popup with an e-mail sign-in.
Given a session path it remembers the signed-in user in a small YAML file, so
separate CLI runs see the same identity. Without one the identity lives only
as long as the object.
"""
from __future__ import annotations

import asyncio
import hashlib
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

import yaml

from jobdash.errors import AuthFailure, StoreError
from jobdash.log import get_logger
from jobdash.models import User
from jobdash.store.base import ProfileStore

log = get_logger(__name__)

IdentityCallback = Callable[[User | None], None]

_EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)+$")


def user_id_for(email: str) -> str:
    return hashlib.sha256(email.strip().lower().encode()).hexdigest()[:16]


class IdentitySession(ABC):
    def __init__(self) -> None:
        self._subscribers: list[IdentityCallback] = []

    @property
    @abstractmethod
    def current_user(self) -> User | None:
        pass

    @abstractmethod
    async def sign_in(self, email: str, display_name: str = "") -> User | None:
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass

    def subscribe(self, callback: IdentityCallback) -> Callable[[], None]:
        """Call ``callback`` now with the current user, then on every change."""
        self._subscribers.append(callback)
        callback(self.current_user)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify_soon(self, user: User | None) -> None:
        """Deliver a transition on the next loop iteration, never inline."""
        loop = asyncio.get_running_loop()
        for callback in list(self._subscribers):
            loop.call_soon(callback, user)


class LocalIdentitySession(IdentitySession):
    def __init__(self, session_path: Path | None = None, store: ProfileStore | None = None) -> None:
        super().__init__()
        self.session_path = session_path
        self.store = store
        self._user = self._load()

    @property
    def current_user(self) -> User | None:
        return self._user

    def _load(self) -> User | None:
        if not self.session_path or not self.session_path.exists():
            return None
        try:
            data = yaml.safe_load(self.session_path.read_text(encoding="utf-8")) or {}
            return User(uid=data["uid"], email=data["email"], display_name=data.get("display_name", ""))
        except (OSError, KeyError, TypeError, yaml.YAMLError) as exc:
            log.warning("Ignoring unreadable session file %s: %s", self.session_path, exc)
            return None

    def _persist(self, user: User | None) -> None:
        if not self.session_path:
            return
        if user is None:
            self.session_path.unlink(missing_ok=True)
            return
        self.session_path.parent.mkdir(parents=True, exist_ok=True)
        data = {"uid": user.uid, "email": user.email, "display_name": user.display_name}
        self.session_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")

    async def sign_in(self, email: str, display_name: str = "") -> User | None:
        try:
            email = (email or "").strip()
            if not _EMAIL_RE.match(email):
                raise AuthFailure(f"not a valid e-mail address: {email!r}")
            user = User(uid=user_id_for(email), email=email, display_name=(display_name or "").strip())
            self._persist(user)
        except (AuthFailure, OSError) as exc:
            log.error("Error during sign-in: %s", exc)
            return None

        self._user = user
        log.info("Signed in as %s", user.email)
        if self.store is not None:
            try:
                await self.store.ensure_profile(user)
            except StoreError as exc:
                log.warning("Could not create profile for %s: %s", user.email, exc)
        self._notify_soon(user)
        return user

    async def sign_out(self) -> None:
        if self._user is None:
            return
        log.info("Signed out %s", self._user.email)
        self._user = None
        try:
            self._persist(None)
        except OSError as exc:
            log.warning("Could not clear session file: %s", exc)
        self._notify_soon(None)
