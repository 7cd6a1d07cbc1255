"""Single-slot transient notices (success/info/warning/error).

A later ``show`` replaces whatever is currently displayed; there is no
queue. Notices expire after ``duration_ms`` unless dismissed first.
"""
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from flask import current_app, session

DEFAULT_DURATION_MS = 3000


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notice:
    message: str
    severity: str
    duration_ms: int
    shown_at: float

    @property
    def expires_at(self) -> float:
        return self.shown_at + self.duration_ms / 1000.0


class Notifier:
    def __init__(self, default_duration_ms: int = DEFAULT_DURATION_MS, clock=time.time):
        self.default_duration_ms = default_duration_ms
        self.clock = clock
        self._notice: Optional[Notice] = None

    # storage hooks, overridden by SessionNotifier
    def _load(self) -> Optional[Notice]:
        return self._notice

    def _store(self, notice: Optional[Notice]):
        self._notice = notice

    def show(self, message: str, severity=Severity.SUCCESS, duration_ms: Optional[int] = None) -> Notice:
        notice = Notice(
            message=message,
            severity=Severity(severity).value,
            duration_ms=duration_ms if duration_ms is not None else self.default_duration_ms,
            shown_at=self.clock(),
        )
        self._store(notice)
        return notice

    def success(self, message, duration_ms=None):
        return self.show(message, Severity.SUCCESS, duration_ms)

    def info(self, message, duration_ms=None):
        return self.show(message, Severity.INFO, duration_ms)

    def warning(self, message, duration_ms=None):
        return self.show(message, Severity.WARNING, duration_ms)

    def error(self, message, duration_ms=None):
        return self.show(message, Severity.ERROR, duration_ms)

    def current(self) -> Optional[Notice]:
        notice = self._load()
        if notice is None:
            return None
        if self.clock() >= notice.expires_at:
            self._store(None)
            return None
        return notice

    def dismiss(self):
        self._store(None)

    def pop(self) -> Optional[Notice]:
        """Take the pending notice for display and clear the slot.

        The dismiss timer restarts here: a notice waiting on a slow
        redirect target is still shown for its full duration.
        """
        notice = self._load()
        self._store(None)
        if notice is not None:
            notice.shown_at = self.clock()
        return notice


class SessionNotifier(Notifier):
    """Keeps the slot in the Flask session so it survives a redirect."""

    key = "_notice"

    def _load(self):
        raw = session.get(self.key)
        return Notice(**raw) if raw else None

    def _store(self, notice):
        if notice is None:
            session.pop(self.key, None)
        else:
            session[self.key] = asdict(notice)


def get_notifier() -> SessionNotifier:
    return SessionNotifier(current_app.config.get("NOTICE_DURATION_MS", DEFAULT_DURATION_MS))
