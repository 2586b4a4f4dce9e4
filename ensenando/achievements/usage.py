"""
Usage tracking: day streaks and the last-report timestamp.

State lives per installation (one row in usage_state). Keys are always
scoped to the authenticated user: "device-<id>:<X-Installation-Id>" or
"user-<id>". Each evaluation is a single read-modify-write guarded by a
lock from a fixed pool of stripes.

Streak rules:
  - no prior use          -> streak = 1
  - same calendar day     -> unchanged
  - exactly one day later -> streak + 1
  - more than one day     -> streak = 1 (returned_after_week when gap >= 7)
  - last_use is always moved to today
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from ensenando.achievements.models import UsageStateRecord

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(levelname)s: [USAGE] %(message)s'))
    logger.addHandler(handler)
    logger.propagate = False


@dataclass(frozen=True)
class UsageState:
    last_use: date | None = None
    streak: int = 0
    last_report: datetime | None = None


@dataclass(frozen=True)
class StreakInfo:
    streak: int
    returned_after_week: bool


# ---------------------------------------------------------------------------
# STORES
# ---------------------------------------------------------------------------

class UsageStore(ABC):
    """Durable snapshot storage for one installation's UsageState."""

    key: str = ""

    @abstractmethod
    def read(self) -> UsageState:
        ...

    @abstractmethod
    def write(self, state: UsageState) -> None:
        ...


class MemoryUsageStore(UsageStore):
    def __init__(self, key: str = "memory", state: UsageState | None = None):
        self.key = key
        self._state = state or UsageState()

    def read(self) -> UsageState:
        return self._state

    def write(self, state: UsageState) -> None:
        self._state = state


class SqlUsageStore(UsageStore):
    def __init__(self, db: Session, installation_id: str):
        self.db = db
        self.key = installation_id

    def _row(self) -> UsageStateRecord | None:
        return self.db.query(UsageStateRecord).filter(
            UsageStateRecord.installation_id == self.key
        ).first()

    def read(self) -> UsageState:
        row = self._row()
        if row is None:
            return UsageState()
        return UsageState(last_use=row.last_use, streak=row.streak or 0, last_report=row.last_report)

    def write(self, state: UsageState) -> None:
        row = self._row()
        if row is None:
            row = UsageStateRecord(installation_id=self.key)
            self.db.add(row)
        row.last_use = state.last_use
        row.streak = state.streak
        row.last_report = state.last_report
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


# Keys come from client headers, so locks are striped instead of per key.
LOCK_STRIPES = 64
_locks: tuple[threading.Lock, ...] = tuple(threading.Lock() for _ in range(LOCK_STRIPES))


def _lock_for(key: str) -> threading.Lock:
    return _locks[hash(key) % LOCK_STRIPES]


# ---------------------------------------------------------------------------
# STREAK STATE MACHINE
# ---------------------------------------------------------------------------

def advance_streak(state: UsageState, today: date) -> tuple[UsageState, StreakInfo]:
    """Apply one usage event on `today` to `state`."""
    streak = state.streak
    returned_after_week = False

    if state.last_use is None:
        streak = 1
    else:
        gap = (today - state.last_use).days
        if gap == 1:
            streak += 1
        elif gap > 1:
            returned_after_week = gap >= 7
            streak = 1
        # gap == 0 (same day) or negative (clock moved back): unchanged

    new_state = replace(state, last_use=today, streak=streak)
    return new_state, StreakInfo(streak=streak, returned_after_week=returned_after_week)


class UsageTracker:
    def __init__(self, store: UsageStore):
        self.store = store

    def record_use(self, today: date | None = None) -> StreakInfo:
        today = today or date.today()
        with _lock_for(self.store.key):
            new_state, info = advance_streak(self.store.read(), today)
            self.store.write(new_state)
        logger.info(f"installation={self.store.key} streak={info.streak} returned_after_week={info.returned_after_week}")
        return info

    def mark_report_generated(self, now: datetime | None = None) -> None:
        now = now or datetime.now()
        with _lock_for(self.store.key):
            self.store.write(replace(self.store.read(), last_report=now))
        logger.info(f"installation={self.store.key} report generated at {now:%Y-%m-%d %H:%M:%S}")

    def report_generated_recently(self, now: datetime | None = None, days: int = 7) -> bool:
        now = now or datetime.now()
        last = self.store.read().last_report
        if last is None:
            return False
        return last >= now - timedelta(days=days)

    def current_streak(self) -> int:
        return self.store.read().streak


def installation_key(header_value: str | None, user_id: int) -> str:
    """
    Usage state key for user_id: the client installation id namespaced by
    the user, or a per-user fallback. A header can never name another
    user's state.
    """
    value = (header_value or "").strip()
    if value:
        prefix = f"device-{user_id}:"
        return prefix + value[:128 - len(prefix)]
    return f"user-{user_id}"
