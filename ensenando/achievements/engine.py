"""
Achievement system.

  - evaluate():          rule table x metrics -> newly satisfied definitions
  - check_and_unlock():  metrics + evaluation + persistence (+ upstream report)
  - reconcile():         remote catalog/state merged with local unlock records

Unlock records are monotonic: one per (user, achievement), never revoked,
only their date can be refreshed.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ensenando.achievements.definitions import ACHIEVEMENTS, AchievementDefinition
from ensenando.achievements.metrics import AchievementMetrics, collect_metrics
from ensenando.achievements.models import Achievement, UserAchievement
from ensenando.achievements.remote import RemoteAchievementClient
from ensenando.achievements.schemas import AchievementDisplay
from ensenando.achievements.usage import UsageTracker

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(levelname)s: [ACHIEVEMENT] %(message)s'))
    logger.addHandler(handler)
    logger.propagate = False

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class InvalidIdentifierError(ValueError):
    """A user or achievement id is missing or not a positive integer."""


def require_id(value, name: str = "id_usuario") -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise InvalidIdentifierError(f"{name} es requerido") from None
    if ident <= 0:
        raise InvalidIdentifierError(f"{name} inválido: {value}")
    return ident


def format_date(dt: datetime | None) -> str | None:
    return dt.strftime(DATE_FORMAT) if dt else None


# ---------------------------------------------------------------------------
# DISPLAY MAPPING
# ---------------------------------------------------------------------------

def catalog_display(definition: AchievementDefinition, user_id: int | None = None) -> AchievementDisplay:
    """Catalog entry as shown before any unlock information is applied."""
    return AchievementDisplay(
        id=definition.id,
        achievement_id=definition.id,
        user_id=user_id,
        title=definition.title,
        name=definition.title,
        description=definition.description,
        unlocked=False,
    )


def unlocked_display(definition: AchievementDefinition, user_id: int, obtained_at: datetime) -> AchievementDisplay:
    stamp = format_date(obtained_at)
    return catalog_display(definition, user_id).model_copy(update={
        "unlocked": True,
        "progress": 100,
        "unlocked_at": stamp,
        "obtained_at": stamp,
    })


# ---------------------------------------------------------------------------
# UNLOCK RECORD STORE
# ---------------------------------------------------------------------------

def get_unlock_records(db: Session, user_id: int) -> dict[int, datetime]:
    rows = db.query(UserAchievement).filter(UserAchievement.user_id == user_id).all()
    return {r.achievement_id: r.obtained_at for r in rows}


def get_unlocked(db: Session, user_id: int) -> set[int]:
    return set(get_unlock_records(db, user_id))


def insert_unlock(db: Session, user_id: int, achievement_id: int, obtained_at: datetime) -> bool:
    """Insert an unlock record. Returns True if newly created, False if it already existed."""
    existing = db.query(UserAchievement).filter_by(user_id=user_id, achievement_id=achievement_id).first()
    if existing:
        return False
    db.add(UserAchievement(user_id=user_id, achievement_id=achievement_id, obtained_at=obtained_at))
    try:
        db.commit()
    except IntegrityError:
        # Another request inserted the same pair first
        db.rollback()
        return False
    logger.info(f"user={user_id} earned logro={achievement_id}")
    return True


def unlock_or_refresh(db: Session, user_id: int, achievement_id: int, obtained_at: datetime) -> tuple[UserAchievement, bool]:
    """Insert the record, or refresh its date when it already exists. Returns (record, created)."""
    if insert_unlock(db, user_id, achievement_id, obtained_at):
        created = True
    else:
        created = False
        record = db.query(UserAchievement).filter_by(user_id=user_id, achievement_id=achievement_id).one()
        record.obtained_at = obtained_at
        db.commit()
    record = db.query(UserAchievement).filter_by(user_id=user_id, achievement_id=achievement_id).one()
    return record, created


def ensure_default_achievements(db: Session) -> int:
    """Upsert the catalog table from the rule table (fixed ids). Returns rows created."""
    existing = {a.id: a for a in db.query(Achievement).all()}
    created = 0
    for definition in ACHIEVEMENTS:
        row = existing.get(definition.id)
        if row is None:
            db.add(Achievement(id=definition.id, titulo=definition.title, descripcion=definition.description))
            created += 1
        else:
            row.titulo = definition.title
            row.descripcion = definition.description
    db.commit()
    return created


# ---------------------------------------------------------------------------
# EVALUATION
# ---------------------------------------------------------------------------

def evaluate(
    metrics: AchievementMetrics,
    unlocked_ids: set[int],
    definitions=ACHIEVEMENTS,
) -> list[AchievementDefinition]:
    """Definitions whose condition holds and that are not unlocked yet, in table order."""
    return [d for d in definitions if d.id not in unlocked_ids and d.check(metrics)]


def unlock_from_metrics(
    db: Session,
    user_id: int,
    metrics: AchievementMetrics,
    now: datetime,
    remote: RemoteAchievementClient | None = None,
) -> list[AchievementDisplay]:
    """Persist every newly satisfied rule; returns display records of this call's unlocks."""
    already = get_unlocked(db, user_id)

    newly = []
    for definition in evaluate(metrics, already):
        if not insert_unlock(db, user_id, definition.id, now):
            continue
        newly.append(unlocked_display(definition, user_id, now))
        if remote is not None and remote.enabled:
            remote.report_unlock(user_id, definition.id, now)

    return newly


def check_and_unlock(
    db: Session,
    user_id: int,
    tracker: UsageTracker,
    now: datetime | None = None,
    remote: RemoteAchievementClient | None = None,
) -> list[AchievementDisplay]:
    """
    Evaluate every rule for user_id and persist the new unlocks.
    Returns display records for achievements unlocked by this call only.
    """
    user_id = require_id(user_id)
    now = now or datetime.now()

    metrics = collect_metrics(db, user_id, tracker, now)
    return unlock_from_metrics(db, user_id, metrics, now, remote)


# ---------------------------------------------------------------------------
# LOCAL / REMOTE RECONCILIATION
# ---------------------------------------------------------------------------

def reconcile(
    remote: list[AchievementDisplay],
    local: dict[int, datetime],
    user_id: int | None = None,
) -> list[AchievementDisplay]:
    """
    Remote list is the base when non-empty, else the static catalog.
    A local unlock record always wins for the unlocked flag and dates.
    """
    base = remote if remote else [catalog_display(d, user_id) for d in ACHIEVEMENTS]

    result = []
    for entry in base:
        obtained_at = local.get(entry.resolved_id)
        if obtained_at is None:
            result.append(entry)
            continue
        stamp = format_date(obtained_at)
        result.append(entry.model_copy(update={
            "unlocked": True,
            "unlocked_at": stamp,
            "obtained_at": stamp,
            "progress": entry.progress if entry.progress is not None else 100,
        }))
    return result


def get_user_achievements(
    db: Session,
    user_id: int,
    remote: RemoteAchievementClient | None = None,
) -> list[AchievementDisplay]:
    user_id = require_id(user_id)
    remote_list = remote.fetch_achievements(user_id) if remote is not None else []
    return reconcile(remote_list, get_unlock_records(db, user_id), user_id)
