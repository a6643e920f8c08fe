"""
Owner-scoped shipment operations.

Every function takes the caller's ``AuthContext`` and folds its user id into
the query, so another user's shipment is indistinguishable from a missing one.
"""

import logging
import math
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiptrack.core.errors import ConflictError, NotFoundError, ValidationError
from shiptrack.db.models import Shipment, ShipmentStatus
from shiptrack.security.identity import AuthContext
from shiptrack.security.utils import now_utc

logger = logging.getLogger(__name__)

TRACKING_PREFIX = "TRK-"
TRACKING_ALPHABET = string.digits + string.ascii_uppercase
TRACKING_RANDOM_LENGTH = 6
TRACKING_MAX_RETRIES = 5

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

STATUS_VALUES = {s.value for s in ShipmentStatus}


def generate_tracking_number() -> str:
    return TRACKING_PREFIX + "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_RANDOM_LENGTH))


def parse_shipment_id(raw: str) -> str:
    try:
        return uuid.UUID(raw).hex
    except (ValueError, AttributeError, TypeError):
        raise ValidationError("Invalid shipment id")


def _to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _tracking_number_taken(db: Session, tracking_number: str) -> bool:
    return db.scalar(select(Shipment.id).where(Shipment.tracking_number == tracking_number)) is not None


def _unique_tracking_number(db: Session) -> str:
    # Best effort; the unique index on tracking_number is authoritative.
    candidate = generate_tracking_number()
    for _ in range(TRACKING_MAX_RETRIES):
        if not _tracking_number_taken(db, candidate):
            break
        logger.info("Tracking number collision on %s, regenerating", candidate)
        candidate = generate_tracking_number()
    return candidate


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _get_owned(db: Session, identity: AuthContext, shipment_id: str) -> Shipment:
    sid = parse_shipment_id(shipment_id)
    stmt = select(Shipment).where(Shipment.id == sid, Shipment.owner_user_id == identity.user_id)
    shp = db.execute(stmt).scalar_one_or_none()
    if not shp:
        raise NotFoundError("Shipment not found")
    return shp


def create_shipment(
    db: Session,
    identity: AuthContext,
    *,
    customer_name: str,
    current_location: str,
    eta: datetime,
    status: Optional[ShipmentStatus] = None,
    tracking_number: Optional[str] = None,
) -> Shipment:
    if tracking_number:
        if _tracking_number_taken(db, tracking_number):
            raise ConflictError("Tracking number already exists")
    else:
        tracking_number = _unique_tracking_number(db)

    now = now_utc()
    shp = Shipment(
        owner_user_id=identity.user_id,
        tracking_number=tracking_number,
        customer_name=customer_name,
        status=status or ShipmentStatus.PENDING,
        current_location=current_location,
        eta=_to_naive_utc(eta),
        created_at=now,
        updated_at=now,
    )
    db.add(shp)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Tracking number already exists")
    db.refresh(shp)
    logger.info("Created shipment %s (%s) for user %s", shp.id, shp.tracking_number, identity.user_id)
    return shp


def list_shipments(
    db: Session,
    identity: AuthContext,
    *,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    status: Optional[str] = None,
    q: Optional[str] = None,
) -> dict:
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    conditions = [Shipment.owner_user_id == identity.user_id]
    # unknown status values are ignored rather than rejected
    if status in STATUS_VALUES:
        conditions.append(Shipment.status == ShipmentStatus(status))
    q = (q or "").strip()
    if q:
        pattern = f"%{_escape_like(q)}%"
        conditions.append(or_(
            Shipment.tracking_number.ilike(pattern, escape="\\"),
            Shipment.customer_name.ilike(pattern, escape="\\"),
            Shipment.current_location.ilike(pattern, escape="\\"),
        ))

    total = db.scalar(select(func.count(Shipment.id)).where(*conditions)) or 0
    offset = (page - 1) * page_size
    # pages past the end are empty; the offset may not fit a database integer
    items = []
    if offset < total:
        stmt = (
            select(Shipment)
            .where(*conditions)
            .order_by(Shipment.created_at.desc(), Shipment.id.desc())
            .offset(offset)
            .limit(page_size)
        )
        items = db.execute(stmt).scalars().all()
    return {
        "items": items,
        "page": page,
        "page_size": page_size,
        "total": total,
        "total_pages": math.ceil(total / page_size),
    }


def get_shipment(db: Session, identity: AuthContext, shipment_id: str) -> Shipment:
    return _get_owned(db, identity, shipment_id)


def update_shipment_status(db: Session, identity: AuthContext, shipment_id: str, status: ShipmentStatus) -> Shipment:
    shipment_id = parse_shipment_id(shipment_id)
    if not isinstance(status, ShipmentStatus):
        if status not in STATUS_VALUES:
            raise ValidationError("Invalid shipment status")
        status = ShipmentStatus(status)

    shp = _get_owned(db, identity, shipment_id)
    shp.status = status
    shp.updated_at = now_utc()
    db.add(shp); db.commit(); db.refresh(shp)
    return shp


def delete_shipment(db: Session, identity: AuthContext, shipment_id: str) -> None:
    shp = _get_owned(db, identity, shipment_id)
    sid = shp.id
    db.delete(shp)
    db.commit()
    logger.info("Deleted shipment %s for user %s", sid, identity.user_id)


def shipment_stats(db: Session, identity: AuthContext) -> dict:
    stmt = (
        select(Shipment.status, func.count(Shipment.id))
        .where(Shipment.owner_user_id == identity.user_id)
        .group_by(Shipment.status)
    )
    stats = {s.value: 0 for s in ShipmentStatus}
    for status, count in db.execute(stmt).all():
        stats[ShipmentStatus(status).value] = count
    return stats
