from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, ForeignKey, Index, Enum as SAEnum
from datetime import datetime
from enum import Enum
import uuid
from shiptrack.db.session import Base
from shiptrack.security.utils import now_utc

def _new_id() -> str:
    return uuid.uuid4().hex

class ShipmentStatus(str, Enum):
    PENDING = "Pending"
    IN_TRANSIT = "InTransit"
    DELIVERED = "Delivered"

class User(Base):
    __tablename__ = 'users'
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=now_utc)
    shipments = relationship('Shipment', back_populates='owner', cascade='all, delete-orphan')

class Shipment(Base):
    __tablename__ = 'shipments'
    __table_args__ = (
        Index('ix_shipments_owner_user_id_status', 'owner_user_id', 'status'),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    owner_user_id: Mapped[str] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    tracking_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(80), nullable=False)
    status: Mapped[ShipmentStatus] = mapped_column(
        SAEnum(ShipmentStatus, name='shipmentstatus', values_callable=lambda e: [m.value for m in e]),
        default=ShipmentStatus.PENDING,
        nullable=False,
    )
    current_location: Mapped[str] = mapped_column(String(80), nullable=False)
    eta: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=now_utc, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=now_utc)
    owner = relationship('User', back_populates='shipments')
