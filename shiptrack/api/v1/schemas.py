from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Optional, List
from shiptrack.db.models import ShipmentStatus

class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)

    @field_validator('email', mode='before')
    @classmethod
    def _strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

class RegisterPayload(Credentials): pass

class LoginPayload(Credentials): pass

class UserRead(BaseModel):
    id: str
    email: str
    class Config: from_attributes = True

class TokenOut(BaseModel):
    token: str

class CreateShipment(CamelModel):
    tracking_number: Optional[str] = Field(default=None, min_length=3, max_length=50)
    customer_name: str = Field(min_length=2, max_length=80)
    status: Optional[ShipmentStatus] = None
    current_location: str = Field(min_length=2, max_length=80)
    eta: datetime

    # trim before length checks; a blank tracking number means "generate one"
    @field_validator('tracking_number', 'customer_name', 'current_location', mode='before')
    @classmethod
    def _strip_text(cls, v, info):
        if not isinstance(v, str):
            return v
        v = v.strip()
        if info.field_name == 'tracking_number' and not v:
            return None
        return v

class StatusUpdate(CamelModel):
    status: ShipmentStatus

class ShipmentOut(CamelModel):
    id: str
    owner_user_id: str
    tracking_number: str
    customer_name: str
    status: ShipmentStatus
    current_location: str
    eta: datetime
    created_at: datetime
    updated_at: datetime

    @field_serializer('eta', 'created_at', 'updated_at')
    def _as_utc(self, dt: datetime) -> datetime:
        # stored naive, always UTC
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)

class ShipmentPage(CamelModel):
    items: List[ShipmentOut]
    page: int
    page_size: int
    total: int
    total_pages: int

class ShipmentStats(BaseModel):
    Pending: int = 0
    InTransit: int = 0
    Delivered: int = 0
