from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from shiptrack.core.config import Settings, get_settings
from shiptrack.core.errors import UnauthorizedError
from shiptrack.db.session import SessionLocal
from shiptrack.security.identity import AuthContext
from shiptrack.services.auth import AuthService
from shiptrack.services.shipments import parse_shipment_id

security = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(settings)

def get_current_identity(
    creds: HTTPAuthorizationCredentials = Depends(security),
    auth: AuthService = Depends(get_auth_service),
) -> AuthContext:
    if not creds or not creds.credentials:
        raise UnauthorizedError('Missing Authorization header')
    return auth.authenticate(creds.credentials)

def valid_shipment_id(shipment_id: str) -> str:
    # runs before body validation, so a bad id wins over a bad payload
    return parse_shipment_id(shipment_id)
