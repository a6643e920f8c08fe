from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shiptrack.api.deps import get_db, get_auth_service
from shiptrack.api.v1.schemas import RegisterPayload, LoginPayload, UserRead, TokenOut
from shiptrack.services.auth import AuthService

router = APIRouter()  # main.py mounts at /api/auth


@router.get("/ping")
def ping() -> dict:
    return {"ok": True}


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, db: Session = Depends(get_db), auth: AuthService = Depends(get_auth_service)):
    return auth.register(db, str(payload.email), payload.password)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginPayload, db: Session = Depends(get_db), auth: AuthService = Depends(get_auth_service)) -> TokenOut:
    token = auth.login(db, str(payload.email), payload.password)
    return TokenOut(token=token)
