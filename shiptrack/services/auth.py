import logging

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiptrack.core.config import Settings
from shiptrack.core.errors import ConflictError, ServerMisconfigurationError, UnauthorizedError
from shiptrack.db.models import User
from shiptrack.security.identity import AuthContext
from shiptrack.security.utils import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
    now_utc,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Registers users and issues/verifies their access tokens.

    The signing secret comes from the ``Settings`` the service is built with;
    login and token verification fail with ``ServerMisconfigurationError``
    when it is missing.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _secret(self) -> str:
        if not self.settings.JWT_SECRET:
            logger.error("JWT_SECRET is not set")
            raise ServerMisconfigurationError("JWT_SECRET is not set")
        return self.settings.JWT_SECRET

    def register(self, db: Session, email: str, password: str) -> User:
        email = normalize_email(email)
        if db.query(User).filter(User.email == email).first():
            raise ConflictError("Email already exists")

        user = User(
            email=email,
            password_hash=hash_password(password),
            created_at=now_utc(),
            updated_at=now_utc(),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # lost a race against a concurrent registration
            db.rollback()
            raise ConflictError("Email already exists")
        db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, db: Session, email: str, password: str) -> str:
        email = normalize_email(email)
        user = db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token, _ = create_access_token(user.id, user.email, self._secret(), self.settings.JWT_ALGORITHM)
        return token

    def authenticate(self, token: str) -> AuthContext:
        secret = self._secret()
        try:
            claims = decode_token(token, secret, self.settings.JWT_ALGORITHM)
        except jwt.PyJWTError:
            raise UnauthorizedError(INVALID_TOKEN)

        user_id, email = claims.get("sub"), claims.get("email")
        if claims.get("type") != "access" or not isinstance(user_id, str) or not isinstance(email, str):
            raise UnauthorizedError(INVALID_TOKEN)
        return AuthContext(user_id=user_id, email=email)
