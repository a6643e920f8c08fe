from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import jwt
from typing import Tuple

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

# Access tokens are valid for a fixed two hours.
ACCESS_TOKEN_TTL = timedelta(hours=2)

def hash_password(p: str) -> str: return pwd_ctx.hash(p)

def verify_password(p: str, h: str) -> bool: return pwd_ctx.verify(p, h)

def now_utc() -> datetime: return datetime.now(timezone.utc).replace(tzinfo=None)

def create_access_token(user_id: str, email: str, secret: str, algorithm: str) -> Tuple[str, datetime]:
    issued = datetime.now(timezone.utc)
    exp = issued + ACCESS_TOKEN_TTL
    payload = {'sub': user_id, 'email': email, 'iat': issued, 'exp': exp, 'type': 'access'}
    return jwt.encode(payload, secret, algorithm=algorithm), exp

def decode_token(token: str, secret: str, algorithm: str) -> dict:
    return jwt.decode(token, secret, algorithms=[algorithm], options={'require': ['sub', 'exp']})
