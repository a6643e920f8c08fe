from dataclasses import dataclass

@dataclass(frozen=True)
class AuthContext:
    """Identity of the authenticated caller, decoded from its bearer token."""
    user_id: str
    email: str
