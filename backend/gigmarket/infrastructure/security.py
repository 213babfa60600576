"""Security Primitives — password hashing, JWT access tokens, verification tokens.

Invariants:
    - Passwords stored only as bcrypt hashes
    - Access tokens carry `sub` (user id) and `role`; both required on decode
    - Verification tokens are 32 random bytes, hex-encoded
"""

import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from gigmarket.core.domain_types import CallerIdentity, UserRole
from gigmarket.core.errors import AuthenticationError

BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS),
    ).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash
        return False


def generate_verification_token() -> str:
    return secrets.token_hex(32)


def create_access_token(
    user_id: UUID,
    role: UserRole,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    """Create a signed JWT for the given user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role.value,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
        "type": "access",
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_access_token(
    token: str, secret_key: str, algorithm: str = "HS256",
) -> CallerIdentity:
    """Decode and validate a JWT, returning the caller it identifies."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    try:
        return CallerIdentity(
            user_id=UUID(payload["sub"]), role=UserRole(payload["role"]),
        )
    except (KeyError, ValueError, TypeError):
        raise AuthenticationError("Invalid token payload")
