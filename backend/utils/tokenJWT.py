# utils/tokenJWT.py
import hashlib
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.token import PersonalAccessToken
from models.users import User, WRITE_CAPABILITY
from utils.errors import Forbidden, Unauthenticated

# Missing header is reported by get_current_identity, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Identity:
    """Authenticated caller resolved once per request from the bearer token."""
    user: User
    token: PersonalAccessToken
    abilities: List[str] = field(default_factory=list)

    def can(self, ability: str) -> bool:
        return ability in self.abilities


def _digest(plain_token: str) -> str:
    return hashlib.sha256(plain_token.encode("utf-8")).hexdigest()


# Drop every token owned by the user
def revoke_all(db: Session, user: User) -> int:
    deleted = (
        db.query(PersonalAccessToken)
        .filter(PersonalAccessToken.user_id == user.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def issue_token(db: Session, user: User, capability: str, name: Optional[str] = None) -> str:
    """
    Replace all tokens of the user with a single new one carrying `capability`.
    Returns the plaintext; only its digest is stored.
    """
    revoke_all(db, user)

    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user.id),
        "jti": uuid.uuid4().hex,
        "abilities": [capability],
        "exp": expire,
    }
    plain_token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    db.add(PersonalAccessToken(
        user_id=user.id,
        name=(name or "")[:255] or None,
        token=_digest(plain_token),
        abilities=[capability],
    ))
    db.commit()
    return plain_token


def verify_token(db: Session, plain_token: str) -> Optional[Tuple[User, PersonalAccessToken]]:
    """Resolve a presented token to its owner and stored record, or None."""
    try:
        payload = jwt.decode(plain_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    stored = (
        db.query(PersonalAccessToken)
        .filter(PersonalAccessToken.token == _digest(plain_token))
        .first()
    )
    if stored is None:
        return None
    if str(stored.user_id) != str(payload.get("sub")):
        return None

    user = db.query(User).filter(User.id == stored.user_id).first()
    if user is None:
        return None

    stored.last_used_at = datetime.utcnow()
    db.commit()
    return user, stored


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    resolved = verify_token(db, credentials.credentials)
    if resolved is None:
        raise Unauthenticated()

    user, stored = resolved
    return Identity(user=user, token=stored, abilities=list(stored.abilities or []))


def require_capability(identity: Identity, ability: str, action: str = "modify") -> None:
    if not identity.can(ability):
        raise Forbidden(f"Permission denied to {action}")


# Dependency factory gating a route on a token claim
def capability_required(ability: str = WRITE_CAPABILITY, action: str = "modify"):
    def _checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        require_capability(identity, ability, action)
        return identity
    return _checker
