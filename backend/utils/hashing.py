# backend/utils/hashing.py
import bcrypt

from config import settings

# bcrypt only looks at the first 72 bytes
_MAX_BYTES = 72


def get_password_hash(password: str) -> str:
    pw_bytes = password.encode("utf-8")[:_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    pw_bytes = password.encode("utf-8")[:_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
