# backend/models/users.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


# Role tiers stored as plain integers on users.role.
# Tokens carry the tier claim as their only ability, so Role.ADMIN grants "1".
# Unknown stored values fall back to GUEST, which has no write claim.
class Role(enum.IntEnum):
    MEMBER = 0
    ADMIN = 1
    GUEST = 2

    @classmethod
    def from_value(cls, value) -> "Role":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.GUEST

    @property
    def claim(self) -> str:
        return str(int(self))


# Claim required for every catalog mutation
WRITE_CAPABILITY = Role.ADMIN.claim


# Represents a user account with authentication details and role tier
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    fullname = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    tel = Column(String(50), nullable=False)
    avatar = Column(String, nullable=True)
    role = Column(Integer, nullable=False, default=int(Role.MEMBER))

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def tier(self) -> Role:
        return Role.from_value(self.role)
