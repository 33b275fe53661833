# backend/models/token.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from database import Base


# Issued bearer token. Only the SHA-256 digest of the plaintext is kept.
class PersonalAccessToken(Base):
    __tablename__ = "personal_access_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=True)  # client User-Agent at issuance
    token = Column(String(64), unique=True, nullable=False, index=True)

    # Claims frozen at issuance, e.g. ["1"]
    abilities = Column(JSON, nullable=False, default=list)

    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    def can(self, ability: str) -> bool:
        return ability in (self.abilities or [])
