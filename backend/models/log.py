# backend/models/log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from database import Base

# One row per auth event or catalog mutation, successful or not
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Acting user; empty for failed logins and registrations
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(String(50), index=True)    # e.g. LOGIN, PRODUCT_UPDATE
    resource = Column(String(50), index=True)  # auth, categories, products
    status = Column(String(20), index=True)    # SUCCESS / FAIL

    ip = Column(String(64), nullable=True)
    user_agent = Column(String(255), nullable=True)

    meta = Column(JSON, nullable=True)
