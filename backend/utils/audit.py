# backend/utils/audit.py
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from models.log import AuditLog


def write_log(db: Session, request: Optional[Request] = None, *, user_id, action, resource, status="SUCCESS", meta=None):
    """Record an audit entry, taking client address and User-Agent from the request."""
    ip = request.client.host if request is not None and request.client else None
    agent = request.headers.get("user-agent") if request is not None else None
    db.add(AuditLog(
        user_id=user_id,
        action=action,
        resource=resource,
        status=status,
        ip=ip,
        user_agent=(agent or "")[:255] or None,
        meta=meta or {},
    ))
    db.commit()
