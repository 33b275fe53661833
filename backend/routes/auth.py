# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from schemas import user as schemas
from utils.audit import write_log
from utils.errors import Conflict, InternalError, Unauthenticated, ValidationError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import Identity, get_current_identity, issue_token, revoke_all

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def _issue_for(db: Session, user: User, request: Request) -> str:
    # Claim is the role as it is right now; later role edits need a new token
    return issue_token(db, user, user.tier.claim, name=request.headers.get("user-agent"))


# Register a new user
@router.post("/register", response_model=schemas.RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    if payload.password != payload.password_confirmation:
        raise ValidationError(errors={"password": ["The password confirmation does not match."]})

    normalized_email = payload.email.strip().lower()

    # Check for existing user
    db_user = db.query(User).filter(func.lower(User.email) == normalized_email).first()
    if db_user:
        write_log(db, request, user_id=None, action="REGISTER", resource="auth", status="FAIL", meta={"email": normalized_email, "reason": "Email exists"})
        raise Conflict("The email has already been taken.", errors={"email": ["The email has already been taken."]})

    new_user = User(
        fullname=payload.fullname,
        username=payload.username,
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        tel=payload.tel,
        role=payload.role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    write_log(db, request, user_id=new_user.id, action="REGISTER", resource="auth", meta={"email": new_user.email})

    return {"message": "User registered successfully", "user": new_user}


# Authenticate user and issue a bearer token
@router.post("/login", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == payload.email.strip().lower()).first()

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, request, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", meta={"email": payload.email})
        raise Unauthenticated("Login failed")

    token = _issue_for(db, db_user, request)

    write_log(db, request, user_id=db_user.id, action="LOGIN", resource="auth", meta={"email": db_user.email})

    return {"message": "Login successfully", "user": db_user, "token": token}


# Swap the current token for a fresh one
@router.post("/refreshtoken", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
def refresh_token(
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    token = _issue_for(db, identity.user, request)

    write_log(db, request, user_id=identity.user.id, action="TOKEN_REFRESH", resource="auth")

    return {"message": "Token refreshed", "user": identity.user, "token": token}


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        if settings.REVOKE_TOKENS_ON_LOGOUT:
            revoke_all(db, identity.user)
        write_log(db, request, user_id=identity.user.id, action="LOGOUT", resource="auth",
                  meta={"revoked": settings.REVOKE_TOKENS_ON_LOGOUT})
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Logout failed for user %s", identity.user.id)
        raise InternalError("An error occurred while logging out.", errors={"error": [str(e)]})

    return {"message": "Logged out"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(identity: Identity = Depends(get_current_identity)):
    return identity.user
