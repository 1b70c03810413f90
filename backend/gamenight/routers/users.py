"""User directory routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.errors import Conflict, NotFound
from gamenight.models.user import User
from gamenight.schemas.user import UserCreate, UserUpdate, UserOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_email(db: Session, email, user_id=None):
    if not email:
        return
    query = db.query(User).filter(User.email == email)
    if user_id:
        query = query.filter(User.user_id != user_id)
    if query.first():
        raise Conflict("Email already registered")


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    _check_email(db, payload.email)
    user = User(**payload.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.user_id, user.display_name)
    return user


@router.get("/", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.display_name).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.patch("/{user_id}", response_model=UserOut)
def update_user(user_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    """Partial update of display name, email or avatar."""
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    updates = payload.model_dump(exclude_unset=True)
    _check_email(db, updates.get("email"), user_id)
    for field, value in updates.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info("Updated user %s", user_id)
    return user
