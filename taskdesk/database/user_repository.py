"""Repository for User database operations."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from taskdesk.errors import InternalError
from taskdesk.models.stats import UserCounts
from taskdesk.models.user import User, UserRole
from taskdesk.database.models import TaskDB, UserDB, enum_to_value

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None
    
    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        user_db = self.db.query(UserDB).filter(UserDB.email == email).first()
        return user_db.to_pydantic() if user_db else None

    def get_all(self) -> List[User]:
        """Get all users, oldest first."""
        return [user_db.to_pydantic() for user_db in self.db.query(UserDB).order_by(UserDB.created_at).all()]

    def create(self, user: User) -> User:
        """Create a new user."""
        try:
            user_db = UserDB.from_pydantic(user)
            self.db.add(user_db)
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Created user {user.id}: {user.email}")
            return user_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create user {user.id}: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to create user") from e

    def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        """Apply a partial update to a user; returns None if it does not exist."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        if not user_db:
            return None

        for field, value in changes.items():
            if field == "role":
                value = enum_to_value(value)
            setattr(user_db, field, value)
        user_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Updated user {user_id}: {sorted(changes)}")
            return user_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user_id}: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to update user") from e

    def delete_with_tasks(self, user_id: str) -> int:
        """Delete a user and every task it owns in one transaction.

        Returns:
            Number of tasks removed alongside the user

        Raises:
            ValueError: If the user does not exist
        """
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        if not user_db:
            raise ValueError(f"User {user_id} not found")

        try:
            removed = (
                self.db.query(TaskDB)
                .filter(TaskDB.owner_id == user_id)
                .delete(synchronize_session=False)
            )
            (
                self.db.query(TaskDB)
                .filter(TaskDB.shared_from == user_id)
                .update({TaskDB.shared_from: None}, synchronize_session=False)
            )
            self.db.delete(user_db)
            self.db.commit()
            logger.debug(f"Deleted user {user_id} and {removed} tasks")
            return int(removed)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to delete user") from e

    def counts(self) -> UserCounts:
        """System-wide principal counters."""
        total = self.db.query(UserDB).count()
        active = self.db.query(UserDB).filter(UserDB.is_active.is_(True)).count()
        inactive = self.db.query(UserDB).filter(UserDB.is_active.is_(False)).count()
        admins = self.db.query(UserDB).filter(UserDB.role == UserRole.ADMIN.value).count()
        return UserCounts(total=total, active=active, inactive=inactive, admins=admins)
