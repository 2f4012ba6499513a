"""SQLAlchemy database models for taskdesk."""

from datetime import datetime
import uuid
from typing import Union, TypeVar, Type
from sqlalchemy import Column, String, Boolean, DateTime, JSON, ForeignKey

from taskdesk.database.database import Base
from taskdesk.models.task import TaskPriority
from taskdesk.models.user import UserRole

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).
    
    Args:
        enum_obj: Enum instance or string value
        
    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Only used when reading rows back; writes are validated before they
    reach the database.
    
    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails
        
    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""
    
    __tablename__ = "tasks"
    
    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # Ownership
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    shared_from = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    
    # Basic fields
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    completed = Column(Boolean, nullable=False, default=False, index=True)
    priority = Column(String, nullable=False, default=TaskPriority.MEDIUM.value, index=True)
    category = Column(String, nullable=False, default="general", index=True)
    due_date = Column(DateTime, nullable=True)
    
    # Ordered collections (stored as JSON arrays)
    tags = Column(JSON, nullable=False, default=list)
    attachments = Column(JSON, nullable=False, default=list)
    subtasks = Column(JSON, nullable=False, default=list)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskdesk.models.task import Task
        
        return Task(
            id=self.id,
            owner_id=self.owner_id,
            title=self.title,
            description=self.description,
            completed=self.completed,
            priority=value_to_enum(self.priority, TaskPriority, TaskPriority.MEDIUM),
            category=self.category,
            due_date=self.due_date,
            tags=self.tags or [],
            shared_from=self.shared_from,
            attachments=self.attachments or [],
            subtasks=self.subtasks or [],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
    
    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            owner_id=task.owner_id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            priority=enum_to_value(task.priority),
            category=task.category,
            due_date=task.due_date,
            tags=list(task.tags),
            shared_from=task.shared_from,
            attachments=[a.model_dump() for a in task.attachments],
            subtasks=[s.model_dump() for s in task.subtasks],
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class UserDB(Base):
    """Database model for User."""
    
    __tablename__ = "users"
    
    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # User profile
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=UserRole.USER.value, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskdesk.models.user import User
        return User(
            id=self.id,
            email=self.email,
            name=self.name,
            role=value_to_enum(self.role, UserRole, UserRole.USER),
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
    
    @classmethod
    def from_pydantic(cls, user):
        """Create database model from Pydantic model."""
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=enum_to_value(user.role),
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
