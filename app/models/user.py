# app/models/user.py
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base

DEFAULT_THEME_COLOR = "#2196f3"

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(length=320), unique=True, index=True, nullable=False)
    # Empty when the identity lives with an external auth provider
    hashed_password = Column(String(length=1024), nullable=False, default="")
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Profile / settings
    avatar_url = Column(String, nullable=True)
    theme_color = Column(String(length=7), nullable=False, default=DEFAULT_THEME_COLOR)
    is_dark_mode = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())

    accounts = relationship(
        "Account",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Account.id",
    )

    def __repr__(self):
        return f"<User email={self.email}>"
