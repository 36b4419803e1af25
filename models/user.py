from uuid import uuid4
from datetime import datetime
from pydantic import BaseModel
from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, utcnow

class UserORM(Base):
    __tablename__ = 'users'

    id: Mapped[str] = mapped_column(primary_key=True, default=lambda: str(uuid4()))
    email: Mapped[str] = mapped_column(nullable=False, unique=True)
    password: Mapped[str] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(nullable=True)
    is_admin: Mapped[bool] = mapped_column(default=False)
    prod_access: Mapped[bool] = mapped_column(default=False)
    store_access: Mapped[bool] = mapped_column(default=False)
    prod_and_store_access: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class User(BaseModel):
    id: str
    email: str
    password: str
    name: str | None = None
    is_admin: bool = False
    prod_access: bool = False
    store_access: bool = False
    prod_and_store_access: bool = False
    created_at: datetime | None = None

    def public_dict(self) -> dict:
        """The user without the password hash."""
        data = self.model_dump(exclude={'password'})
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data
