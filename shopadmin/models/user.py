from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    role: str = Field(default="user")  # admin | user
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
