"""SQLAlchemy ORM model for the users table.

Table is created by Alembic migration: alembic/versions/002_create_users.py
Balance columns are only ever changed through raw SQL in sm_account and
sm_settlement; this mapping is used for identity lookups.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from src.sm_common.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    steam_id: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str] = mapped_column(Text, nullable=False, default="")
    profile_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_sales: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_purchases: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("NOW()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("NOW()")
    )
