from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db import Base
from app.services.dates import NowUtc


class User(Base):
    __tablename__ = "users"

    Id = Column(Integer, primary_key=True, index=True)
    Username = Column(String(120), nullable=False, unique=True, index=True)
    PasswordHash = Column(String(255), nullable=False)
    Email = Column(String(254))
    Timezone = Column(String(64), nullable=False, default="UTC")
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)
    LastSignedInAt = Column(DateTime(timezone=True))

    RefreshTokens = relationship("RefreshToken", back_populates="User", cascade="all, delete-orphan")


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    Id = Column(Integer, primary_key=True, index=True)
    UserId = Column(Integer, ForeignKey("users.Id", ondelete="CASCADE"), nullable=False, index=True)
    TokenHash = Column(String(255), nullable=False)
    CreatedAt = Column(DateTime(timezone=True), default=NowUtc, nullable=False)
    ExpiresAt = Column(DateTime(timezone=True), nullable=False)
    RevokedAt = Column(DateTime(timezone=True))

    User = relationship("User", back_populates="RefreshTokens")
