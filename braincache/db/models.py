"""
SQLAlchemy Database Models
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from braincache.db.base import Base, TimestampMixin, UUIDMixin


class SubscriptionPlan(str, enum.Enum):
    FREE = "free"
    PRO = "pro"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class ContentType(str, enum.Enum):
    LINK = "link"
    DOCUMENT = "document"
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    ARTICLE = "article"
    NOTE = "note"


class ResourceType(str, enum.Enum):
    """Kinds of resource a grant or share link can point at"""

    SPACE = "space"
    CONTENT = "content"


class GrantPermission(str, enum.Enum):
    READ = "read"
    READ_WRITE = "read-write"


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    IGNORED = "ignored"


def _check_enum(enum_cls: type[enum.Enum], field: str, value):
    try:
        return enum_cls(value).value
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise ValueError(f"{field} must be one of {valid}, got {value!r}")


class User(UUIDMixin, TimestampMixin, Base):
    """User SQLAlchemy model"""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    subscription_plan: Mapped[str] = mapped_column(
        String(10), nullable=False, default=SubscriptionPlan.FREE.value
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.USER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @validates("subscription_plan")
    def _validate_plan(self, key, value):
        return _check_enum(SubscriptionPlan, key, value)

    @validates("role")
    def _validate_role(self, key, value):
        return _check_enum(UserRole, key, value)

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


class Space(UUIDMixin, TimestampMixin, Base):
    """Named collection of content, owned by exactly one user"""

    __tablename__ = "spaces"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_space_owner_name"),
    )

    name: Mapped[str] = mapped_column(String(60), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(240), nullable=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    @validates("owner_id")
    def _validate_owner(self, key, value):
        if self.owner_id is not None and value != self.owner_id:
            raise ValueError("Space owner cannot be changed")
        return value


class Content(UUIDMixin, TimestampMixin, Base):
    """A single saved link, document, embed or note"""

    __tablename__ = "contents"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    space_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    @validates("type")
    def _validate_type(self, key, value):
        return _check_enum(ContentType, key, value)

    @validates("owner_id")
    def _validate_owner(self, key, value):
        if self.owner_id is not None and value != self.owner_id:
            raise ValueError("Content owner cannot be changed")
        return value


class ShareAccess(UUIDMixin, TimestampMixin, Base):
    """Direct grant of read or read-write access to one user

    created_at is the granted-at time; a re-grant overwrites permission
    in place and only moves updated_at.
    """

    __tablename__ = "share_access"
    __table_args__ = (
        UniqueConstraint(
            "resource_type", "resource_id", "shared_with_id",
            name="uq_share_access_resource_grantee",
        ),
    )

    resource_type: Mapped[str] = mapped_column(String(20), nullable=False)
    resource_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    shared_with_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GrantPermission.READ.value
    )

    @validates("resource_type")
    def _validate_resource_type(self, key, value):
        return _check_enum(ResourceType, key, value)

    @validates("permission")
    def _validate_permission(self, key, value):
        return _check_enum(GrantPermission, key, value)


class ShareLink(UUIDMixin, TimestampMixin, Base):
    """Public hash token bound to a space (whole brain) or one content item"""

    __tablename__ = "share_links"
    __table_args__ = (
        CheckConstraint(
            "(space_id IS NULL) <> (content_id IS NULL)",
            name="ck_share_link_single_scope",
        ),
    )

    hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    space_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )
    content_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("contents.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )

    @property
    def resource_type(self) -> ResourceType:
        return ResourceType.CONTENT if self.content_id else ResourceType.SPACE

    @property
    def resource_id(self) -> uuid.UUID:
        return self.content_id or self.space_id


class SpaceComment(UUIDMixin, TimestampMixin, Base):
    """Comment on a space by a user with at least read access"""

    __tablename__ = "space_comments"
    __table_args__ = (
        Index("ix_space_comments_space_created", "space_id", "created_at"),
    )

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    comment: Mapped[str] = mapped_column(String(2000), nullable=False)
    edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ContentReport(UUIDMixin, TimestampMixin, Base):
    """Abuse report raised by a user against a content item"""

    __tablename__ = "content_reports"

    content_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("contents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ReportStatus.PENDING.value
    )

    @validates("status")
    def _validate_status(self, key, value):
        return _check_enum(ReportStatus, key, value)
