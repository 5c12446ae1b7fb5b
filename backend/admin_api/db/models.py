from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    inspect,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def new_uuid() -> str:
    return str(uuid.uuid4())


def now() -> datetime:
    return datetime.now()


class OrderStatus(str, enum.Enum):
    NEW = "new"
    PAID = "paid"
    CANCELED = "canceled"
    DELIVERED = "delivered"
    REFUNDED = "refunded"
    RETURNED = "returned"
    PARTIALLY = "partially"
    PARTIALLY_PAID = "partially_paid"


class OrderDetailStatus(str, enum.Enum):
    NEW = "new"
    PAID = "paid"
    CANCELED = "canceled"
    DELIVERED = "delivered"
    REFUNDED = "refunded"
    RETURNED = "returned"


class TodoStatus(str, enum.Enum):
    NEW = "new"
    SUCCESS = "success"
    WAITING = "waiting"
    CANCELED = "canceled"
    PROCESSING = "processing"
    DONE = "done"


class MemberStatus(str, enum.Enum):
    PREMIUM = "premium"
    BASIC = "basic"
    INACTIVE = "inactive"
    STOPPED = "stopped"


class Base(DeclarativeBase):
    # Columns never rendered into API responses.
    __hidden__: frozenset[str] = frozenset()

    def to_dict(self, *, include: tuple[str, ...] = ()) -> dict[str, Any]:
        """Column values plus the named relationships (already loaded)."""
        out: dict[str, Any] = {}
        for col in inspect(type(self)).columns:
            if col.key in self.__hidden__:
                continue
            value = getattr(self, col.key)
            if isinstance(value, enum.Enum):
                value = value.value
            out[col.key] = value
        for name in include:
            related = getattr(self, name)
            if related is None:
                out[name] = None
            elif isinstance(related, list):
                out[name] = [r.to_dict() for r in related]
            else:
                out[name] = related.to_dict()
        return out


class User(Base):
    __tablename__ = "users"
    __hidden__ = frozenset({"password"})

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    first_name: Mapped[str] = mapped_column(String(64), default="")
    last_name: Mapped[str] = mapped_column(String(64), default="")
    image: Mapped[str] = mapped_column(String(255), default="")
    age: Mapped[int] = mapped_column(Integer, default=0)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    todos: Mapped[list["Todo"]] = relationship(
        primaryjoin="User.id == foreign(Todo.user_id)",
        viewonly=True,
        lazy="selectin",
    )


class Todo(Base):
    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(String(64))
    body: Mapped[str] = mapped_column(String(64))
    status: Mapped[str] = mapped_column(String(64), default=TodoStatus.NEW.value, index=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(64), index=True)
    price: Mapped[int] = mapped_column(Integer, index=True)
    remarks: Mapped[str] = mapped_column(String(255), default="")
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    total_price: Mapped[int] = mapped_column(Integer, default=0)
    order_status: Mapped[str] = mapped_column(String(32), default=OrderStatus.NEW.value, index=True)
    remarks: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    order_details: Mapped[list["OrderDetail"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderDetail(Base):
    __tablename__ = "order_details"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[str] = mapped_column(String(36))
    quantity: Mapped[int] = mapped_column(Integer)
    price: Mapped[int] = mapped_column(Integer)
    order_detail_status: Mapped[str] = mapped_column(
        String(32), default=OrderDetailStatus.NEW.value
    )

    order: Mapped[Order] = relationship(back_populates="order_details")


class Coupon(Base):
    __tablename__ = "coupons"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(String(64))
    remarks: Mapped[str] = mapped_column(String(255), default="")
    discount_amount: Mapped[int] = mapped_column(Integer, default=0)
    discount_rate: Mapped[int] = mapped_column(Integer, default=0)
    max_discount_amount: Mapped[int] = mapped_column(Integer, default=0)
    use_start_at: Mapped[datetime] = mapped_column(DateTime)
    use_end_at: Mapped[datetime] = mapped_column(DateTime)
    public_start_at: Mapped[datetime] = mapped_column(DateTime)
    public_end_at: Mapped[datetime] = mapped_column(DateTime)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)


class CouponUser(Base):
    __tablename__ = "coupon_user"
    __table_args__ = (UniqueConstraint("coupon_id", "user_id", name="uq_coupon_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coupon_id: Mapped[str] = mapped_column(String(36), ForeignKey("coupons.id", ondelete="CASCADE"))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    use_count: Mapped[int] = mapped_column(Integer, default=0)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    project_title: Mapped[str] = mapped_column(String(64), index=True)
    project_description: Mapped[str] = mapped_column(String(255), default="")

    epics: Mapped[list["Epic"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class Milestone(Base):
    __tablename__ = "milestones"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    milestone_title: Mapped[str] = mapped_column(String(64), index=True)
    milestone_description: Mapped[str] = mapped_column(String(255), default="")
    project_id: Mapped[str] = mapped_column(String(36), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)


class Epic(Base):
    __tablename__ = "epics"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    is_open: Mapped[bool] = mapped_column(Boolean, default=True)
    author_id: Mapped[str] = mapped_column(String(36))
    epic_title: Mapped[str] = mapped_column(String(64), index=True)
    epic_description: Mapped[str] = mapped_column(Text, default="")
    label: Mapped[str] = mapped_column(String(64), default="")
    milestone_id: Mapped[str] = mapped_column(String(36), default="")
    assignee_id: Mapped[str] = mapped_column(String(36), default="")
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    project: Mapped[Project] = relationship(back_populates="epics")


class GroupUser(Base):
    __tablename__ = "group_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[str] = mapped_column(String(36), ForeignKey("user_groups.id", ondelete="CASCADE"))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)


class UserGroup(Base):
    __tablename__ = "user_groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    group_name: Mapped[str] = mapped_column(String(64), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    users: Mapped[list[User]] = relationship(
        secondary="group_user",
        lazy="selectin",
    )


class SubscriptionMember(Base):
    __tablename__ = "subscription_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    member_status: Mapped[str] = mapped_column(String(32), default=MemberStatus.BASIC.value)
    member_start_date: Mapped[datetime] = mapped_column(DateTime)
    member_end_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    member_stop_start_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    member_stop_end_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(String(64), index=True)
    description: Mapped[str] = mapped_column(String(255), default="")
    user_id: Mapped[str] = mapped_column(String(36), default="")
    milestone_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True
    )
    issue_status: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    milestone: Mapped[Milestone | None] = relationship(lazy="selectin")
