from __future__ import annotations

from ..db.models import (
    Coupon,
    Epic,
    Issue,
    Milestone,
    OrderDetail,
    Product,
    Project,
    SubscriptionMember,
    Todo,
    UserGroup,
)
from .base_repository import SqlRepository


class TodosRepository(SqlRepository[Todo]):
    model = Todo
    label = "todo"


class ProductsRepository(SqlRepository[Product]):
    model = Product
    label = "product"


class OrderDetailsRepository(SqlRepository[OrderDetail]):
    model = OrderDetail
    label = "order detail"


class CouponsRepository(SqlRepository[Coupon]):
    model = Coupon
    label = "coupon"


class MilestonesRepository(SqlRepository[Milestone]):
    model = Milestone
    label = "milestone"


class EpicsRepository(SqlRepository[Epic]):
    model = Epic
    label = "epic"


class ProjectsRepository(SqlRepository[Project]):
    model = Project
    label = "project"


class UserGroupsRepository(SqlRepository[UserGroup]):
    model = UserGroup
    label = "user group"


class SubscriptionMembersRepository(SqlRepository[SubscriptionMember]):
    model = SubscriptionMember
    label = "subscription member"


class IssuesRepository(SqlRepository[Issue]):
    model = Issue
    label = "issue"
