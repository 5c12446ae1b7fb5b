from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..db.models import Coupon, CouponUser, User
from ..errors import BadRequestError, NotFoundError
from ..observability.logging import get_logger
from .base_repository import SqlRepository

log = get_logger("coupons_repo")


class CouponUsersRepository(SqlRepository[CouponUser]):
    model = CouponUser
    label = "coupon user"

    def acquire(self, *, coupon_id: str, user_id: str) -> CouponUser:
        """
        Attach a coupon to a user once.

        A second acquisition of the same pair is a `BadRequestError`; the unique
        constraint covers concurrent requests that pass the existence check.
        """
        if self.db.get(Coupon, coupon_id) is None:
            raise NotFoundError("coupon not found")
        if self.db.get(User, user_id) is None:
            raise NotFoundError("user not found")

        existing = self.db.scalars(
            select(CouponUser).where(
                CouponUser.coupon_id == coupon_id,
                CouponUser.user_id == user_id,
            )
        ).first()
        if existing is not None:
            raise BadRequestError("coupon already acquired")

        row = CouponUser(coupon_id=coupon_id, user_id=user_id, use_count=0)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise BadRequestError("coupon already acquired") from e

        log.info("coupon_acquired", coupon_id=coupon_id, user_id=user_id)
        return row
