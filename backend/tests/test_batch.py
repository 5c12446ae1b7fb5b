from __future__ import annotations

import uuid

from sqlalchemy import select

from admin_api.batch import export_orders, order_cancel, uuid_maker
from admin_api.db.models import Order, OrderDetail
from admin_api.repositories.orders_repo import OrdersRepository, cancel_new_orders, cancel_orders


def _order(db, status):
    return OrdersRepository(db).create_order(
        user_id=str(uuid.uuid4()),
        order_status=status,
        order_details=[
            {"product_id": str(uuid.uuid4()), "quantity": 1, "price": 10},
            {"product_id": str(uuid.uuid4()), "quantity": 2, "price": 20},
        ],
    )


def test_cancel_new_orders_and_their_details(db_session):
    new_order = _order(db_session, "new")
    paid_order = _order(db_session, "paid")

    assert cancel_new_orders(db_session) == (1, 2)

    db_session.expire_all()
    assert db_session.get(Order, new_order.id).order_status == "canceled"
    assert db_session.get(Order, paid_order.id).order_status == "paid"

    statuses = {
        d.order_id: d.order_detail_status
        for d in db_session.scalars(select(OrderDetail)).all()
    }
    assert statuses[new_order.id] == "canceled"
    assert statuses[paid_order.id] == "new"

    # Re-running only touches orders still in `new`.
    assert cancel_new_orders(db_session) == (0, 0)


def test_cancel_skips_orders_that_left_new(db_session):
    new_order = _order(db_session, "new")
    paid_order = _order(db_session, "new")
    # Paid after the batch picked up its ids.
    db_session.get(Order, paid_order.id).order_status = "paid"
    db_session.commit()

    assert cancel_orders(db_session, [new_order.id, paid_order.id]) == (1, 2)

    db_session.expire_all()
    assert db_session.get(Order, new_order.id).order_status == "canceled"
    assert db_session.get(Order, paid_order.id).order_status == "paid"
    paid_details = db_session.scalars(
        select(OrderDetail).where(OrderDetail.order_id == paid_order.id)
    ).all()
    assert {d.order_detail_status for d in paid_details} == {"new"}


def test_order_cancel_run_once(app, db_session):
    _order(db_session, "new")
    out = order_cancel.run_once(app.state.engine)
    assert out["ok"] is True
    assert out["ordersCanceled"] == 1
    assert out["detailsCanceled"] == 2


def test_export_orders_run_once(app, settings, db_session):
    _order(db_session, "new")
    path = export_orders.run_once(settings, app.state.engine)
    assert path.exists()
    assert path.name.endswith("_orders.csv")


def test_uuid_maker(capsys):
    values = uuid_maker.make_uuids(3)
    assert len(set(values)) == 3
    assert all(uuid.UUID(v).version == 4 for v in values)

    assert uuid_maker.main(["-n", "2"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
