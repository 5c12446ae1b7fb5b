from __future__ import annotations

from sqlalchemy import select

from admin_api.db.models import Todo
from admin_api.db.query_spec import FilterSpec, Predicate, apply_filters, as_bool, as_datetime, as_int
from admin_api.routers.todos import TodoFilters


def _sql(stmt) -> str:
    return str(stmt.compile(compile_kwargs={"literal_binds": True}))


SPEC = FilterSpec(
    predicates=(
        Predicate("title", "title", "like"),
        Predicate("status", "status"),
        Predicate("user_id", "user_id"),
    )
)


def test_empty_params_add_no_predicates():
    stmt = apply_filters(select(Todo), Todo, SPEC, {"title": "", "status": "", "user_id": ""})
    assert "WHERE" not in _sql(stmt)


def test_only_non_empty_params_become_predicates():
    stmt = apply_filters(select(Todo), Todo, SPEC, {"title": "milk", "status": "", "user_id": "u1"})
    sql = _sql(stmt)
    assert "todos.title LIKE '%milk%'" in sql
    assert "todos.user_id = 'u1'" in sql
    assert "todos.status" not in sql.split("WHERE", 1)[1]


def test_range_ops_and_pagination():
    spec = FilterSpec(
        predicates=(
            Predicate("from", "created_at", "gt", as_datetime),
            Predicate("to", "created_at", "lt", as_datetime),
        ),
        order_by="created_at",
        descending=True,
    )
    stmt = apply_filters(
        select(Todo),
        Todo,
        spec,
        {"from": "2024-01-01T00:00:00", "to": "", "offset": "5", "limit": "2"},
    )
    compiled = stmt.compile()
    sql = str(compiled)
    assert "todos.created_at >" in sql
    assert "todos.created_at <" not in sql
    assert "ORDER BY todos.created_at DESC" in sql
    assert "LIMIT" in sql and "OFFSET" in sql
    assert sorted(v for v in compiled.params.values() if isinstance(v, int)) == [2, 5]


def test_pydantic_filter_model_is_accepted():
    params = TodoFilters(title="a", offset="0", limit="")
    stmt = apply_filters(select(Todo), Todo, TodoFilters.spec, params)
    assert "LIKE '%a%'" in _sql(stmt)
    # An empty limit leaves the statement unbounded.
    assert stmt._limit_clause is None
    assert stmt._offset_clause is not None


def test_casts():
    assert as_int("42") == 42
    assert as_bool("true") is True
    assert as_bool("T") is True
    assert as_bool("0") is False
    assert as_datetime("2024-01-02T03:04:05").hour == 3
    assert as_datetime("2024-01-02T03:04:05Z").tzinfo is None


def test_filters_against_database(client):
    for title, status in [("buy milk", "new"), ("buy eggs", "done"), ("call mom", "new")]:
        r = client.post(
            "/todos",
            json={"title": title, "body": "b", "status": status, "user_id": "1"},
        )
        assert r.status_code == 201

    assert client.get("/todos").json()["total"] == 3

    body = client.get("/todos", params={"title": "buy"}).json()
    assert body["total"] == 2
    assert {t["title"] for t in body["todos"]} == {"buy milk", "buy eggs"}

    body = client.get("/todos", params={"title": "buy", "status": "new"}).json()
    assert [t["title"] for t in body["todos"]] == ["buy milk"]

    body = client.get("/todos", params={"limit": "1"}).json()
    assert body["total"] == 1
