from __future__ import annotations

import uuid
from pathlib import Path

USER = {"first_name": "Hanako", "last_name": "Sato", "email": "hanako@example.com", "age": 28}


def _user(client, **overrides):
    r = client.post("/users", json={**USER, **overrides})
    assert r.status_code == 201, r.text
    return r.json()


# Products


def test_products_crud_and_filters(client):
    body = {"name": "green tea", "price": 300, "remarks": "shizuoka", "quantity": 12}
    r = client.post("/products", json=body)
    assert r.status_code == 201
    product = r.json()
    client.post("/products", json={**body, "name": "black tea", "price": 500})

    assert client.get("/products", params={"name": "tea"}).json()["total"] == 2
    assert client.get("/products", params={"price": "500"}).json()["products"][0]["name"] == "black tea"

    r = client.put(f"/products/{product['id']}", json={**body, "quantity": 0})
    assert r.status_code == 202
    assert r.json()["quantity"] == 0

    assert client.delete(f"/products/{product['id']}").status_code == 204
    assert client.get(f"/products/{product['id']}").status_code == 404


def test_product_filters_reject_non_numeric_price(client):
    r = client.get("/products", params={"price": "cheap"})
    assert r.status_code == 400
    assert r.json()["details"][0]["attribute"] == "price"


def test_product_filters_reject_oversized_numbers(client):
    too_big = "9" * 20
    for param in ("price", "offset", "limit"):
        r = client.get("/products", params={param: too_big})
        assert r.status_code == 400, param
        assert r.json()["details"][0]["attribute"] == param

    r = client.get("/products", params={"price": "9" * 18})
    assert r.status_code == 200
    assert r.json()["total"] == 0


def test_products_pagination(client):
    for i in range(5):
        client.post("/products", json={"name": f"p{i}", "price": i, "quantity": 1})
    body = client.get("/products", params={"offset": "3", "limit": "10"}).json()
    assert body["total"] == 2


# Users


def test_user_password_never_rendered(client):
    user = _user(client)
    assert "password" not in user
    assert "password" not in client.get(f"/users/{user['id']}").json()
    assert all("password" not in u for u in client.get("/users").json()["users"])


def test_user_detail_includes_todos(client):
    user = _user(client)
    client.post("/todos", json={"title": "t", "body": "b", "status": "new", "user_id": user["id"]})

    detail = client.get(f"/users/{user['id']}").json()
    assert [t["title"] for t in detail["todos"]] == ["t"]


def test_created_user_can_log_in_with_default_password(client):
    _user(client)
    r = client.post("/auth/login", json={"email": USER["email"], "password": "123456"})
    assert r.status_code == 200


def test_duplicate_email_is_400(client):
    _user(client)
    r = client.post("/users", json=USER)
    assert r.status_code == 400


def test_invalid_email_is_400(client):
    r = client.post("/users", json={**USER, "email": "not-an-email"})
    assert r.status_code == 400
    assert r.json()["details"][0]["attribute"] == "email"


def test_upload_user_image(client, settings):
    user = _user(client)
    r = client.put(
        f"/users/{user['id']}/uploadImage",
        files={"image": ("face.png", b"\x89PNG fake", "image/png")},
    )
    assert r.status_code == 202
    image = r.json()["image"]
    assert image.startswith("images/users/")

    assert (Path(settings.assets_dir) / image).read_bytes() == b"\x89PNG fake"


def test_upload_rejects_unknown_type(client):
    user = _user(client)
    r = client.put(
        f"/users/{user['id']}/uploadImage",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert r.status_code == 400


def test_upload_for_missing_user_is_404(client):
    r = client.put(
        "/users/nobody/uploadImage",
        files={"image": ("face.png", b"x", "image/png")},
    )
    assert r.status_code == 404


# Projects / milestones / epics


def test_project_detail_includes_epics(client):
    project = client.post("/projects", json={"project_title": "site renewal"}).json()
    epic = {
        "author_id": "a-1",
        "epic_title": "login page",
        "project_id": project["id"],
        "label": "frontend",
    }
    r = client.post("/epics", json=epic)
    assert r.status_code == 201
    client.post("/epics", json={**epic, "epic_title": "top page", "is_open": False})

    detail = client.get(f"/projects/{project['id']}").json()
    assert sorted(e["epic_title"] for e in detail["epics"]) == ["login page", "top page"]

    assert client.get("/epics", params={"is_open": "false"}).json()["total"] == 1
    assert client.get("/epics", params={"is_open": "maybe"}).status_code == 400

    # Deleting a project removes its epics.
    assert client.delete(f"/projects/{project['id']}").status_code == 204
    assert client.get("/epics").json()["total"] == 0


def test_epic_for_missing_project_is_400(client):
    r = client.post("/epics", json={"author_id": "a", "epic_title": "x", "project_id": "missing"})
    assert r.status_code == 400


def test_milestones_filter_by_project(client):
    client.post("/milestones", json={"milestone_title": "v1", "project_id": "p-1"})
    client.post("/milestones", json={"milestone_title": "v2", "project_id": "p-2"})

    body = client.get("/milestones", params={"project_id": "p-1"}).json()
    assert [m["milestone_title"] for m in body["milestones"]] == ["v1"]


# User groups


def test_user_group_members(client):
    a = _user(client, email="a@example.com")
    b = _user(client, email="b@example.com")

    r = client.post("/userGroups", json={"group_name": "admins", "user_ids": [a["id"], b["id"]]})
    assert r.status_code == 201
    group = r.json()
    assert sorted(u["id"] for u in group["users"]) == sorted([a["id"], b["id"]])
    assert all("password" not in u for u in group["users"])

    r = client.put(f"/userGroups/{group['id']}", json={"group_name": "admins", "user_ids": [a["id"]]})
    assert r.status_code == 202
    assert [u["id"] for u in r.json()["users"]] == [a["id"]]

    body = client.get("/userGroups", params={"group_name": "adm"}).json()
    assert body["total"] == 1
    assert len(body["user_groups"][0]["users"]) == 1


def test_user_group_with_unknown_member_is_404(client):
    r = client.post("/userGroups", json={"group_name": "g", "user_ids": [str(uuid.uuid4())]})
    assert r.status_code == 404
    assert client.get("/userGroups").json()["total"] == 0


# Subscription members


def _member(client, start, end, status="basic"):
    r = client.post(
        "/subscriptionMembers",
        json={
            "user_id": str(uuid.uuid4()),
            "member_status": status,
            "member_start_date": start,
            "member_end_date": end,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_subscription_member_date_bounds_are_inclusive(client):
    jan = _member(client, "2024-01-01T00:00:00", "2024-01-31T00:00:00")
    _member(client, "2024-02-01T00:00:00", "2024-02-29T00:00:00", status="premium")

    body = client.get(
        "/subscriptionMembers", params={"member_start_date_from": "2024-02-01T00:00:00"}
    ).json()
    assert body["total"] == 1
    assert body["subscription_members"][0]["member_status"] == "premium"

    body = client.get(
        "/subscriptionMembers", params={"member_end_date_to": "2024-01-31T00:00:00Z"}
    ).json()
    assert [m["id"] for m in body["subscription_members"]] == [jan["id"]]

    assert client.get("/subscriptionMembers", params={"member_status": "premium"}).json()["total"] == 1


def test_subscription_member_filter_validation(client):
    assert client.get("/subscriptionMembers", params={"member_status": "gold"}).status_code == 400
    assert client.get("/subscriptionMembers", params={"user_id": "abc"}).status_code == 400
    assert client.get("/subscriptionMembers", params={"member_end_date_to": "yesterday"}).status_code == 400


# Issues


def test_issues_filters_and_milestone(client):
    milestone = client.post("/milestones", json={"milestone_title": "v1", "project_id": "p"}).json()
    assignee = str(uuid.uuid4())

    r = client.post(
        "/issues",
        json={
            "title": "crash on save",
            "user_id": assignee,
            "milestone_id": milestone["id"],
            "issue_status": "open",
        },
    )
    assert r.status_code == 201
    issue = r.json()
    assert issue["milestone"]["milestone_title"] == "v1"

    r = client.post("/issues", json={"title": "typo", "issue_status": "open"})
    assert r.status_code == 201
    assert r.json()["milestone_id"] is None
    assert r.json()["milestone"] is None

    body = client.get("/issues", params={"assignee_id": assignee}).json()
    assert [i["id"] for i in body["issues"]] == [issue["id"]]
    assert client.get("/issues", params={"title": "crash"}).json()["total"] == 1
    assert client.get("/issues", params={"assignee_id": "short"}).status_code == 400


def test_issue_with_unknown_milestone_is_400(client):
    r = client.post(
        "/issues",
        json={"title": "x", "milestone_id": str(uuid.uuid4()), "issue_status": "open"},
    )
    assert r.status_code == 400
