import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError

from conftest import API, count_todos, load_todo, register, bearer
from todo_api.core.config import settings
from todo_api.crud.todo import todo_crud
from todo_api.models.todo import Todo
from todo_api.models.user import User
from todo_api.schemas.todo import TodoCreate


def _create(client, headers, title, description=None):
    payload = {"title": title}
    if description is not None:
        payload["description"] = description
    res = client.post(f"{API}/todos", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


def _batch(client, headers, titles):
    res = client.post(f"{API}/todos/batch", json={"todos": [{"title": t} for t in titles]}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


@pytest.fixture
def fail_on_third_insert():
    """Simula uma violação de chave na terceira inserção de um lote."""
    calls = {"n": 0}

    def _boom(mapper, connection, target):
        calls["n"] += 1
        if calls["n"] == 3:
            raise IntegrityError("INSERT INTO todos", {}, Exception("UNIQUE constraint failed: todos.id"))

    event.listen(Todo, "before_insert", _boom)
    yield calls
    event.remove(Todo, "before_insert", _boom)


def test_end_to_end_scenario(client):
    res = register(client, name="A", email="a@x.com", password="secret1")
    assert res.status_code == 201
    headers = bearer(res.json()["token"])

    todo = _create(client, headers, "T")
    assert todo["title"] == "T"
    assert todo["description"] == ""
    assert isinstance(todo["id"], int)

    listing = client.get(f"{API}/todos", params={"page": 1, "limit": 10}, headers=headers).json()
    assert len(listing["data"]) == 1
    assert listing["total"] == 1
    assert listing["page"] == 1 and listing["limit"] == 10

    assert client.delete(f"{API}/todos/{todo['id']}", headers=headers).status_code == 204
    res = client.delete(f"{API}/todos/{todo['id']}", headers=headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Todo not found"}


def test_create_with_description(client, auth_headers):
    todo = _create(client, auth_headers, "Buy milk", "2 liters")
    assert todo == {"id": todo["id"], "title": "Buy milk", "description": "2 liters"}


def test_create_null_description_becomes_empty(client, auth_headers):
    res = client.post(f"{API}/todos", json={"title": "x", "description": None}, headers=auth_headers)
    assert res.status_code == 201
    assert res.json()["description"] == ""


def test_create_requires_title(client, auth_headers):
    for payload in ({}, {"title": ""}, {"title": "   "}, {"description": "only"}):
        res = client.post(f"{API}/todos", json=payload, headers=auth_headers)
        assert res.status_code == 400, payload
        assert "message" in res.json()
    assert count_todos() == 0


def test_list_pagination_and_total(client, auth_headers):
    _batch(client, auth_headers, [f"task {i:02d}" for i in range(15)])

    first = client.get(f"{API}/todos", params={"page": 1, "limit": 10}, headers=auth_headers).json()
    second = client.get(f"{API}/todos", params={"page": 2, "limit": 10}, headers=auth_headers).json()
    beyond = client.get(f"{API}/todos", params={"page": 5, "limit": 10}, headers=auth_headers).json()

    assert (len(first["data"]), first["total"]) == (10, 15)
    assert (len(second["data"]), second["total"]) == (5, 15)
    assert (len(beyond["data"]), beyond["total"]) == (0, 15)
    ids = {t["id"] for t in first["data"]} | {t["id"] for t in second["data"]}
    assert len(ids) == 15


def test_list_defaults_newest_first(client, auth_headers):
    created = _batch(client, auth_headers, ["one", "two", "three"])
    listing = client.get(f"{API}/todos", headers=auth_headers).json()
    assert [t["id"] for t in listing["data"]] == [t["id"] for t in reversed(created)]
    assert listing["page"] == 1 and listing["limit"] == 10


def test_list_lenient_paging_params(client, auth_headers):
    _batch(client, auth_headers, ["a", "b"])
    for params in ({"page": "abc", "limit": "xyz"}, {"page": 0, "limit": 0}, {"page": -3, "limit": -1}):
        body = client.get(f"{API}/todos", params=params, headers=auth_headers).json()
        assert (body["page"], body["limit"], body["total"]) == (1, 10, 2)


def test_list_limit_is_capped(client, auth_headers):
    body = client.get(f"{API}/todos", params={"limit": 100000}, headers=auth_headers).json()
    assert body["limit"] == settings.TODO_LIST_MAX_LIMIT


def test_list_filter_by_title(client, auth_headers):
    _batch(client, auth_headers, ["write report", "read book", "report bug", "100% done"])

    body = client.get(f"{API}/todos", params={"title": "report", "limit": 1}, headers=auth_headers).json()
    assert body["total"] == 2
    assert len(body["data"]) == 1
    assert "report" in body["data"][0]["title"]

    # curingas do LIKE são tratados como texto
    body = client.get(f"{API}/todos", params={"title": "%"}, headers=auth_headers).json()
    assert [t["title"] for t in body["data"]] == ["100% done"]


def test_list_sort_by_title(client, auth_headers):
    _batch(client, auth_headers, ["banana", "apple", "cherry"])
    asc = client.get(f"{API}/todos", params={"sortBy": "title", "sortOrder": "asc"}, headers=auth_headers).json()
    desc = client.get(f"{API}/todos", params={"sortBy": "title", "sortOrder": "desc"}, headers=auth_headers).json()
    assert [t["title"] for t in asc["data"]] == ["apple", "banana", "cherry"]
    assert [t["title"] for t in desc["data"]] == ["cherry", "banana", "apple"]


def test_list_invalid_sort_falls_back(client, auth_headers):
    created = _batch(client, auth_headers, ["b", "a", "c"])
    res = client.get(f"{API}/todos", params={"sortBy": "password", "sortOrder": "sideways"}, headers=auth_headers)
    assert res.status_code == 200
    assert [t["id"] for t in res.json()["data"]] == [t["id"] for t in reversed(created)]


def test_list_is_scoped_to_user(client, auth_headers, other_headers):
    _batch(client, auth_headers, ["mine 1", "mine 2"])
    _create(client, other_headers, "theirs")

    mine = client.get(f"{API}/todos", headers=auth_headers).json()
    theirs = client.get(f"{API}/todos", headers=other_headers).json()
    assert mine["total"] == 2
    assert theirs["total"] == 1
    assert [t["title"] for t in theirs["data"]] == ["theirs"]


def test_update_own_todo(client, auth_headers):
    todo = _create(client, auth_headers, "old", "desc")
    before = load_todo(todo["id"])

    res = client.put(f"{API}/todos/{todo['id']}", json={"title": "new", "description": "changed"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == {"id": todo["id"], "title": "new", "description": "changed"}

    after = load_todo(todo["id"])
    assert after.updated_at > before.updated_at
    assert after.created_at == before.created_at


def test_update_without_description_clears_it(client, auth_headers):
    todo = _create(client, auth_headers, "t", "something")
    res = client.put(f"{API}/todos/{todo['id']}", json={"title": "t2"}, headers=auth_headers)
    assert res.json()["description"] == ""


def test_update_refreshes_timestamp_even_when_unchanged(client, auth_headers):
    todo = _create(client, auth_headers, "same", "same")
    before = load_todo(todo["id"])
    client.put(f"{API}/todos/{todo['id']}", json={"title": "same", "description": "same"}, headers=auth_headers)
    assert load_todo(todo["id"]).updated_at > before.updated_at


def test_update_validation_and_missing(client, auth_headers):
    todo = _create(client, auth_headers, "t")
    assert client.put(f"{API}/todos/{todo['id']}", json={"title": ""}, headers=auth_headers).status_code == 400
    res = client.put(f"{API}/todos/999999", json={"title": "x"}, headers=auth_headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Todo not found"}


def test_update_foreign_todo_is_forbidden(client, auth_headers, other_headers):
    todo = _create(client, auth_headers, "private", "keep me")
    res = client.put(f"{API}/todos/{todo['id']}", json={"title": "hacked"}, headers=other_headers)
    assert res.status_code == 403
    assert res.json() == {"message": "Forbidden"}

    row = load_todo(todo["id"])
    assert (row.title, row.description) == ("private", "keep me")


def test_delete_foreign_todo_is_forbidden(client, auth_headers, other_headers):
    todo = _create(client, auth_headers, "private")
    assert client.delete(f"{API}/todos/{todo['id']}", headers=other_headers).status_code == 403
    assert load_todo(todo["id"]) is not None


def test_delete_returns_empty_body(client, auth_headers):
    todo = _create(client, auth_headers, "bye")
    res = client.delete(f"{API}/todos/{todo['id']}", headers=auth_headers)
    assert res.status_code == 204
    assert res.content == b""
    assert load_todo(todo["id"]) is None


def test_batch_create_preserves_order(client, auth_headers):
    res = client.post(
        f"{API}/todos/batch",
        json={"todos": [{"title": "first"}, {"title": "second", "description": "d"}, {"title": "third"}]},
        headers=auth_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Todos created successfully"
    assert [t["title"] for t in body["data"]] == ["first", "second", "third"]
    assert [t["description"] for t in body["data"]] == ["", "d", ""]
    assert count_todos() == 3


def test_batch_validation_rejects_whole_payload(client, auth_headers):
    cases = [
        {"todos": []},
        {},
        {"todos": [{"title": "ok"}, {"title": ""}, {"title": "also ok"}]},
        {"todos": [{"title": "ok"}, {"description": "no title"}]},
    ]
    for payload in cases:
        res = client.post(f"{API}/todos/batch", json=payload, headers=auth_headers)
        assert res.status_code == 400, payload
    assert count_todos() == 0


def test_batch_storage_failure_rolls_back(client, auth_headers, fail_on_third_insert):
    res = client.post(
        f"{API}/todos/batch",
        json={"todos": [{"title": f"item {i}"} for i in range(5)]},
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json() == {"message": "Duplicate field value entered"}
    assert fail_on_third_insert["n"] == 3
    assert count_todos() == 0


def test_create_many_rolls_back_in_store(db, user, fail_on_third_insert):
    items = [TodoCreate(title=f"item {i}") for i in range(5)]
    with pytest.raises(IntegrityError):
        todo_crud.create_many(db, items, user_id=user.id)
    assert count_todos() == 0

    # a sessão continua utilizável depois do rollback
    fail_on_third_insert["n"] = 100
    assert len(todo_crud.create_many(db, items[:2], user_id=user.id)) == 2


def test_todos_cascade_with_user(db, user):
    todo_crud.create_many(db, [TodoCreate(title="a"), TodoCreate(title="b")], user_id=user.id)
    assert count_todos() == 2
    db.delete(db.get(User, user.id))
    db.commit()
    assert count_todos() == 0


def test_todos_require_auth(client):
    assert client.post(f"{API}/todos", json={"title": "x"}).status_code == 401
    assert client.post(f"{API}/todos/batch", json={"todos": [{"title": "x"}]}).status_code == 401
    assert client.put(f"{API}/todos/1", json={"title": "x"}).status_code == 401
    assert client.delete(f"{API}/todos/1").status_code == 401


def test_huge_page_returns_empty_slice(client, auth_headers):
    _batch(client, auth_headers, ["a", "b"])
    res = client.get(f"{API}/todos", params={"page": "99999999999999999999"}, headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["data"] == []
    assert body["total"] == 2


def test_out_of_range_id_is_not_found(client, auth_headers):
    huge = 99999999999999999999
    res = client.delete(f"{API}/todos/{huge}", headers=auth_headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Todo not found"}

    res = client.put(f"{API}/todos/{huge}", json={"title": "x"}, headers=auth_headers)
    assert res.status_code == 404
    assert client.delete(f"{API}/todos/0", headers=auth_headers).status_code == 404
