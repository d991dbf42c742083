import json

from fastapi.testclient import TestClient

BASE = "/board"


def post_board(client: TestClient, payload: dict) -> dict:
    response = client.post(f"{BASE}/", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def assert_error_payload(response, status: int, path: str):
    assert response.status_code == status
    body = response.json()
    assert set(body) == {"path", "status", "message", "timestamp"}
    assert body["status"] == status
    assert body["path"] == path
    return body


def test_board_lifecycle(client: TestClient, store, board_payload: dict):
    """Post, re-post, load, comment and delete a board through the HTTP surface."""
    created = post_board(client, board_payload)
    board_id = created["boardId"]
    assert board_id
    for key, value in board_payload.items():
        assert created[key] == value
    assert created["comments"] == []

    loaded = client.get(f"{BASE}/{board_id}")
    assert loaded.status_code == 200
    assert loaded.json() == created

    count_before = len(store.documents)
    again = post_board(client, {**board_payload, "boardId": board_id})
    assert again == created
    assert len(store.documents) == count_before

    commented = client.post(
        f"{BASE}/comment/{board_id}",
        json={"writer": "Yep", "password": "4321", "content": "It helps me a lot!!"},
    )
    assert commented.status_code == 200
    comment = commented.json()["comments"][0]
    assert comment["writer"] == "Yep"
    assert comment["password"] == "4321"
    assert comment["content"] == "It helps me a lot!!"
    assert comment["boardId"] == board_id
    assert comment["created"] is not None

    deleted = client.delete(f"{BASE}/{board_id}")
    assert deleted.status_code == 200
    assert deleted.json() == board_id

    missing = client.get(f"{BASE}/{board_id}")
    body = assert_error_payload(missing, 404, f"{BASE}/{board_id}")
    assert body["message"] == "Invalid Board id."


def test_post_malformed_body_returns_400(client: TestClient):
    response = client.post(f"{BASE}/", json={"title": "no writer"})
    body = assert_error_payload(response, 400, f"{BASE}/")
    assert "writer" in body["message"]


def test_post_invalid_json_returns_400(client: TestClient):
    response = client.post(f"{BASE}/", content="{not json", headers={"Content-Type": "application/json"})
    assert_error_payload(response, 400, f"{BASE}/")


def test_comment_unknown_board_returns_404(client: TestClient):
    response = client.post(
        f"{BASE}/comment/unknown",
        json={"writer": "Yep", "password": "4321", "content": "hello"},
    )
    assert_error_payload(response, 404, f"{BASE}/comment/unknown")


def test_comment_conflict_returns_409(client: TestClient, store, board_payload: dict):
    board_id = post_board(client, board_payload)["boardId"]
    store.conflicts_to_raise = 10

    response = client.post(
        f"{BASE}/comment/{board_id}",
        json={"writer": "Yep", "password": "4321", "content": "hello"},
    )
    assert_error_payload(response, 409, f"{BASE}/comment/{board_id}")


def test_delete_unknown_board_returns_404(client: TestClient, store):
    response = client.delete(f"{BASE}/unknown")
    assert_error_payload(response, 404, f"{BASE}/unknown")
    assert store.writes == 0


def test_list_streams_ndjson(client: TestClient, board_payload: dict):
    ids = [post_board(client, {**board_payload, "title": f"t{i}"})["boardId"] for i in range(3)]

    response = client.get(f"{BASE}/all/0/2")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    lines = [json.loads(line) for line in response.text.splitlines() if line]
    assert len(lines) == 2
    assert {line["boardId"] for line in lines} <= set(ids)


def test_list_beyond_last_page_is_empty(client: TestClient, board_payload: dict):
    post_board(client, board_payload)

    response = client.get(f"{BASE}/all/5/10")
    assert response.status_code == 200
    assert response.text == ""


def test_list_sorted(client: TestClient, board_payload: dict):
    post_board(client, {**board_payload, "title": "low", "like": 1})
    post_board(client, {**board_payload, "title": "high", "like": 99})

    response = client.get(f"{BASE}/all/0/1", params={"sort": "like:desc"})
    assert response.status_code == 200
    assert json.loads(response.text.splitlines()[0])["title"] == "high"


def test_list_rejects_bad_paging_and_sort(client: TestClient):
    assert_error_payload(client.get(f"{BASE}/all/-1/10"), 400, f"{BASE}/all/-1/10")
    assert_error_payload(client.get(f"{BASE}/all/0/0"), 400, f"{BASE}/all/0/0")
    response = client.get(f"{BASE}/all/0/10", params={"sort": "title"})
    assert_error_payload(response, 400, f"{BASE}/all/0/10")


def test_store_failure_returns_500(client: TestClient, store, caplog):
    async def broken_search(*args, **kwargs):
        raise ConnectionError("search engine unreachable")
        yield  # pragma: no cover

    store.search = broken_search

    with caplog.at_level("ERROR"):
        response = client.get(f"{BASE}/some-id")
    body = assert_error_payload(response, 500, f"{BASE}/some-id")
    assert "unreachable" in body["message"]

    records = [r for r in caplog.records if r.name == "backend.domains.board.error_handlers"]
    assert len(records) == 1
    assert records[0].exc_info is not None


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert "version" in response.json()


def test_post_drops_comments_from_request_body(client: TestClient, board_payload: dict):
    payload = {
        **board_payload,
        "comments": [{"boardId": "other", "writer": "x", "password": "y", "content": "forged"}],
    }
    created = post_board(client, payload)
    assert created["comments"] == []
    assert client.get(f"{BASE}/{created['boardId']}").json()["comments"] == []
