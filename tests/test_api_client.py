import json

import httpx
import pytest
from httpx import Response

from api_client import LibraryApiClient
from book import Book
from errors import ApiError, NetworkError


def test_login_posts_credentials_as_json(client, mock_api):
    route = mock_api.post("/api/auth/login").mock(
        return_value=Response(200, json={"token": "t1", "user": {"id": 1}})
    )

    data = client.login("a@x.com", "secret")

    assert data["token"] == "t1"
    request = route.calls[0].request
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"email": "a@x.com", "password": "secret"}
    assert "authorization" not in request.headers


def test_register_sends_role(client, mock_api):
    route = mock_api.post("/api/auth/register").mock(return_value=Response(201, json={"token": "t2"}))

    client.register("Ann", "ann@x.com", "secret1", "admin")

    body = json.loads(route.calls[0].request.content)
    assert body == {"name": "Ann", "email": "ann@x.com", "password": "secret1", "role": "admin"}


def test_verify_sends_bearer_token(client, mock_api):
    route = mock_api.get("/api/auth/verify").mock(return_value=Response(200, json={"user": {"id": 1}}))

    client.verify("t1")

    assert route.calls[0].request.headers["authorization"] == "Bearer t1"


def test_list_books_maps_mongo_ids(client, mock_api):
    mock_api.get("/api/books").mock(
        return_value=Response(200, json=[
            {"_id": "b1", "title": "Dune", "author": "Frank Herbert", "description": "Spice"},
            {"id": 7, "title": "Anonymous Tales", "description": ""},
        ])
    )

    books = client.list_books()

    assert [b.id for b in books] == ["b1", "7"]
    assert books[0].author == "Frank Herbert"
    assert books[1].author is None
    assert books[1].display_author == "Unknown"


def test_create_book_is_authenticated(client, mock_api):
    route = mock_api.post("/api/books").mock(
        return_value=Response(201, json={"_id": "b9", "title": "Emma", "author": "Jane Austen", "description": ""})
    )

    book = client.create_book("t1", "Emma", "Jane Austen", "")

    assert book == Book("b9", "Emma", "Jane Austen", "")
    assert route.calls[0].request.headers["authorization"] == "Bearer t1"


def test_delete_book_uses_id_in_path(client, mock_api):
    route = mock_api.delete("/api/books/b1").mock(return_value=Response(200, json={"message": "Book deleted"}))

    client.delete_book("t1", "b1")

    assert route.called
    assert route.calls[0].request.headers["authorization"] == "Bearer t1"


def test_error_status_carries_server_message(client, mock_api):
    mock_api.post("/api/auth/login").mock(return_value=Response(401, json={"message": "Invalid credentials"}))

    with pytest.raises(ApiError) as exc_info:
        client.login("a@x.com", "wrong")

    assert exc_info.value.status_code == 401
    assert exc_info.value.server_message == "Invalid credentials"
    assert exc_info.value.is_client_error


def test_error_status_without_body(client, mock_api):
    mock_api.get("/api/books").mock(return_value=Response(500))

    with pytest.raises(ApiError) as exc_info:
        client.list_books()

    assert exc_info.value.server_message is None
    assert str(exc_info.value) == "HTTP 500"
    assert not exc_info.value.is_client_error


def test_transport_error_becomes_network_error(client, mock_api):
    mock_api.get("/api/auth/verify").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(NetworkError):
        client.verify("t1")


def test_unparseable_success_body_is_network_error(client, mock_api):
    mock_api.get("/api/books").mock(return_value=Response(200, content=b"<html>oops</html>"))

    with pytest.raises(NetworkError):
        client.list_books()


def test_list_books_retries_transport_errors(mock_api, monkeypatch):
    sleeps = []
    monkeypatch.setattr("api_client.time.sleep", sleeps.append)
    route = mock_api.get("/api/books").mock(
        side_effect=[httpx.ConnectError("blip"), Response(200, json=[])]
    )

    with LibraryApiClient(base_url="http://library.test", retries=3) as api:
        assert api.list_books() == []

    assert route.call_count == 2
    assert sleeps == [0.5]


def test_mutations_are_not_retried(mock_api):
    route = mock_api.post("/api/books").mock(side_effect=httpx.ConnectError("blip"))

    with LibraryApiClient(base_url="http://library.test", retries=3) as api:
        with pytest.raises(NetworkError):
            api.create_book("t1", "Emma")

    assert route.call_count == 1


@pytest.mark.parametrize("ack", [Response(200, text="Book deleted"), Response(204)])
def test_delete_book_accepts_any_success_ack(client, mock_api, ack):
    route = mock_api.delete("/api/books/b1").mock(return_value=ack)

    assert client.delete_book("t1", "b1") is None
    assert route.called


def test_delete_book_error_status_still_raises(client, mock_api):
    mock_api.delete("/api/books/b1").mock(return_value=Response(404, text="Not Found"))

    with pytest.raises(ApiError) as exc_info:
        client.delete_book("t1", "b1")

    assert exc_info.value.status_code == 404


def test_delete_book_escapes_id_in_path(client, mock_api):
    route = mock_api.route(method="DELETE").mock(return_value=Response(204))

    client.delete_book("t1", "b1?x=1#frag")

    url = route.calls[0].request.url
    assert url.raw_path == b"/api/books/b1%3Fx%3D1%23frag"
    assert url.query == b""


def test_list_books_coerces_non_string_fields(client, mock_api):
    mock_api.get("/api/books").mock(
        return_value=Response(200, json=[{"_id": "b1", "title": 1984, "author": 42, "description": None}])
    )

    [book] = client.list_books()

    assert book.title == "1984"
    assert book.author == "42"
    assert book.description == ""


def test_unparseable_listing_is_not_retried(mock_api, monkeypatch):
    sleeps = []
    monkeypatch.setattr("api_client.time.sleep", sleeps.append)
    route = mock_api.get("/api/books").mock(return_value=Response(200, content=b"<html>oops</html>"))

    with LibraryApiClient(base_url="http://library.test", retries=3) as api:
        with pytest.raises(NetworkError):
            api.list_books()

    assert route.call_count == 1
    assert sleeps == []
