"""
End-to-end tests for the HTTP API.

These tests drive the FastAPI application through ``TestClient`` and
check status codes and JSON shapes for every route, including the
error bodies produced by the exception handlers.
"""

import pytest

USERS = "/api/v1/users/"
BOOKS = "/api/v1/books/"


def create_user(client, name="Enes Faruk Meniz"):
    response = client.post(USERS, json={"name": name})
    assert response.status_code == 201
    return response.json()


def create_book(client, title="I, Robot"):
    response = client.post(BOOKS, json={"title": title})
    assert response.status_code == 201
    return response.json()


def borrow_url(user_id, book_id):
    return f"/api/v1/users/{user_id}/borrow/{book_id}"


def return_url(user_id, book_id):
    return f"/api/v1/users/{user_id}/return/{book_id}"


class TestUsers:
    def test_create_user(self, client):
        user = create_user(client, "Ada")
        assert user == {"id": user["id"], "name": "Ada"}

    def test_list_users(self, client):
        create_user(client, "Ada")
        create_user(client, "Grace")
        response = client.get(USERS)
        assert response.status_code == 200
        assert [u["name"] for u in response.json()] == ["Ada", "Grace"]

    def test_get_user_with_history(self, client):
        user = create_user(client)
        robot = create_book(client, "I, Robot")
        brave = create_book(client, "Brave New World")
        client.post(borrow_url(user["id"], robot["id"]))
        client.post(borrow_url(user["id"], brave["id"]))
        client.post(return_url(user["id"], robot["id"]), json={"score": 5})

        response = client.get(f"{USERS}{user['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "id": user["id"],
            "name": "Enes Faruk Meniz",
            "books": {
                "past": [{"name": "I, Robot", "user_score": 5}],
                "present": [{"name": "Brave New World"}],
            },
        }

    def test_get_unknown_user(self, client):
        response = client.get(f"{USERS}999")
        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    @pytest.mark.parametrize("body", [{}, {"name": 12}, {"name": "   "}, {"title": "x"}])
    def test_create_user_validation(self, client, body):
        response = client.post(USERS, json=body)
        assert response.status_code == 400
        assert response.json()["errors"]

    def test_non_integer_user_id(self, client):
        response = client.get(f"{USERS}abc")
        assert response.status_code == 400
        assert response.json()["errors"][0]["loc"] == ["path", "user_id"]

    @pytest.mark.parametrize("user_id", ["99999999999999999999", "9223372036854775808", "0", "-1"])
    def test_out_of_range_user_id(self, client, user_id):
        response = client.get(f"{USERS}{user_id}")
        assert response.status_code == 400
        assert response.json()["errors"][0]["loc"] == ["path", "user_id"]

    def test_largest_user_id_is_not_found(self, client):
        response = client.get(f"{USERS}9223372036854775807")
        assert response.status_code == 404


class TestBooks:
    def test_create_and_list_books(self, client):
        book = create_book(client, "Dune")
        assert book == {"id": book["id"], "title": "Dune"}

        response = client.get(BOOKS)
        assert response.status_code == 200
        assert response.json() == [{"id": book["id"], "title": "Dune"}]

    def test_get_book_without_borrows(self, client):
        book = create_book(client)
        response = client.get(f"{BOOKS}{book['id']}")
        assert response.status_code == 200
        assert response.json() == {"id": book["id"], "title": "I, Robot", "score": None}

    def test_get_book_average_score(self, client):
        book = create_book(client)
        for name, score in (("Ada", 4), ("Grace", 5)):
            user = create_user(client, name)
            client.post(borrow_url(user["id"], book["id"]))
            client.post(return_url(user["id"], book["id"]), json={"score": score})

        response = client.get(f"{BOOKS}{book['id']}")
        assert response.json()["score"] == 4.5

    def test_get_unknown_book(self, client):
        response = client.get(f"{BOOKS}999")
        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    def test_create_book_validation(self, client):
        response = client.post(BOOKS, json={"title": None})
        assert response.status_code == 400


class TestBorrowing:
    def test_borrow_book(self, client):
        user = create_user(client)
        book = create_book(client)

        response = client.post(borrow_url(user["id"], book["id"]))

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == user["id"]
        assert body["book_id"] == book["id"]
        assert body["borrowed_at"]
        assert body["returned_at"] is None
        assert body["user_score"] is None

    def test_borrow_unknown_user(self, client):
        book = create_book(client)
        response = client.post(borrow_url(999, book["id"]))
        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    def test_borrow_unknown_book(self, client):
        user = create_user(client)
        response = client.post(borrow_url(user["id"], 999))
        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    def test_borrow_already_borrowed_book(self, client):
        first = create_user(client, "Ada")
        second = create_user(client, "Grace")
        book = create_book(client)
        client.post(borrow_url(first["id"], book["id"]))

        response = client.post(borrow_url(second["id"], book["id"]))

        assert response.status_code == 400
        assert response.json() == {"message": "Book is already borrowed by another user"}

    def test_return_book(self, client):
        user = create_user(client)
        book = create_book(client)
        client.post(borrow_url(user["id"], book["id"]))

        response = client.post(return_url(user["id"], book["id"]), json={"score": 5})

        assert response.status_code == 200
        body = response.json()
        assert body["returned_at"] is not None
        assert body["user_score"] == 5

    def test_return_twice(self, client):
        user = create_user(client)
        book = create_book(client)
        client.post(borrow_url(user["id"], book["id"]))
        client.post(return_url(user["id"], book["id"]), json={"score": 3})

        response = client.post(return_url(user["id"], book["id"]), json={"score": 3})

        assert response.status_code == 400
        assert response.json() == {
            "message": "No record of this book being borrowed by this user"
        }

    def test_borrow_and_return_with_huge_ids(self, client):
        huge = "99999999999999999999"
        response = client.post(f"/api/v1/users/1/borrow/{huge}")
        assert response.status_code == 400
        assert response.json()["errors"][0]["loc"] == ["path", "book_id"]

        response = client.post(f"/api/v1/users/{huge}/return/1", json={"score": 3})
        assert response.status_code == 400
        assert response.json()["errors"][0]["loc"] == ["path", "user_id"]

    def test_get_book_with_huge_id(self, client):
        response = client.get(f"{BOOKS}99999999999999999999")
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [{}, {"score": 0}, {"score": 6}, {"score": "5"}, {"score": 2.5}])
    def test_return_score_validation(self, client, body):
        user = create_user(client)
        book = create_book(client)
        client.post(borrow_url(user["id"], book["id"]))

        response = client.post(return_url(user["id"], book["id"]), json=body)

        assert response.status_code == 400
        assert "errors" in response.json()
        # Still borrowed.
        history = client.get(f"{USERS}{user['id']}").json()["books"]
        assert history["present"] == [{"name": "I, Robot"}]


class TestApplication:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}

    def test_security_headers(self, client):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_docs_served(self, client):
        assert client.get("/api-docs").status_code == 200
        schema = client.get("/openapi.json").json()
        assert "/api/v1/users/{user_id}/borrow/{book_id}" in schema["paths"]

    def test_access_log(self, client, caplog):
        with caplog.at_level("INFO", logger="library_api.access"):
            client.get("/health")
        assert any("GET /health 200" in r.getMessage() for r in caplog.records)
