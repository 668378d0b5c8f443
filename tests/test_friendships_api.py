"""HTTP tests for /api/friendships against the SQL store."""

import pytest

PREFIX = "/api/friendships"


def send(client, requester_id, receiver_id):
    return client.post(f"{PREFIX}/request", json={"requesterId": requester_id, "receiverId": receiver_id})


@pytest.fixture
def pending(client):
    response = send(client, 1, 2)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestSendRequest:

    def test_created_record_uses_camel_case(self, pending):
        assert set(pending) == {"id", "requesterId", "receiverId", "status", "createdAt"}
        assert pending["requesterId"] == 1
        assert pending["receiverId"] == 2
        assert pending["status"] == "pending"

    def test_self_request_is_bad_request(self, client):
        response = send(client, 4, 4)
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"

    def test_duplicate_reverse_request_is_bad_request(self, client, pending):
        response = send(client, 2, 1)
        assert response.status_code == 400
        assert response.json()["error"] == "conflict"

    def test_missing_field_is_rejected(self, client):
        response = client.post(f"{PREFIX}/request", json={"requesterId": 1})
        assert response.status_code == 422


class TestRespond:

    def test_accept(self, client, pending):
        response = client.put(f"{PREFIX}/{pending['id']}/accept", params={"userId": 2})

        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert client.get(f"{PREFIX}/check", params={"userId1": 2, "userId2": 1}).json() == {"areFriends": True}
        assert client.get(f"{PREFIX}/friend-ids", params={"userId": 1}).json() == [2]

    def test_decline(self, client, pending):
        response = client.put(f"{PREFIX}/{pending['id']}/decline", params={"userId": 2})

        assert response.status_code == 200
        assert response.json()["status"] == "declined"
        assert client.get(f"{PREFIX}/pending", params={"userId": 2}).json() == []
        all_for_requester = client.get(f"{PREFIX}/all", params={"userId": 1}).json()
        assert [f["status"] for f in all_for_requester] == ["declined"]

    @pytest.mark.parametrize("action, user_id, error", [
        ("accept", 1, "forbidden"),
        ("decline", 3, "forbidden"),
    ])
    def test_wrong_actor(self, client, pending, action, user_id, error):
        response = client.put(f"{PREFIX}/{pending['id']}/{action}", params={"userId": user_id})
        assert response.status_code == 400
        assert response.json()["error"] == error

    def test_unknown_id(self, client):
        response = client.put(f"{PREFIX}/nope/accept", params={"userId": 2})
        assert response.status_code == 400
        assert response.json()["error"] == "not_found"

    def test_already_answered(self, client, pending):
        client.put(f"{PREFIX}/{pending['id']}/accept", params={"userId": 2})

        response = client.put(f"{PREFIX}/{pending['id']}/decline", params={"userId": 2})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_state"


class TestRemove:

    def test_participant_removes(self, client, pending):
        response = client.delete(f"{PREFIX}/{pending['id']}", params={"userId": 1})

        assert response.status_code == 204
        assert client.get(f"{PREFIX}/{pending['id']}").status_code == 404

    def test_outsider_cannot_remove(self, client, pending):
        response = client.delete(f"{PREFIX}/{pending['id']}", params={"userId": 3})

        assert response.status_code == 400
        assert response.json()["error"] == "forbidden"
        assert client.get(f"{PREFIX}/{pending['id']}").status_code == 200


class TestQueries:

    def test_get_by_id(self, client, pending):
        response = client.get(f"{PREFIX}/{pending['id']}")
        assert response.status_code == 200
        assert response.json() == pending

    def test_pending_lists_incoming_requests(self, client, pending):
        assert [f["id"] for f in client.get(f"{PREFIX}/pending", params={"userId": 2}).json()] == [pending["id"]]
        assert client.get(f"{PREFIX}/pending", params={"userId": 1}).json() == []

    def test_friends_lists_accepted_only(self, client, pending):
        send(client, 3, 1)
        assert client.get(f"{PREFIX}/friends", params={"userId": 1}).json() == []

        client.put(f"{PREFIX}/{pending['id']}/accept", params={"userId": 2})
        friends = client.get(f"{PREFIX}/friends", params={"userId": 1}).json()
        assert [f["id"] for f in friends] == [pending["id"]]

    def test_check_pending_is_directional(self, client, pending):
        assert client.get(
            f"{PREFIX}/check-pending", params={"requesterId": 1, "receiverId": 2}
        ).json() == {"hasPendingRequest": True}
        assert client.get(
            f"{PREFIX}/check-pending", params={"requesterId": 2, "receiverId": 1}
        ).json() == {"hasPendingRequest": False}

    def test_check_without_relationship(self, client):
        assert client.get(f"{PREFIX}/check", params={"userId1": 8, "userId2": 9}).json() == {"areFriends": False}

    def test_missing_user_id_is_rejected(self, client):
        assert client.get(f"{PREFIX}/pending").status_code == 422
