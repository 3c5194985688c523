"""
Messages and conversations API tests
"""
import pytest
from httpx import AsyncClient

from core.security import create_access_token


class TestAuthentication:
    """Every messaging endpoint needs a valid bearer token"""

    @pytest.mark.parametrize(
        "method,url",
        [
            ("GET", "/api/messages"),
            ("POST", "/api/messages"),
            ("POST", "/api/conversations/accept"),
            ("GET", "/api/notifications"),
            ("PATCH", "/api/notifications"),
        ],
    )
    async def test_requires_token(self, client: AsyncClient, method, url):
        response = await client.request(method, url, json={})

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    async def test_rejects_bad_token(self, client: AsyncClient):
        response = await client.get(
            "/api/messages", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    async def test_rejects_unknown_role(self, client: AsyncClient):
        token = create_access_token({"sub": "someone", "role": "JANITOR"})
        response = await client.get(
            "/api/messages", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


class TestMessageRequestFlow:
    """First message opens a request; accepting moves it to primary"""

    async def test_send_accept_and_list(
        self, client: AsyncClient, auth_headers, student_a, student_b
    ):
        sent = await client.post(
            "/api/messages",
            json={"content": "Is the laundry open?", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )
        assert sent.status_code == 200
        message = sent.json()
        assert message["senderId"] == student_a.id
        assert message["receiverId"] == student_b.id
        assert message["content"] == "Is the laundry open?"

        requests = await client.get(
            "/api/messages", params={"type": "requests"}, headers=auth_headers(student_b)
        )
        assert requests.status_code == 200
        (thread,) = requests.json()
        assert thread["conversationId"] == message["conversationId"]
        assert thread["id"] == student_a.id
        assert thread["status"] == "PENDING"
        assert thread["folder"] == "requests"
        assert thread["lastMessage"] == "Is the laundry open?"

        sender_primary = await client.get("/api/messages", headers=auth_headers(student_a))
        assert [t["conversationId"] for t in sender_primary.json()] == [message["conversationId"]]

        accepted = await client.post(
            "/api/conversations/accept",
            json={"conversationId": message["conversationId"]},
            headers=auth_headers(student_b),
        )
        assert accepted.status_code == 200
        assert accepted.json() == {"success": True}

        receiver_primary = await client.get(
            "/api/messages", params={"type": "primary"}, headers=auth_headers(student_b)
        )
        (thread,) = receiver_primary.json()
        assert thread["status"] == "ACCEPTED"
        assert thread["folder"] == "primary"

        receiver_requests = await client.get(
            "/api/messages", params={"type": "requests"}, headers=auth_headers(student_b)
        )
        assert receiver_requests.json() == []

    async def test_reply_reuses_conversation(
        self, client: AsyncClient, auth_headers, student_a, student_b
    ):
        first = await client.post(
            "/api/messages",
            json={"content": "hi", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )
        reply = await client.post(
            "/api/messages",
            json={"content": "hey", "receiverId": student_a.id},
            headers=auth_headers(student_b),
        )

        assert reply.json()["conversationId"] == first.json()["conversationId"]

    async def test_thread_by_target(self, client: AsyncClient, auth_headers, student_a, student_b):
        for sender, receiver, text in (
            (student_a, student_b, "one"),
            (student_b, student_a, "two"),
            (student_a, student_b, "three"),
        ):
            await client.post(
                "/api/messages",
                json={"content": text, "receiverId": receiver.id},
                headers=auth_headers(sender),
            )

        response = await client.get(
            "/api/messages", params={"targetId": student_a.id}, headers=auth_headers(student_b)
        )

        assert response.status_code == 200
        assert [m["content"] for m in response.json()] == ["one", "two", "three"]

    async def test_thread_without_conversation_is_empty(
        self, client: AsyncClient, auth_headers, student_a, student_b
    ):
        response = await client.get(
            "/api/messages", params={"targetId": student_b.id}, headers=auth_headers(student_a)
        )
        assert response.status_code == 200
        assert response.json() == []

    async def test_thread_with_self_is_empty(self, client: AsyncClient, auth_headers, student_a):
        response = await client.get(
            "/api/messages", params={"targetId": student_a.id}, headers=auth_headers(student_a)
        )
        assert response.status_code == 200
        assert response.json() == []

    async def test_unknown_thread_type(self, client: AsyncClient, auth_headers, student_a):
        response = await client.get(
            "/api/messages", params={"type": "archived"}, headers=auth_headers(student_a)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_threads_and_search_share_summary_keys(
        self, client: AsyncClient, auth_headers, student_a, student_b
    ):
        sent = await client.post(
            "/api/messages",
            json={"content": "hi", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )
        conversation_id = sent.json()["conversationId"]

        (thread,) = (await client.get("/api/messages", headers=auth_headers(student_a))).json()
        (found,) = (
            await client.get(
                "/api/messages", params={"search": "bob"}, headers=auth_headers(student_a)
            )
        ).json()

        shared = {"id", "name", "role", "lastMessage", "conversationId", "status", "initiatorId"}
        assert shared <= set(thread) and shared <= set(found)
        for item in (thread, found):
            assert item["id"] == student_b.id
            assert item["conversationId"] == conversation_id
            assert item["status"] == "PENDING"
            assert item["initiatorId"] == student_a.id
            assert item["lastMessage"] == "hi"

        messages = await client.get(
            "/api/messages", params={"targetId": thread["id"]}, headers=auth_headers(student_a)
        )
        assert [m["content"] for m in messages.json()] == ["hi"]


class TestSendValidation:
    """Rejected sends"""

    async def test_self_send(self, client: AsyncClient, auth_headers, staff_user):
        response = await client.post(
            "/api/messages",
            json={"content": "note to self", "receiverId": staff_user.id},
            headers=auth_headers(staff_user),
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [{}, {"content": "   "}])
    async def test_missing_content(self, client: AsyncClient, auth_headers, student_a, student_b, body):
        response = await client.post(
            "/api/messages",
            json={**body, "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Message content is required"

    async def test_staff_must_name_receiver(self, client: AsyncClient, auth_headers, staff_user):
        response = await client.post(
            "/api/messages", json={"content": "hello"}, headers=auth_headers(staff_user)
        )
        assert response.status_code == 400

    async def test_unknown_receiver(self, client: AsyncClient, auth_headers, student_a):
        response = await client.post(
            "/api/messages",
            json={"content": "hello", "receiverId": "ghost"},
            headers=auth_headers(student_a),
        )
        assert response.status_code == 404


class TestStudentDefaultInbox:
    """Students may omit the receiver"""

    async def test_falls_back_to_oldest_staff_member(
        self, client: AsyncClient, auth_headers, admin_user, staff_user, student_a
    ):
        response = await client.post(
            "/api/messages",
            json={"content": "My window is broken"},
            headers=auth_headers(student_a),
        )

        assert response.status_code == 200
        assert response.json()["receiverId"] == admin_user.id

    async def test_no_staff_available(self, client: AsyncClient, auth_headers, student_a):
        response = await client.post(
            "/api/messages", json={"content": "anyone?"}, headers=auth_headers(student_a)
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "No staff available to receive message"


class TestAccept:
    """Accept endpoint errors"""

    async def test_missing_conversation_id(self, client: AsyncClient, auth_headers, student_a):
        response = await client.post(
            "/api/conversations/accept", json={}, headers=auth_headers(student_a)
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing conversation ID"

    async def test_unknown_and_foreign_look_the_same(
        self, client: AsyncClient, auth_headers, student_a, student_b, staff_user
    ):
        sent = await client.post(
            "/api/messages",
            json={"content": "hi", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )

        foreign = await client.post(
            "/api/conversations/accept",
            json={"conversationId": sent.json()["conversationId"]},
            headers=auth_headers(staff_user),
        )
        unknown = await client.post(
            "/api/conversations/accept",
            json={"conversationId": "does-not-exist"},
            headers=auth_headers(staff_user),
        )

        assert foreign.status_code == unknown.status_code == 404
        assert foreign.json()["detail"] == unknown.json()["detail"]


class TestUserSearch:
    """Search candidates annotated with existing conversations"""

    @pytest.mark.parametrize("query", ["%", "_", "a_i"])
    async def test_wildcards_are_literal(
        self, client: AsyncClient, auth_headers, student_a, student_b, staff_user, query
    ):
        response = await client.get(
            "/api/messages", params={"search": query}, headers=auth_headers(student_a)
        )
        assert response.status_code == 200
        assert response.json() == []

    async def test_search_annotates_conversation(
        self, client: AsyncClient, auth_headers, student_a, student_b, staff_user
    ):
        sent = await client.post(
            "/api/messages",
            json={"content": "hi", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )

        response = await client.get(
            "/api/messages", params={"search": "STUDENT"}, headers=auth_headers(student_a)
        )

        assert response.status_code == 200
        results = {r["id"]: r for r in response.json()}
        assert student_a.id not in results
        assert results[student_b.id]["conversationId"] == sent.json()["conversationId"]
        assert results[student_b.id]["status"] == "PENDING"

    async def test_search_matches_email(self, client: AsyncClient, auth_headers, student_a, staff_user):
        response = await client.get(
            "/api/messages", params={"search": "desk@"}, headers=auth_headers(student_a)
        )

        (result,) = response.json()
        assert result["id"] == staff_user.id
        assert result["conversationId"] is None

    async def test_blank_search_is_empty(self, client: AsyncClient, auth_headers, student_a, student_b):
        response = await client.get(
            "/api/messages", params={"search": "  "}, headers=auth_headers(student_a)
        )
        assert response.status_code == 200
        assert response.json() == []

    async def test_search_takes_priority_over_target(
        self, client: AsyncClient, auth_headers, student_a, student_b
    ):
        response = await client.get(
            "/api/messages",
            params={"search": "bob", "targetId": student_b.id},
            headers=auth_headers(student_a),
        )
        assert [r["id"] for r in response.json()] == [student_b.id]


async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_ready_reports_uninitialized_database(client: AsyncClient):
    # The lifespan does not run under ASGITransport, so the engine is never created.
    response = await client.get("/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["dependencies"] == {"database": "unavailable"}
