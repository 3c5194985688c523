"""
Notifications API tests
"""
from httpx import AsyncClient

from api.features.notifications.entities.notification import NotificationType
from api.features.notifications.service import NotificationService


class TestMessageRequestNotification:
    """Only the message that opens a conversation notifies the receiver"""

    async def test_first_message_notifies_receiver(
        self, client: AsyncClient, auth_headers, student_a, student_b
    ):
        await client.post(
            "/api/messages",
            json={"content": "Can I borrow your iron?", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )
        await client.post(
            "/api/messages",
            json={"content": "Please?", "receiverId": student_b.id},
            headers=auth_headers(student_a),
        )

        response = await client.get("/api/notifications", headers=auth_headers(student_b))

        assert response.status_code == 200
        (notification,) = response.json()
        assert notification["type"] == NotificationType.MESSAGE_REQUEST.value
        assert notification["title"] == "New message request"
        assert notification["message"] == "Can I borrow your iron?"
        assert notification["read"] is False

        sender_side = await client.get("/api/notifications", headers=auth_headers(student_a))
        assert sender_side.json() == []


class TestMarkRead:
    """PATCH /api/notifications"""

    async def test_mark_read_hides_notification(
        self, client: AsyncClient, db_session, auth_headers, student_a
    ):
        notification = await NotificationService().notify(
            student_a.id, "Rent due", "Pay by Friday", db_session=db_session
        )

        response = await client.patch(
            "/api/notifications",
            json={"notificationId": notification.id},
            headers=auth_headers(student_a),
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        listed = await client.get("/api/notifications", headers=auth_headers(student_a))
        assert listed.json() == []

    async def test_missing_id(self, client: AsyncClient, auth_headers, student_a):
        response = await client.patch(
            "/api/notifications", json={}, headers=auth_headers(student_a)
        )
        assert response.status_code == 400

    async def test_other_users_notification_is_not_found(
        self, client: AsyncClient, db_session, auth_headers, student_a, student_b
    ):
        notification = await NotificationService().notify(
            student_a.id, "Rent due", "Pay by Friday", db_session=db_session
        )

        response = await client.patch(
            "/api/notifications",
            json={"notificationId": notification.id},
            headers=auth_headers(student_b),
        )
        assert response.status_code == 404

        still_unread = await client.get("/api/notifications", headers=auth_headers(student_a))
        assert [n["id"] for n in still_unread.json()] == [notification.id]

    async def test_list_is_newest_first_and_limited(
        self, db_session, student_a
    ):
        service = NotificationService(list_limit=2)
        for title in ("one", "two", "three"):
            await service.notify(student_a.id, title, "body", db_session=db_session)

        unread = await service.list_unread(student_a.id, db_session=db_session)

        assert [n.title for n in unread] == ["three", "two"]
