import pytest

from campus.errors import EmptyText, NotAuthorized, NotFound, ValidationError
from chat import services
from chat.models import DirectMessage, GroupMessage
from contacts import services as contact_services


class TestConversationId:
    @pytest.mark.parametrize("a, b", [(1, 2), (2, 1), (10, 9), ("u1", "u2"), (7, 7)])
    def test_symmetric(self, a, b):
        assert services.conversation_id(a, b) == services.conversation_id(b, a)

    def test_distinct_pairs(self):
        assert services.conversation_id(1, 23) != services.conversation_id(12, 3)


@pytest.mark.django_db
class TestSend:
    def test_appends_unread_message(self, alice, bob):
        conversation = services.conversation_id(alice, bob)
        message = services.send(conversation, alice, bob, "hello")

        assert message.read is False
        assert message.sender_name == "Alice"
        assert message.sender_email == "alice@miet.ac.in"
        assert message.conversation_id == conversation

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_text(self, alice, bob, text):
        with pytest.raises(EmptyText):
            services.send(services.conversation_id(alice, bob), alice, bob, text)
        assert not DirectMessage.objects.exists()

    def test_wrong_conversation(self, alice, bob, carol):
        with pytest.raises(ValidationError):
            services.send(services.conversation_id(alice, carol), alice, bob, "hi")

    def test_too_long(self, alice, bob, settings):
        settings.DIRECT_MESSAGE_MAX_LENGTH = 5
        with pytest.raises(ValidationError):
            services.send(services.conversation_id(alice, bob), alice, bob, "too long")

    def test_friendship_gate(self, alice, bob, settings):
        settings.DIRECT_MESSAGE_REQUIRES_FRIENDSHIP = True
        conversation = services.conversation_id(alice, bob)
        with pytest.raises(NotAuthorized):
            services.send(conversation, alice, bob, "hi")

        contact_services.send_request(alice, bob)
        contact_services.respond(bob, alice.id, bob.id, contact_services.ACCEPT)
        assert services.send(conversation, alice, bob, "hi").text == "hi"

    def test_publishes_to_conversation_and_both_users(self, alice, bob, monkeypatch, django_capture_on_commit_callbacks):
        sent = []
        monkeypatch.setattr("live.broadcast.group_send", lambda group, event: sent.append((group, event)))
        conversation = services.conversation_id(alice, bob)
        with django_capture_on_commit_callbacks(execute=True):
            message = services.send(conversation, alice, bob, "hello")

        assert {group for group, _ in sent} == {f"chat_{conversation}", f"user_{alice.id}", f"user_{bob.id}"}
        assert all(event["message"]["message_id"] == message.message_id for _, event in sent)


@pytest.mark.django_db
class TestReadTracking:
    def test_mark_read_is_idempotent(self, alice, bob):
        message = services.send(services.conversation_id(alice, bob), alice, bob, "hello")

        services.mark_read(message.message_id)
        services.mark_read(message.message_id)

        message.refresh_from_db()
        assert message.read is True
        assert DirectMessage.objects.count() == 1

    def test_only_receiver_marks_read(self, alice, bob):
        message = services.send(services.conversation_id(alice, bob), alice, bob, "hello")
        with pytest.raises(NotAuthorized):
            services.mark_read(message.message_id, reader=alice)
        message.refresh_from_db()
        assert message.read is False

    def test_mark_read_missing(self):
        with pytest.raises(NotFound):
            services.mark_read("does-not-exist")

    def test_unread_count_per_receiver(self, alice, bob):
        conversation = services.conversation_id(alice, bob)
        services.send(conversation, alice, bob, "one")
        services.send(conversation, alice, bob, "two")
        services.send(conversation, bob, alice, "three")

        assert services.unread_count(conversation, bob) == 2
        assert services.unread_count(conversation, alice) == 1

        assert services.mark_conversation_read(conversation, bob) == 2
        assert services.unread_count(conversation, bob) == 0
        assert services.unread_count(conversation, alice) == 1
        assert services.mark_conversation_read(conversation, bob) == 0


@pytest.mark.django_db
class TestHistory:
    def test_ordered_and_restartable(self, alice, bob, carol):
        conversation = services.conversation_id(alice, bob)
        for text in ["first", "second", "third"]:
            services.send(conversation, alice, bob, text)
        services.send(services.conversation_id(alice, carol), alice, carol, "elsewhere")

        assert [m.text for m in services.history(conversation)] == ["first", "second", "third"]
        assert [m.text for m in services.history(conversation)] == ["first", "second", "third"]

    def test_is_lazy(self, alice, bob):
        conversation = services.conversation_id(alice, bob)
        messages = services.history(conversation)
        services.send(conversation, alice, bob, "after the call")
        assert [m.text for m in messages] == ["after the call"]

    def test_conversation_summaries(self, alice, bob, carol):
        services.send(services.conversation_id(alice, bob), bob, alice, "from bob")
        services.send(services.conversation_id(alice, carol), alice, carol, "to carol")

        summaries = {s["user_id"]: s for s in services.conversation_summaries(alice)}
        assert summaries[bob.id]["unread_count"] == 1
        assert summaries[bob.id]["last_message"] == "from bob"
        assert summaries[carol.id]["unread_count"] == 0


@pytest.mark.django_db
class TestGroupChat:
    def test_reply_keeps_a_snapshot(self, alice, bob):
        parent = services.post_group_message(alice, "original")
        reply = services.post_group_message(bob, "reply", reply_to_id=parent.id)
        parent.delete()

        reply.refresh_from_db()
        assert reply.reply_to == {"sender_name": "Alice", "text": "original"}

    def test_empty_message(self, alice):
        with pytest.raises(EmptyText):
            services.post_group_message(alice, "  ")

    def test_toggle_reaction(self, alice, bob):
        message = services.post_group_message(alice, "hi")
        services.toggle_reaction(message.id, alice, "🔥")
        reactions = services.toggle_reaction(message.id, bob, "🔥")
        assert reactions == {"🔥": [alice.id, bob.id]}

        reactions = services.toggle_reaction(message.id, alice, "🔥")
        reactions = services.toggle_reaction(message.id, bob, "🔥")
        assert reactions == {}

    def test_delete_own_message_only(self, alice, bob):
        message = services.post_group_message(alice, "hi")
        with pytest.raises(NotAuthorized):
            services.delete_group_message(message.id, bob)
        services.delete_group_message(message.id, alice)
        assert not GroupMessage.objects.exists()

    def test_recent_messages_oldest_first(self, alice, settings):
        for i in range(5):
            services.post_group_message(alice, f"message {i}")
        recent = services.recent_group_messages(limit=3)
        assert [m.text for m in recent] == ["message 2", "message 3", "message 4"]


@pytest.mark.django_db
class TestChatViews:
    def test_send_and_read(self, alice, bob, client_for):
        response = client_for(alice).post(f"/chat/conversations/{bob.id}/messages/", {"text": "hi"}, format="json")
        assert response.status_code == 201

        history = client_for(bob).get(f"/chat/conversations/{alice.id}/messages/")
        assert [m["text"] for m in history.data["messages"]] == ["hi"]
        assert history.data["unread_count"] == 1

        response = client_for(bob).post(f"/chat/conversations/{alice.id}/read/")
        assert response.data["marked"] == 1

        summaries = client_for(bob).get("/chat/conversations/")
        assert summaries.data[0]["unread_count"] == 0

    def test_blank_message(self, alice, bob, client_for):
        response = client_for(alice).post(f"/chat/conversations/{bob.id}/messages/", {"text": "  "}, format="json")
        assert response.status_code == 400
        assert response.data["code"] == "empty_text"

    def test_unknown_receiver(self, alice, client_for):
        response = client_for(alice).post("/chat/conversations/99999/messages/", {"text": "hi"}, format="json")
        assert response.status_code == 404

    def test_mark_single_message(self, alice, bob, client_for):
        message = services.send(services.conversation_id(alice, bob), alice, bob, "hi")
        assert client_for(alice).post(f"/chat/messages/{message.message_id}/read/").status_code == 403
        response = client_for(bob).post(f"/chat/messages/{message.message_id}/read/")
        assert response.status_code == 200
        assert response.data["read"] is True

    def test_group_endpoints(self, alice, bob, client_for):
        response = client_for(alice).post("/chat/global/", {"text": "hello all"}, format="json")
        assert response.status_code == 201
        message_id = response.data["id"]

        response = client_for(bob).post(f"/chat/global/{message_id}/react/", {"emoji": "👍"}, format="json")
        assert response.data["reactions"] == {"👍": [bob.id]}

        assert client_for(bob).delete(f"/chat/global/{message_id}/").status_code == 403
        assert client_for(alice).delete(f"/chat/global/{message_id}/").status_code == 204
        assert client_for(alice).get("/chat/global/").data == []
