import pytest

from chat import services as chat_services
from contacts import services as contact_services
from contacts.models import Friendship


@pytest.mark.django_db
def test_request_accept_message_and_read(make_user):
    u1 = make_user(name="User One")
    u2 = make_user(name="User Two")

    contact_services.send_request(u1, u2)
    assert contact_services.relationship_status(u1, u2) == "sent"
    assert contact_services.relationship_status(u2, u1) == "pending"

    contact_services.respond(u2, u1.id, u2.id, contact_services.ACCEPT)
    assert contact_services.relationship_status(u1, u2) == "accepted"
    assert contact_services.relationship_status(u2, u1) == "accepted"
    assert Friendship.objects.count() == 2

    conversation = chat_services.conversation_id(u1, u2)
    assert conversation == chat_services.conversation_id(u2, u1)
    chat_services.send(conversation, u2, u1, "hi")

    messages = list(chat_services.history(conversation))
    assert len(messages) == 1
    assert messages[0].receiver_id == u1.id
    assert messages[0].read is False
    assert chat_services.unread_count(conversation, u1) == 1

    chat_services.mark_conversation_read(conversation, u1)
    messages[0].refresh_from_db()
    assert messages[0].read is True
    assert chat_services.unread_count(conversation, u1) == 0
