import pytest
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator

from authentication import services as auth_services
from chat import routing as chat_routing
from chat import services as chat_services
from chat.models import DirectMessage, GroupMessage
from live import routing as live_routing
from profiles.models import PresenceRecord

pytestmark = pytest.mark.django_db(transaction=True)

application = URLRouter(live_routing.websocket_urlpatterns + chat_routing.websocket_urlpatterns)


async def receive_until(communicator, predicate, attempts=20):
    for _ in range(attempts):
        frame = await communicator.receive_json_from(timeout=3)
        if predicate(frame):
            return frame
    raise AssertionError("expected frame never arrived")


def view_with(cause):
    return lambda frame: frame.get("type") == "view" and frame.get("cause") == cause


async def open_session(user, access_token_for, path="/ws/session/"):
    # Minting a refresh token records an OutstandingToken row.
    token = await database_sync_to_async(access_token_for)(user)
    communicator = WebsocketCommunicator(application, f"{path}?token={token}")
    connected, _ = await communicator.connect()
    assert connected
    return communicator


@database_sync_to_async
def presence_of(user):
    return PresenceRecord.objects.get(user=user).is_online


class TestSessionConsumer:
    async def test_rejects_missing_token(self):
        communicator = WebsocketCommunicator(application, "/ws/session/")
        connected, code = await communicator.connect()
        assert not connected
        assert code == 4001

    async def test_rejects_bad_token(self):
        communicator = WebsocketCommunicator(application, "/ws/session/?token=garbage")
        connected, code = await communicator.connect()
        assert not connected
        assert code == 4003

    async def test_snapshot_and_presence(self, alice, bob, access_token_for):
        communicator = await open_session(alice, access_token_for)

        snapshot = await receive_until(communicator, view_with("snapshot"))
        assert [u["id"] for u in snapshot["view"]["users"]] == [bob.id]
        assert await presence_of(alice) is True

        await communicator.send_json_to({"type": "ping"})
        await receive_until(communicator, lambda frame: frame.get("type") == "pong")

        await communicator.disconnect()
        assert await presence_of(alice) is False

    async def test_message_then_open_conversation_marks_read(self, alice, bob, access_token_for):
        communicator = await open_session(alice, access_token_for)
        await receive_until(communicator, view_with("snapshot"))

        conversation = chat_services.conversation_id(alice, bob)
        await database_sync_to_async(chat_services.send)(conversation, bob, alice, "hi")

        frame = await receive_until(communicator, view_with("message"))
        bob_entry = next(u for u in frame["view"]["users"] if u["id"] == bob.id)
        assert bob_entry["unread_count"] == 1
        assert bob_entry["last_message"] == "hi"

        await communicator.send_json_to({"type": "open_conversation", "user_id": bob.id})
        frame = await receive_until(communicator, view_with("open_conversation"))
        assert frame["view"]["conversation"]["conversation_id"] == conversation
        assert [m["text"] for m in frame["view"]["conversation"]["messages"]] == ["hi"]

        frame = await receive_until(communicator, view_with("read"))
        assert frame["view"]["conversation"]["messages"][0]["read"] is True
        unread = await database_sync_to_async(chat_services.unread_count)(conversation, alice)
        assert unread == 0

        await communicator.disconnect()

    async def test_send_message_and_request(self, alice, bob, access_token_for):
        communicator = await open_session(alice, access_token_for)
        await receive_until(communicator, view_with("snapshot"))

        await communicator.send_json_to({"type": "send_message", "user_id": bob.id, "text": "hello"})
        await receive_until(communicator, lambda frame: frame.get("type") == "message_sent")
        assert await database_sync_to_async(DirectMessage.objects.filter(text="hello").count)() == 1

        await communicator.send_json_to({"type": "send_request", "user_id": bob.id})
        frame = await receive_until(communicator, view_with("request"))
        assert [r["to_user"] for r in frame["view"]["outgoing_requests"]] == [bob.id]

        await communicator.disconnect()

    async def test_errors_keep_socket_open(self, alice, bob, access_token_for):
        communicator = await open_session(alice, access_token_for)
        await receive_until(communicator, view_with("snapshot"))

        await communicator.send_json_to({"type": "send_message", "user_id": bob.id, "text": "   "})
        frame = await receive_until(communicator, lambda frame: frame.get("type") == "error")
        assert frame["code"] == "empty_text"

        await communicator.send_json_to({"type": "respond_request", "from_user_id": bob.id, "decision": "accept"})
        frame = await receive_until(communicator, lambda frame: frame.get("type") == "error")
        assert frame["code"] == "not_found"

        await communicator.send_json_to({"type": "respond_request", "from_user_id": "bob", "decision": "accept"})
        frame = await receive_until(communicator, lambda frame: frame.get("type") == "error")
        assert frame["code"] == "validation_error"

        await communicator.send_json_to({"type": "ping"})
        await receive_until(communicator, lambda frame: frame.get("type") == "pong")
        await communicator.disconnect()

    async def test_sign_out_ends_session(self, alice, access_token_for):
        communicator = await open_session(alice, access_token_for)
        await receive_until(communicator, view_with("snapshot"))

        await database_sync_to_async(auth_services.sign_out)(alice)

        await receive_until(communicator, lambda frame: frame.get("type") == "session_ended")
        closed = await communicator.receive_output(timeout=3)
        assert closed["type"] == "websocket.close"
        assert await presence_of(alice) is False
        await communicator.disconnect()


class TestGlobalConsumer:
    async def test_post_and_react(self, alice, bob, access_token_for):
        alice_socket = await open_session(alice, access_token_for, path="/ws/global/")
        bob_socket = await open_session(bob, access_token_for, path="/ws/global/")
        await receive_until(alice_socket, lambda frame: frame.get("type") == "history")
        await receive_until(bob_socket, lambda frame: frame.get("type") == "history")

        await alice_socket.send_json_to({"type": "group_message", "message": "hello everyone"})
        frame = await receive_until(bob_socket, lambda frame: frame.get("type") == "group_message")
        assert frame["message"]["text"] == "hello everyone"
        message_id = frame["message"]["id"]

        await bob_socket.send_json_to({"type": "reaction", "message_id": message_id, "emoji": "🔥"})
        frame = await receive_until(alice_socket, lambda frame: frame.get("type") == "reaction")
        assert frame["reactions"] == {"🔥": [bob.id]}

        await bob_socket.send_json_to({"type": "delete_message", "message_id": message_id})
        frame = await receive_until(bob_socket, lambda frame: frame.get("type") == "error")
        assert frame["code"] == "not_authorized"
        assert await database_sync_to_async(GroupMessage.objects.count)() == 1

        await alice_socket.disconnect()
        await bob_socket.disconnect()
