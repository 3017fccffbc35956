# live/consumers.py
import json
import logging
import uuid

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.contrib.auth import get_user_model
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from campus.errors import CampusError, NotFound, ValidationError, error_frame
from chat import services as chat_services
from contacts import services as contact_services
from profiles import presence
from profiles.presence import PresenceTracker
from .aggregator import LiveAggregator
from .auth import authenticate_token, token_from_scope
from .broadcast import PRESENCE_GROUP, ROSTER_GROUP, conversation_group, user_group
from .snapshot import load_snapshot, replay_conversation
from .subscriptions import SubscriptionSet

User = get_user_model()
logger = logging.getLogger(__name__)

CONVERSATION = 'conversation'


class SessionConsumer(AsyncWebsocketConsumer):
    """One signed-in browser session: presence, roster, requests and the open conversation."""

    async def connect(self):
        self.user = None
        self.subscriptions = None
        self.aggregator = None
        self.cancel_presence = None

        token = token_from_scope(self.scope)
        if not token:
            logger.warning("Session connection rejected: No token provided")
            await self.close(code=4001)
            return
        try:
            self.user = await authenticate_token(token)
        except (InvalidToken, TokenError, AuthenticationFailed) as e:
            logger.error(f"Token validation error: {str(e)}")
            await self.close(code=4003)
            return

        self.subscriptions = SubscriptionSet(self.channel_layer, self.channel_name)
        self.aggregator = LiveAggregator(self.user.id)
        await self.accept()

        # Subscribe before reading the snapshot so no update falls in between.
        await self.subscriptions.subscribe(ROSTER_GROUP, ROSTER_GROUP)
        await self.subscriptions.subscribe(PRESENCE_GROUP, PRESENCE_GROUP)
        await self.subscriptions.subscribe('user', user_group(self.user.id))
        await database_sync_to_async(load_snapshot)(self.aggregator)
        self.cancel_presence = await PresenceTracker().start(self.user.id)
        logger.info(f"Session opened for user {self.user.id}")
        await self.send_view("snapshot")

    async def disconnect(self, close_code):
        await self.end_session()
        if self.user is not None:
            logger.info(f"Session closed for user {self.user.id} with code {close_code}")

    async def end_session(self):
        if self.subscriptions is not None:
            await self.subscriptions.close_all()
        cancel, self.cancel_presence = self.cancel_presence, None
        if cancel is not None:
            await cancel()

    async def send_view(self, cause):
        await self.send(text_data=json.dumps({
            "type": "view",
            "event_id": str(uuid.uuid4()),
            "cause": cause,
            "view": self.aggregator.view(),
        }))

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send(text_data=json.dumps(error_frame(ValidationError("Invalid JSON"))))
            return

        action = data.get('type')
        handler = getattr(self, f"action_{action}", None) if isinstance(action, str) else None
        if handler is None:
            await self.send(text_data=json.dumps(error_frame(ValidationError(f"Unknown message type: {action}"))))
            return
        try:
            await handler(data)
        except CampusError as e:
            await self.send(text_data=json.dumps(error_frame(e)))
        except Exception as e:
            logger.error(f"Error processing {action} for user {self.user.id}: {str(e)}", exc_info=True)
            await self.send(text_data=json.dumps({
                "type": "error",
                "event_id": str(uuid.uuid4()),
                "message": "Internal server error",
            }))

    def _other_user(self, user_id):
        try:
            return User.objects.get(id=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFound("User not found")

    async def action_ping(self, data):
        await self.send(text_data=json.dumps({"type": "pong"}))

    async def action_heartbeat(self, data):
        await database_sync_to_async(presence.heartbeat)(self.user.id)

    async def action_open_conversation(self, data):
        other = await database_sync_to_async(self._other_user)(data.get('user_id'))
        conversation = chat_services.conversation_id(self.user, other)
        await self.subscriptions.replace(CONVERSATION, conversation_group(conversation))
        self.aggregator.open_conversation(conversation)
        await database_sync_to_async(replay_conversation)(self.aggregator, conversation)
        await database_sync_to_async(chat_services.mark_conversation_read)(conversation, self.user)
        await self.send_view("open_conversation")

    async def action_close_conversation(self, data):
        await self.subscriptions.unsubscribe(CONVERSATION)
        self.aggregator.close_conversation()
        await self.send_view("close_conversation")

    async def action_send_message(self, data):
        def send():
            receiver = self._other_user(data.get('user_id'))
            conversation = chat_services.conversation_id(self.user, receiver)
            return chat_services.send(conversation, self.user, receiver, data.get('text'))

        message = await database_sync_to_async(send)()
        await self.send(text_data=json.dumps({
            "type": "message_sent",
            "event_id": str(uuid.uuid4()),
            "message_id": message.message_id,
        }))

    async def action_mark_read(self, data):
        await database_sync_to_async(chat_services.mark_read)(data.get('message_id'), reader=self.user)

    async def action_send_request(self, data):
        def send():
            return contact_services.send_request(self.user, self._other_user(data.get('user_id')))

        await database_sync_to_async(send)()

    async def action_respond_request(self, data):
        try:
            from_user_id = int(data.get('from_user_id'))
        except (TypeError, ValueError):
            raise ValidationError("from_user_id must be a user id")
        await database_sync_to_async(contact_services.respond)(
            self.user, from_user_id, self.user.id, data.get('decision')
        )

    async def presence_update(self, event):
        if self.aggregator.apply_presence(event["user_id"], event["is_online"], event["last_heartbeat"], event["stamp"]):
            await self.send_view("presence")

    async def roster_update(self, event):
        if self.aggregator.apply_roster(event["user"], event["stamp"]):
            await self.send_view("roster")

    async def request_update(self, event):
        if self.aggregator.apply_request(event["request"]):
            await self.send_view("request")

    async def message_new(self, event):
        message = event["message"]
        if not self.aggregator.apply_message(message):
            return
        # Messages arriving in the open conversation are read on sight.
        if message["conversation_id"] == self.aggregator.active_conversation and message["receiver_id"] == self.user.id:
            await database_sync_to_async(chat_services.mark_read)(message["message_id"], reader=self.user)
        await self.send_view("message")

    async def message_read(self, event):
        if self.aggregator.apply_read(event["conversation_id"], event["message_ids"]):
            await self.send_view("read")

    async def session_ended(self, event):
        await self.end_session()
        await self.send(text_data=json.dumps({"type": "session_ended", "event_id": str(uuid.uuid4())}))
        await self.close(code=4000)
