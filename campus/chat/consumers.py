# chat/consumers.py
import json
import logging
import uuid

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework.exceptions import AuthenticationFailed

from campus.errors import CampusError, error_frame
from live.auth import authenticate_token, token_from_scope
from live.broadcast import GLOBAL_CHAT_GROUP
from . import services

logger = logging.getLogger(__name__)


class GlobalConsumer(AsyncWebsocketConsumer):
    """The shared channel every signed-in user can read and post to."""

    async def connect(self):
        self.user = None
        token = token_from_scope(self.scope)
        if not token:
            logger.warning("Global chat connection rejected: No token provided")
            await self.close(code=4001)
            return

        try:
            self.user = await authenticate_token(token)
        except (InvalidToken, TokenError, AuthenticationFailed) as e:
            logger.error(f"Token validation error: {str(e)}")
            await self.close(code=4003)
            return

        await self.channel_layer.group_add(GLOBAL_CHAT_GROUP, self.channel_name)
        await self.accept()
        logger.info(f"GlobalConsumer connected for user {self.user.id}")

        recent = await database_sync_to_async(
            lambda: [services.group_message_payload(m) for m in services.recent_group_messages()]
        )()
        await self.send(text_data=json.dumps({
            "type": "history",
            "event_id": str(uuid.uuid4()),
            "messages": recent,
        }))

    async def disconnect(self, close_code):
        if self.user is None:
            return
        await self.channel_layer.group_discard(GLOBAL_CHAT_GROUP, self.channel_name)
        logger.info(f"GlobalConsumer disconnected for user {self.user.id} with code {close_code}")

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send(text_data=json.dumps({
                "type": "error",
                "event_id": str(uuid.uuid4()),
                "message": "Invalid JSON"
            }))
            return

        message_type = data.get('type')
        logger.debug(f"Processing message type '{message_type}' for user {self.user.id}")
        try:
            if message_type == 'ping':
                await self.send(text_data=json.dumps({"type": "pong"}))
            elif message_type == 'group_message':
                await database_sync_to_async(services.post_group_message)(
                    self.user, data.get('message'), data.get('reply_to_id')
                )
            elif message_type == 'reaction':
                await database_sync_to_async(services.toggle_reaction)(
                    data.get('message_id'), self.user, data.get('emoji')
                )
            elif message_type == 'delete_message':
                await database_sync_to_async(services.delete_group_message)(data.get('message_id'), self.user)
            else:
                await self.send(text_data=json.dumps({
                    "type": "error",
                    "event_id": str(uuid.uuid4()),
                    "message": f"Unknown message type: {message_type}"
                }))
        except CampusError as e:
            await self.send(text_data=json.dumps(error_frame(e)))
        except Exception as e:
            logger.error(f"Error processing {message_type} for user {self.user.id}: {str(e)}", exc_info=True)
            await self.send(text_data=json.dumps({
                "type": "error",
                "event_id": str(uuid.uuid4()),
                "message": "Internal server error"
            }))

    async def group_message(self, event):
        await self.send(text_data=json.dumps({
            "type": "group_message",
            "event_id": str(uuid.uuid4()),
            "message": event["message"],
        }))

    async def group_reaction(self, event):
        await self.send(text_data=json.dumps({
            "type": "reaction",
            "event_id": str(uuid.uuid4()),
            "message_id": event["message_id"],
            "reactions": event["reactions"],
        }))

    async def group_deleted(self, event):
        await self.send(text_data=json.dumps({
            "type": "message_deleted",
            "event_id": str(uuid.uuid4()),
            "message_id": event["message_id"],
        }))
