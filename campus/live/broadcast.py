# live/broadcast.py
"""Channel-group names and after-commit publishing for live subscriptions."""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

ROSTER_GROUP = "roster"
PRESENCE_GROUP = "presence"
GLOBAL_CHAT_GROUP = "global_group"


def user_group(user_id):
    return f"user_{user_id}"


def conversation_group(conversation_id):
    return f"chat_{conversation_id}"


def group_send(group, event):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"Channel layer not available, dropping {event.get('type')} for {group}")
        return False
    try:
        async_to_sync(channel_layer.group_send)(group, event)
        return True
    except Exception as e:
        # Subscribers re-sync from the store on their next subscribe.
        logger.error(f"Broadcast of {event.get('type')} to {group} failed: {str(e)}")
        return False


def publish(group, event):
    transaction.on_commit(lambda: group_send(group, event))


def notify_users(user_ids, event):
    for user_id in user_ids:
        publish(user_group(user_id), event)
