# chat/services.py
"""Direct-message conversations and the global group channel.

A conversation between two users is addressed by ``conversation_id(a, b)``,
which is the same whichever side is passed first. Direct messages never
change after they are written except for ``read``, which only ever goes from
False to True.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Q

from campus.errors import EmptyText, NotAuthorized, NotFound, TransientBackendError, ValidationError
from chat.models import DirectMessage, GroupMessage
from contacts.services import are_friends
from live.broadcast import GLOBAL_CHAT_GROUP, conversation_group, publish, user_group

logger = logging.getLogger(__name__)

MAX_EMOJI_LENGTH = 16


def _id(user_or_id):
    return getattr(user_or_id, 'id', user_or_id)


def conversation_id(user_a, user_b):
    return "_".join(sorted([str(_id(user_a)), str(_id(user_b))]))


def message_payload(message):
    return {
        "message_id": message.message_id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "sender_name": message.sender_name,
        "sender_email": message.sender_email,
        "text": message.text,
        "timestamp": message.timestamp.isoformat(),
        "read": message.read,
        "stamp": message.timestamp.timestamp(),
    }


def _publish_to_conversation(conversation, participants, event):
    publish(conversation_group(conversation), event)
    for user_id in participants:
        publish(user_group(user_id), event)


def send(conversation, sender, receiver, text):
    if text is None or not text.strip():
        raise EmptyText()
    if len(text) > settings.DIRECT_MESSAGE_MAX_LENGTH:
        raise ValidationError(f"Message is longer than {settings.DIRECT_MESSAGE_MAX_LENGTH} characters")
    if _id(sender) == _id(receiver):
        raise ValidationError("You cannot message yourself")
    if conversation != conversation_id(sender, receiver):
        raise ValidationError("Conversation does not belong to these users")
    if settings.DIRECT_MESSAGE_REQUIRES_FRIENDSHIP and not are_friends(sender, receiver):
        raise NotAuthorized("You can only message your friends")

    try:
        message = DirectMessage.objects.create(
            conversation_id=conversation,
            sender=sender,
            receiver=receiver,
            sender_name=sender.display_name,
            sender_email=sender.email,
            text=text,
        )
    except DatabaseError as e:
        raise TransientBackendError(f"Could not send message: {str(e)}")

    logger.info(f"Message {message.message_id} sent in {conversation}")
    event = {"type": "message.new", "message": message_payload(message)}
    _publish_to_conversation(conversation, [message.sender_id, message.receiver_id], event)
    return message


def mark_read(message_id, reader=None):
    """Mark one message read. Marking an already-read message is a no-op."""
    try:
        message = DirectMessage.objects.get(message_id=message_id)
    except DirectMessage.DoesNotExist:
        raise NotFound("Message not found")
    if reader is not None and _id(reader) != message.receiver_id:
        raise NotAuthorized("Only the receiver can mark a message as read")
    if message.read:
        return message

    updated = DirectMessage.objects.filter(pk=message.pk, read=False).update(read=True)
    message.read = True
    if updated:
        event = {
            "type": "message.read",
            "conversation_id": message.conversation_id,
            "message_ids": [message.message_id],
        }
        _publish_to_conversation(message.conversation_id, [message.sender_id, message.receiver_id], event)
    return message


def mark_conversation_read(conversation, reader):
    unread = DirectMessage.objects.filter(conversation_id=conversation, receiver_id=_id(reader), read=False)
    message_ids = list(unread.values_list('message_id', flat=True))
    if not message_ids:
        return 0
    with transaction.atomic():
        DirectMessage.objects.filter(message_id__in=message_ids).update(read=True)
    participants = [int(part) for part in conversation.split('_') if part.isdigit()]
    event = {"type": "message.read", "conversation_id": conversation, "message_ids": message_ids}
    _publish_to_conversation(conversation, participants, event)
    logger.debug(f"Marked {len(message_ids)} messages read in {conversation}")
    return len(message_ids)


def history(conversation):
    """Yield the conversation's messages oldest first. Call again to replay."""
    queryset = DirectMessage.objects.filter(conversation_id=conversation).order_by('timestamp', 'id')
    yield from queryset.iterator()


def unread_count(conversation, for_user):
    return DirectMessage.objects.filter(conversation_id=conversation, receiver_id=_id(for_user), read=False).count()


def conversation_summaries(user):
    summaries = {}
    messages = DirectMessage.objects.filter(Q(sender=user) | Q(receiver=user)).order_by('-timestamp', '-id')
    for message in messages.iterator():
        other_id = message.receiver_id if message.sender_id == user.id else message.sender_id
        summary = summaries.get(other_id)
        if summary is None:
            summary = summaries[other_id] = {
                "user_id": other_id,
                "conversation_id": message.conversation_id,
                "last_message": message.text,
                "last_message_at": message.timestamp.isoformat(),
                "unread_count": 0,
            }
        if message.receiver_id == user.id and not message.read:
            summary["unread_count"] += 1
    return list(summaries.values())


def group_message_payload(message):
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "sender_name": message.sender_name,
        "sender_email": message.sender_email,
        "text": message.text,
        "timestamp": message.timestamp.isoformat(),
        "reactions": message.reactions,
        "reply_to": message.reply_to,
    }


def post_group_message(sender, text, reply_to_id=None):
    if text is None or not text.strip():
        raise EmptyText()

    reply_to = None
    if reply_to_id:
        try:
            parent = GroupMessage.objects.get(id=reply_to_id)
        except GroupMessage.DoesNotExist:
            raise NotFound("Parent message not found")
        reply_to = {"sender_name": parent.sender_name, "text": parent.text}

    try:
        message = GroupMessage.objects.create(
            sender=sender,
            sender_name=sender.display_name,
            sender_email=sender.email,
            text=text,
            reply_to=reply_to,
        )
    except DatabaseError as e:
        raise TransientBackendError(f"Could not send message: {str(e)}")

    publish(GLOBAL_CHAT_GROUP, {"type": "group.message", "message": group_message_payload(message)})
    return message


def toggle_reaction(message_id, user, emoji):
    emoji = (emoji or '').strip()
    if not emoji or len(emoji) > MAX_EMOJI_LENGTH:
        raise ValidationError("Invalid reaction")

    with transaction.atomic():
        try:
            message = GroupMessage.objects.select_for_update().get(id=message_id)
        except GroupMessage.DoesNotExist:
            raise NotFound("Message not found")
        reactions = dict(message.reactions or {})
        current = list(reactions.get(emoji, []))
        if user.id in current:
            current.remove(user.id)
        else:
            current.append(user.id)
        if current:
            reactions[emoji] = current
        else:
            reactions.pop(emoji, None)
        message.reactions = reactions
        message.save(update_fields=['reactions'])

    publish(GLOBAL_CHAT_GROUP, {"type": "group.reaction", "message_id": message.id, "reactions": reactions})
    return reactions


def delete_group_message(message_id, user):
    try:
        message = GroupMessage.objects.get(id=message_id)
    except GroupMessage.DoesNotExist:
        raise NotFound("Message not found")
    if message.sender_id != user.id:
        raise NotAuthorized("Not authorized to delete this message")
    message.delete()
    logger.info(f"Group message {message_id} deleted by user {user.id}")
    publish(GLOBAL_CHAT_GROUP, {"type": "group.deleted", "message_id": message_id})


def recent_group_messages(limit=None):
    limit = limit or settings.GROUP_CHAT_HISTORY_LIMIT
    latest = GroupMessage.objects.order_by('-timestamp', '-id')[:limit]
    return list(reversed(list(latest)))
