# live/snapshot.py
from django.db.models import Q

from chat.models import DirectMessage
from chat.services import history, message_payload
from contacts.models import FriendRequest
from contacts.services import request_payload
from profiles.models import PresenceRecord, Profile
from profiles.serializers import roster_entry


def load_snapshot(aggregator):
    """Prime ``aggregator`` from the store. Live events applied earlier win by stamp."""
    viewer_id = aggregator.viewer_id

    for profile in Profile.objects.select_related('user').exclude(user_id=viewer_id):
        aggregator.apply_roster(roster_entry(profile), profile.updated_at.timestamp())

    for record in PresenceRecord.objects.all():
        aggregator.apply_presence(record.user_id, record.is_online, record.last_heartbeat, record.updated_at.timestamp())

    requests = FriendRequest.objects.filter(Q(from_user_id=viewer_id) | Q(to_user_id=viewer_id))
    for friend_request in requests:
        aggregator.apply_request(request_payload(friend_request))

    for message in DirectMessage.objects.filter(receiver_id=viewer_id, read=False):
        aggregator.apply_message(message_payload(message))

    seen = set()
    latest = DirectMessage.objects.filter(Q(sender_id=viewer_id) | Q(receiver_id=viewer_id)).order_by('-timestamp', '-id')
    for message in latest.iterator():
        if message.conversation_id in seen:
            continue
        seen.add(message.conversation_id)
        aggregator.apply_message(message_payload(message))


def replay_conversation(aggregator, conversation_id):
    for message in history(conversation_id):
        aggregator.apply_message(message_payload(message))
