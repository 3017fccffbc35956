# live/aggregator.py
"""One consistent view model per live session.

Roster, presence, friend requests and messages arrive on independent
channel groups with no ordering between them. Each stream has exactly one
``apply_*`` entry point that merges into maps keyed by primary key, and
every keyed update carries a ``stamp``; an update older than the last one
applied for the same key in the same stream is dropped. Messages are
immutable apart from ``read``, which only ever merges towards True.
"""
import logging
from collections import namedtuple

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from contacts.services import REMOVED, combine_status
from profiles.presence import is_effectively_online

logger = logging.getLogger(__name__)

ROSTER = 'roster'
PRESENCE = 'presence'
REQUESTS = 'requests'

PresenceState = namedtuple('PresenceState', ['user_id', 'is_online', 'last_heartbeat'])


def _as_datetime(value):
    if value is None or not isinstance(value, str):
        return value
    return parse_datetime(value)


class LiveAggregator:
    def __init__(self, viewer_id):
        self.viewer_id = viewer_id
        self.active_conversation = None
        self._stamps = {}
        self._roster = {}
        self._presence = {}
        self._requests = {}
        self._messages = {}
        self._read_ids = set()
        # message_id -> counterpart id, for messages the viewer has not read
        self._unread = {}
        self._last_message = {}

    def _is_fresh(self, stream, key, stamp):
        """Record ``stamp`` for ``key`` unless an update at least as new was already applied."""
        if stamp is None:
            return True
        previous = self._stamps.get((stream, key))
        if previous is not None and stamp < previous:
            logger.debug(f"Dropped stale {stream} update for {key}")
            return False
        self._stamps[(stream, key)] = stamp
        return True

    def _counterpart(self, message):
        if message["sender_id"] == self.viewer_id:
            return message["receiver_id"]
        return message["sender_id"]

    def apply_roster(self, entry, stamp=None):
        user_id = entry["id"]
        if user_id == self.viewer_id:
            return False
        if not self._is_fresh(ROSTER, user_id, stamp):
            return False
        self._roster[user_id] = dict(entry)
        return True

    def apply_presence(self, user_id, is_online, last_heartbeat=None, stamp=None):
        if not self._is_fresh(PRESENCE, user_id, stamp):
            return False
        self._presence[user_id] = PresenceState(user_id, bool(is_online), _as_datetime(last_heartbeat))
        return True

    def apply_request(self, request):
        key = (request["from_user"], request["to_user"])
        if self.viewer_id not in key:
            return False
        if not self._is_fresh(REQUESTS, key, request.get("stamp")):
            return False
        if request["status"] == REMOVED:
            self._requests.pop(key, None)
        else:
            self._requests[key] = dict(request)
        return True

    def apply_message(self, message):
        """Merge one direct message. Returns False when nothing changed."""
        message_id = message["message_id"]
        counterpart = self._counterpart(message)
        read = bool(message.get("read")) or message_id in self._read_ids
        if read:
            self._read_ids.add(message_id)
        changed = False

        last = self._last_message.get(counterpart)
        if last is None or (message["stamp"], message_id) > (last["stamp"], last["message_id"]):
            self._last_message[counterpart] = dict(message, read=read)
            changed = True
        elif last["message_id"] == message_id and read and not last["read"]:
            last["read"] = True
            changed = True

        if message["receiver_id"] == self.viewer_id:
            if read:
                changed = self._unread.pop(message_id, None) is not None or changed
            elif message_id not in self._unread:
                self._unread[message_id] = counterpart
                changed = True

        if message["conversation_id"] == self.active_conversation:
            existing = self._messages.get(message_id)
            if existing is None:
                self._messages[message_id] = dict(message, read=read)
                changed = True
            elif read and not existing["read"]:
                existing["read"] = True
                changed = True
        return changed

    def apply_read(self, conversation_id, message_ids):
        """Mark messages read. Ids seen here stay read even if their message arrives later."""
        changed = False
        for message_id in message_ids:
            if self._unread.pop(message_id, None) is not None:
                changed = True
            self._read_ids.add(message_id)
            message = self._messages.get(message_id)
            if message is not None and not message["read"]:
                message["read"] = True
                changed = True
        for last in self._last_message.values():
            if last["message_id"] in message_ids and not last["read"]:
                last["read"] = True
                changed = True
        return changed

    def open_conversation(self, conversation_id):
        previous = self.active_conversation
        if previous != conversation_id:
            self._messages = {}
        self.active_conversation = conversation_id
        return previous

    def close_conversation(self):
        previous = self.active_conversation
        self.active_conversation = None
        self._messages = {}
        return previous

    def relationship(self, other_id):
        outgoing = self._requests.get((self.viewer_id, other_id))
        incoming = self._requests.get((other_id, self.viewer_id))
        return combine_status(
            outgoing["status"] if outgoing else None,
            incoming["status"] if incoming else None,
        )

    def is_online(self, user_id, now=None):
        return is_effectively_online(self._presence.get(user_id), now)

    def unread_count(self, other_id):
        return sum(1 for counterpart in self._unread.values() if counterpart == other_id)

    def view(self, now=None):
        now = now or timezone.now()
        users = []
        for user_id, entry in self._roster.items():
            presence = self._presence.get(user_id)
            last = self._last_message.get(user_id)
            users.append(dict(
                entry,
                online=self.is_online(user_id, now),
                last_heartbeat=presence.last_heartbeat.isoformat() if presence and presence.last_heartbeat else None,
                relationship=self.relationship(user_id),
                unread_count=self.unread_count(user_id),
                last_message=last["text"] if last else None,
                last_message_at=last["timestamp"] if last else None,
            ))
        users.sort(key=lambda u: (not u["online"], (u.get("name") or "").lower(), u["id"]))

        pending = [r for r in self._requests.values() if r["status"] == 'pending']
        return {
            "viewer_id": self.viewer_id,
            "users": users,
            "incoming_requests": [r for r in pending if r["to_user"] == self.viewer_id],
            "outgoing_requests": [r for r in pending if r["from_user"] == self.viewer_id],
            "conversation": {
                "conversation_id": self.active_conversation,
                "messages": sorted(self._messages.values(), key=lambda m: (m["stamp"], m["message_id"])),
            },
        }
