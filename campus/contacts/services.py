# contacts/services.py
"""Friend-request lifecycle and symmetric friendships.

Each ordered pair has at most one ``FriendRequest`` row moving
pending -> accepted | declined. Accepting writes both ``Friendship`` rows in
the same transaction as the status change, so the pair is either friends in
both directions or in neither.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from campus.errors import AlreadyRequested, NotAuthorized, NotFound, TransientBackendError, ValidationError
from contacts.models import FriendRequest, Friendship, pair_key
from live.broadcast import notify_users

logger = logging.getLogger(__name__)

ACCEPT = 'accept'
DECLINE = 'decline'

STATUS_NONE = 'none'
STATUS_SENT = 'sent'
STATUS_PENDING = 'pending'
STATUS_ACCEPTED = 'accepted'

REMOVED = 'removed'


def _id(user_or_id):
    return getattr(user_or_id, 'id', user_or_id)


def combine_status(outgoing, incoming):
    """Relationship as seen by the viewer, given the status of viewer->other and other->viewer."""
    if outgoing == FriendRequest.PENDING:
        return STATUS_SENT
    if outgoing == FriendRequest.ACCEPTED:
        return STATUS_ACCEPTED
    if incoming == FriendRequest.PENDING:
        return STATUS_PENDING
    if incoming == FriendRequest.ACCEPTED:
        return STATUS_ACCEPTED
    return STATUS_NONE


def request_payload(friend_request, status=None):
    return {
        "from_user": friend_request.from_user_id,
        "to_user": friend_request.to_user_id,
        "from_name": friend_request.from_name,
        "to_name": friend_request.to_name,
        "status": status or friend_request.status,
        "created_at": friend_request.created_at.isoformat() if friend_request.created_at else None,
        "stamp": (timezone.now() if status else friend_request.updated_at).timestamp(),
    }


def request_event(friend_request, status=None):
    return {"type": "request.update", "request": request_payload(friend_request, status)}


def _already_requested(existing, from_user_id):
    if existing.status == FriendRequest.ACCEPTED:
        return AlreadyRequested("You are already friends")
    if existing.from_user_id == from_user_id:
        return AlreadyRequested("Friend request already sent")
    return AlreadyRequested("You have a pending friend request from this user. Please accept or reject it first.")


def send_request(from_user, to_user):
    if from_user.id == to_user.id:
        raise ValidationError("You cannot send a request to yourself")

    try:
        with transaction.atomic():
            existing = (
                FriendRequest.objects.select_for_update()
                .filter(pair_key=pair_key(from_user.id, to_user.id), status__in=FriendRequest.ACTIVE_STATUSES)
                .first()
            )
            if existing:
                raise _already_requested(existing, from_user.id)

            friend_request = FriendRequest.objects.select_for_update().filter(
                from_user=from_user, to_user=to_user
            ).first()
            if friend_request is None:
                friend_request = FriendRequest.objects.create(
                    from_user=from_user,
                    to_user=to_user,
                    from_name=from_user.display_name,
                    to_name=to_user.display_name,
                )
            else:
                if not settings.FRIEND_REQUEST_ALLOW_RESEND:
                    raise AlreadyRequested("This friend request was declined")
                friend_request.status = FriendRequest.PENDING
                friend_request.from_name = from_user.display_name
                friend_request.to_name = to_user.display_name
                friend_request.accepted_at = None
                friend_request.declined_at = None
                friend_request.save()
    except IntegrityError:
        # A concurrent request for the same pair committed first.
        logger.info(f"Lost request race between {from_user.id} and {to_user.id}")
        raise AlreadyRequested()
    except DatabaseError as e:
        raise TransientBackendError(f"Could not send friend request: {str(e)}")

    logger.info(f"Friend request sent from {from_user.id} to {to_user.id}")
    notify_users([from_user.id, to_user.id], request_event(friend_request))
    return friend_request


def respond(actor, from_user_id, to_user_id, decision):
    if decision not in (ACCEPT, DECLINE):
        raise ValidationError("Decision must be 'accept' or 'decline'")

    try:
        with transaction.atomic():
            friend_request = (
                FriendRequest.objects.select_for_update()
                .select_related('from_user', 'to_user')
                .filter(from_user_id=from_user_id, to_user_id=to_user_id, status=FriendRequest.PENDING)
                .first()
            )
            if friend_request is None:
                raise NotFound("Friend request not found or already processed")
            if _id(actor) != friend_request.to_user_id:
                logger.warning(f"User {_id(actor)} tried to respond to request {from_user_id} -> {to_user_id}")
                raise NotAuthorized("Only the recipient can respond to this friend request")

            now = timezone.now()
            if decision == ACCEPT:
                friend_request.status = FriendRequest.ACCEPTED
                friend_request.accepted_at = now
                friend_request.save(update_fields=['status', 'accepted_at', 'updated_at'])

                # Names are captured now; later renames do not rewrite them.
                from_name = friend_request.from_user.display_name
                to_name = friend_request.to_user.display_name
                Friendship.objects.update_or_create(
                    user_id=from_user_id, friend_id=to_user_id,
                    defaults={'user_name': from_name, 'friend_name': to_name},
                )
                Friendship.objects.update_or_create(
                    user_id=to_user_id, friend_id=from_user_id,
                    defaults={'user_name': to_name, 'friend_name': from_name},
                )
            else:
                friend_request.status = FriendRequest.DECLINED
                friend_request.declined_at = now
                friend_request.save(update_fields=['status', 'declined_at', 'updated_at'])
    except DatabaseError as e:
        raise TransientBackendError(f"Could not update friend request: {str(e)}")

    logger.info(f"Friend request {from_user_id} -> {to_user_id} {friend_request.status}")
    notify_users([from_user_id, to_user_id], request_event(friend_request))
    return friend_request


def relationship_status(viewer, other):
    viewer_id, other_id = _id(viewer), _id(other)
    outgoing = (
        FriendRequest.objects.filter(from_user_id=viewer_id, to_user_id=other_id)
        .values_list('status', flat=True)
        .first()
    )
    incoming = None
    if outgoing not in FriendRequest.ACTIVE_STATUSES:
        incoming = (
            FriendRequest.objects.filter(from_user_id=other_id, to_user_id=viewer_id)
            .values_list('status', flat=True)
            .first()
        )
    return combine_status(outgoing, incoming)


def remove_friend(user, friend_id):
    try:
        with transaction.atomic():
            if not Friendship.objects.filter(user=user, friend_id=friend_id).exists():
                raise NotFound("Friend not found in your contacts")
            Friendship.objects.filter(
                Q(user=user, friend_id=friend_id) | Q(user_id=friend_id, friend=user)
            ).delete()
            accepted = list(FriendRequest.objects.filter(
                pair_key=pair_key(user.id, friend_id), status=FriendRequest.ACCEPTED
            ))
            FriendRequest.objects.filter(id__in=[r.id for r in accepted]).delete()
    except DatabaseError as e:
        raise TransientBackendError(f"Could not remove friend: {str(e)}")

    logger.info(f"User {user.id} removed friend {friend_id}")
    for friend_request in accepted:
        notify_users([user.id, friend_id], request_event(friend_request, status=REMOVED))


def incoming_requests(user):
    return FriendRequest.objects.filter(to_user=user, status=FriendRequest.PENDING).order_by('-created_at')


def outgoing_requests(user):
    return FriendRequest.objects.filter(from_user=user, status=FriendRequest.PENDING).order_by('-created_at')


def friends_of(user):
    return Friendship.objects.filter(user=user).select_related('friend__profile').order_by('-created_at')


def are_friends(user_a, user_b):
    return Friendship.objects.filter(user_id=_id(user_a), friend_id=_id(user_b)).exists()
