# profiles/signals.py
import logging

from django.conf import settings
from django.contrib.auth.signals import user_logged_out
from django.db.models.signals import post_save
from django.dispatch import receiver

from live.broadcast import ROSTER_GROUP, publish, user_group
from profiles import presence
from profiles.models import PresenceRecord, Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile_for_new_user(sender, instance, created, **kwargs):
    if not created:
        return
    Profile.objects.get_or_create(user=instance)
    PresenceRecord.objects.get_or_create(user=instance)
    logger.info(f"Created profile and presence record for user {instance.id}")


@receiver(post_save, sender=Profile)
def publish_roster_entry(sender, instance, **kwargs):
    from profiles.serializers import roster_event
    publish(ROSTER_GROUP, roster_event(instance))


@receiver(user_logged_out)
def end_presence_on_logout(sender, request, user, **kwargs):
    if user is None:
        return
    presence.mark_offline(user.id)
    # Live sessions of this user release their subscriptions and stop heartbeating.
    publish(user_group(user.id), {"type": "session.ended", "user_id": user.id})
