# profiles/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class Profile(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='profile')
    bio = models.TextField(blank=True, default='')
    profile_picture = models.URLField(max_length=500, blank=True, default='')
    year = models.CharField(max_length=20, blank=True, default='')
    section = models.CharField(max_length=20, blank=True, default='')
    branch = models.CharField(max_length=100, blank=True, default='')
    pronouns = models.CharField(max_length=30, blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.user.email}"


class PresenceRecord(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, primary_key=True, related_name='presence'
    )
    is_online = models.BooleanField(default=False)
    last_heartbeat = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        state = "online" if self.is_online else "offline"
        return f"{self.user_id}: {state} (last heartbeat {self.last_heartbeat})"
