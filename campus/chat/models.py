# chat/models.py
import uuid

from django.conf import settings
from django.db import models


def new_message_id():
    return uuid.uuid4().hex


class DirectMessage(models.Model):
    message_id = models.CharField(max_length=50, unique=True, default=new_message_id)
    conversation_id = models.CharField(max_length=64, db_index=True)
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='sent_messages', on_delete=models.CASCADE)
    receiver = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='received_messages', on_delete=models.CASCADE)
    sender_name = models.CharField(max_length=150)
    sender_email = models.EmailField()
    text = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    read = models.BooleanField(default=False)

    class Meta:
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['conversation_id', 'timestamp'], name='dm_conversation_time_idx'),
            models.Index(fields=['conversation_id', 'receiver', 'read'], name='dm_unread_idx'),
        ]

    def __str__(self):
        return f"{self.sender_id} -> {self.receiver_id} (ID: {self.message_id}): {self.text[:30]}"


class GroupMessage(models.Model):
    """Message on the global channel everyone shares."""
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    sender_name = models.CharField(max_length=150)
    sender_email = models.EmailField(blank=True, default='')
    text = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    reactions = models.JSONField(default=dict)
    # Snapshot of the replied-to message, not a reference.
    reply_to = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ['timestamp', 'id']

    def __str__(self):
        return f"{self.sender_name}: {self.text[:30]}"
