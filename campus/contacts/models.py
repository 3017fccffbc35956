# contacts/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q


def pair_key(user_a_id, user_b_id):
    low, high = sorted([int(user_a_id), int(user_b_id)])
    return f"{low}_{high}"


class FriendRequest(models.Model):
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (DECLINED, 'Declined'),
    ]
    ACTIVE_STATUSES = [PENDING, ACCEPTED]

    from_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_requests")
    to_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_requests")
    from_name = models.CharField(max_length=150)
    to_name = models.CharField(max_length=150)
    pair_key = models.CharField(max_length=64, db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['from_user', 'to_user'], name='unique_request_per_direction'),
            # At most one live request per unordered pair; the first committed one wins.
            models.UniqueConstraint(
                fields=['pair_key'],
                condition=Q(status__in=['pending', 'accepted']),
                name='unique_active_request_per_pair',
            ),
        ]

    def save(self, *args, **kwargs):
        self.pair_key = pair_key(self.from_user_id, self.to_user_id)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.from_user_id} -> {self.to_user_id} ({self.status})"


class Friendship(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="friendships")
    friend = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="friend_of")
    user_name = models.CharField(max_length=150)
    friend_name = models.CharField(max_length=150)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['user', 'friend'], name='unique_friendship_direction'),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.friend_id}"
