from django.conf import settings
from django.db import models


def empty_reactions():
    return {reaction: [] for reaction in settings.FEED_REACTIONS}


class Post(models.Model):
    PHOTO = 'photo'
    VIDEO = 'video'
    MEDIA_TYPE_CHOICES = [
        (PHOTO, 'Photo'),
        (VIDEO, 'Video'),
    ]

    author = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='posts', on_delete=models.CASCADE)
    author_name = models.CharField(max_length=150)
    author_email = models.EmailField()
    media_url = models.URLField(max_length=1000)
    media_type = models.CharField(max_length=10, choices=MEDIA_TYPE_CHOICES)
    caption = models.TextField(blank=True, default='')
    reactions = models.JSONField(default=empty_reactions)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-timestamp', '-id']

    def __str__(self):
        return f"{self.author_name} ({self.media_type}) at {self.timestamp}"


class Comment(models.Model):
    post = models.ForeignKey(Post, related_name='comments', on_delete=models.CASCADE)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='comments', on_delete=models.CASCADE)
    author_name = models.CharField(max_length=150)
    author_email = models.EmailField()
    text = models.TextField()
    streak_count = models.PositiveIntegerField(default=1)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['post', 'timestamp'], name='comment_post_time_idx'),
        ]

    def __str__(self):
        return f"{self.author_name} on post {self.post_id}: {self.text[:30]}"
