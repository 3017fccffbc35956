from django.conf import settings
from django.db import models


class GalleryItem(models.Model):
    PHOTO = 'photo'
    VIDEO = 'video'
    MEDIA_TYPE_CHOICES = [(PHOTO, 'Photo'), (VIDEO, 'Video')]

    url = models.URLField(max_length=1000)
    media_type = models.CharField(max_length=10, choices=MEDIA_TYPE_CHOICES)
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='gallery_items', on_delete=models.CASCADE)
    uploaded_by_name = models.CharField(max_length=150)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp', '-id']

    def __str__(self):
        return f"{self.media_type} by {self.uploaded_by_name}"
