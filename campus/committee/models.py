from django.conf import settings
from django.db import models


class CommitteeEvent(models.Model):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    committee = models.CharField(max_length=100)
    date = models.DateTimeField()
    location = models.CharField(max_length=200, blank=True, default='')
    posted_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='committee_events', on_delete=models.CASCADE)
    posted_by_name = models.CharField(max_length=150)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp', '-id']

    def __str__(self):
        return f"{self.committee}: {self.title}"
