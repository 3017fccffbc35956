from django.conf import settings
from django.db import models


class StudyMaterial(models.Model):
    BRANCH_CHOICES = [(b, b) for b in ['CSE', 'ECE', 'EEE', 'ME', 'CE', 'IT', 'Other']]
    SEMESTER_CHOICES = [(str(s), str(s)) for s in range(1, 9)]

    title = models.CharField(max_length=200)
    branch = models.CharField(max_length=10, choices=BRANCH_CHOICES)
    semester = models.CharField(max_length=2, choices=SEMESTER_CHOICES)
    url = models.URLField(max_length=1000)
    file_type = models.CharField(max_length=100, default='application/octet-stream')
    description = models.TextField(blank=True, default='')
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='study_materials', on_delete=models.CASCADE)
    uploaded_by_name = models.CharField(max_length=150)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['branch', 'semester'], name='material_branch_sem_idx'),
        ]

    def __str__(self):
        return f"{self.branch} sem {self.semester}: {self.title}"
