from django.urls import path
from .views import PresignedUploadView

urlpatterns = [
    path('presigned-url/', PresignedUploadView.as_view(), name='presigned-url'),
]
