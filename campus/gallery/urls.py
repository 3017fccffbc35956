from django.urls import path
from .views import GalleryListCreateView

urlpatterns = [
    path('media/', GalleryListCreateView.as_view(), name='gallery-media'),
]
