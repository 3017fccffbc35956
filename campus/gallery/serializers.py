from rest_framework import serializers
from .models import GalleryItem


class GalleryItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = GalleryItem
        fields = ['id', 'url', 'media_type', 'uploaded_by', 'uploaded_by_name', 'timestamp']
        read_only_fields = ['uploaded_by', 'uploaded_by_name', 'timestamp']
