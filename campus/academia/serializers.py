from posixpath import basename
from urllib.parse import urlparse

from rest_framework import serializers
from .models import StudyMaterial


class StudyMaterialSerializer(serializers.ModelSerializer):
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)

    class Meta:
        model = StudyMaterial
        fields = ['id', 'title', 'branch', 'semester', 'url', 'file_type', 'description',
                  'uploaded_by', 'uploaded_by_name', 'timestamp']
        read_only_fields = ['uploaded_by', 'uploaded_by_name', 'timestamp']

    def validate(self, attrs):
        # Untitled uploads are listed under their file name.
        title = (attrs.get('title') or '').strip()
        if not title:
            title = basename(urlparse(attrs['url']).path)
        if not title:
            raise serializers.ValidationError({"title": "Title is required."})
        attrs['title'] = title
        return attrs
