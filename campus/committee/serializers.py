from rest_framework import serializers
from .models import CommitteeEvent


class CommitteeEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommitteeEvent
        fields = ['id', 'title', 'description', 'committee', 'date', 'location',
                  'posted_by', 'posted_by_name', 'timestamp']
        read_only_fields = ['posted_by', 'posted_by_name', 'timestamp']

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required.")
        return value.strip()

    def validate_committee(self, value):
        if not value.strip():
            raise serializers.ValidationError("Committee is required.")
        return value.strip()
