from rest_framework import serializers
from .models import Profile, PresenceRecord
from .presence import is_effectively_online


class ProfileSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source='user.id', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    name = serializers.CharField(source='user.name', required=False, max_length=150)

    class Meta:
        model = Profile
        fields = ['id', 'email', 'name', 'bio', 'profile_picture', 'year', 'section',
                  'branch', 'pronouns', 'updated_at']
        read_only_fields = ['profile_picture', 'updated_at']

    def validate_name(self, value):
        if len(value.strip()) < 2:
            raise serializers.ValidationError("Name must be at least 2 characters long.")
        return value.strip()

    def update(self, instance, validated_data):
        user_data = validated_data.pop('user', {})
        if 'name' in user_data:
            instance.user.name = user_data['name']
            instance.user.save(update_fields=['name'])
        return super().update(instance, validated_data)


class PresenceSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    online = serializers.SerializerMethodField()

    def get_online(self, obj):
        return is_effectively_online(obj)

    class Meta:
        model = PresenceRecord
        fields = ['user_id', 'is_online', 'last_heartbeat', 'online']


def roster_entry(profile):
    user = profile.user
    return {
        "id": user.id,
        "name": user.display_name,
        "email": user.email,
        "photo_url": profile.profile_picture,
        "year": profile.year,
        "section": profile.section,
        "branch": profile.branch,
        "pronouns": profile.pronouns,
    }


def roster_event(profile):
    return {
        "type": "roster.update",
        "user": roster_entry(profile),
        "stamp": profile.updated_at.timestamp(),
    }
