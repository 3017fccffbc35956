# contacts/serializers.py
from rest_framework import serializers
from .models import FriendRequest, Friendship
from .services import ACCEPT, DECLINE


class FriendRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = FriendRequest
        fields = ['id', 'from_user', 'to_user', 'from_name', 'to_name', 'status',
                  'created_at', 'accepted_at', 'declined_at']


class FriendshipSerializer(serializers.ModelSerializer):
    friend = serializers.SerializerMethodField()

    class Meta:
        model = Friendship
        fields = ['id', 'friend', 'friend_name', 'created_at']

    def get_friend(self, obj):
        friend = obj.friend
        profile = getattr(friend, 'profile', None)
        return {
            'id': friend.id,
            'email': friend.email,
            'name': friend.display_name,
            'profile_picture': profile.profile_picture if profile else '',
            'pronouns': profile.pronouns if profile else '',
        }


class SendRequestSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()


class RespondSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=[ACCEPT, DECLINE])
