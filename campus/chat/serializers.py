# chat/serializers.py
from rest_framework import serializers
from .models import DirectMessage, GroupMessage


class DirectMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = DirectMessage
        fields = [
            'message_id', 'conversation_id', 'sender', 'receiver', 'sender_name',
            'sender_email', 'text', 'timestamp', 'read'
        ]
        read_only_fields = fields


class GroupMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = GroupMessage
        fields = ['id', 'sender', 'sender_name', 'sender_email', 'text', 'timestamp', 'reactions', 'reply_to']
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)


class GroupPostSerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)
    reply_to_id = serializers.IntegerField(required=False, allow_null=True)


class ReactionSerializer(serializers.Serializer):
    emoji = serializers.CharField(max_length=16)
