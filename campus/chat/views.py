# chat/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.contrib.auth import get_user_model
from .serializers import (
    DirectMessageSerializer, GroupMessageSerializer, SendMessageSerializer,
    GroupPostSerializer, ReactionSerializer
)
from . import services
from campus.errors import CampusError, error_response
from rest_framework.permissions import IsAuthenticated
import logging

User = get_user_model()
logger = logging.getLogger(__name__)


class ConversationListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(services.conversation_summaries(request.user))


class ConversationMessagesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id):
        """Full history with ``user_id``, oldest first."""
        conversation = services.conversation_id(request.user, user_id)
        messages = list(services.history(conversation))
        return Response({
            "conversation_id": conversation,
            "messages": DirectMessageSerializer(messages, many=True).data,
            "unread_count": services.unread_count(conversation, request.user),
        })

    def post(self, request, user_id):
        """Send a message to ``user_id``."""
        serializer = SendMessageSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            receiver = User.objects.get(id=user_id)
            conversation = services.conversation_id(request.user, receiver)
            message = services.send(conversation, request.user, receiver, serializer.validated_data['text'])
            return Response(DirectMessageSerializer(message).data, status=status.HTTP_201_CREATED)
        except User.DoesNotExist:
            return Response({"error": "User does not exist"}, status=status.HTTP_404_NOT_FOUND)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error sending message: {str(e)}")
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class MarkConversationReadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, user_id):
        conversation = services.conversation_id(request.user, user_id)
        marked = services.mark_conversation_read(conversation, request.user)
        return Response({"conversation_id": conversation, "marked": marked, "unread_count": 0})


class MarkMessageReadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, message_id):
        try:
            message = services.mark_read(message_id, reader=request.user)
            return Response(DirectMessageSerializer(message).data)
        except CampusError as e:
            return error_response(e)


class GroupMessagesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        messages = services.recent_group_messages()
        return Response(GroupMessageSerializer(messages, many=True).data)

    def post(self, request):
        serializer = GroupPostSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            message = services.post_group_message(
                request.user,
                serializer.validated_data['text'],
                serializer.validated_data.get('reply_to_id'),
            )
            return Response(GroupMessageSerializer(message).data, status=status.HTTP_201_CREATED)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error posting group message: {str(e)}")
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class GroupReactionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, message_id):
        serializer = ReactionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            reactions = services.toggle_reaction(message_id, request.user, serializer.validated_data['emoji'])
            return Response({"message_id": message_id, "reactions": reactions})
        except CampusError as e:
            return error_response(e)


class GroupMessageDeleteView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, message_id):
        try:
            services.delete_group_message(message_id, request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except CampusError as e:
            return error_response(e)
