from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from .serializers import FriendRequestSerializer, FriendshipSerializer, SendRequestSerializer, RespondSerializer
from . import services
from authentication.models import User
from campus.errors import CampusError, error_response
from rest_framework.permissions import IsAuthenticated
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
import logging

logger = logging.getLogger(__name__)


class CustomPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = 'page_size'
    max_page_size = 100


def paginate_queryset(queryset, request, serializer_class):
    paginator = CustomPagination()
    paginated_data = paginator.paginate_queryset(queryset, request)
    serializer = serializer_class(paginated_data, many=True, context={'request': request})
    return paginator.get_paginated_response(serializer.data)


class FriendsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            return paginate_queryset(services.friends_of(request.user), request, FriendshipSerializer)
        except Exception as e:
            logger.error(f"Error in FriendsView: {str(e)}")
            return Response({"error": "Failed to fetch friends"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class SearchUsersView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = request.query_params.get('query', '').strip()
        if not query:
            return Response({"error": "Query parameter is required"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            users = User.objects.filter(
                Q(name__icontains=query) | Q(email__icontains=query)
            ).exclude(id=request.user.id).order_by('name')[:50]
            results = [
                {
                    "id": user.id,
                    "name": user.display_name,
                    "email": user.email,
                    "relationship": services.relationship_status(request.user, user),
                }
                for user in users
            ]
            return Response(results)
        except Exception as e:
            logger.error(f"Error in SearchUsersView: {str(e)}")
            return Response({"error": "Failed to search users"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class IncomingRequestsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = FriendRequestSerializer(services.incoming_requests(request.user), many=True)
        return Response(serializer.data)


class OutgoingRequestsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = FriendRequestSerializer(services.outgoing_requests(request.user), many=True)
        return Response(serializer.data)


class SendFriendRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = SendRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        user_id = serializer.validated_data['user_id']
        try:
            receiver = User.objects.get(id=user_id)
            friend_request = services.send_request(request.user, receiver)
            return Response(FriendRequestSerializer(friend_request).data, status=status.HTTP_201_CREATED)
        except User.DoesNotExist:
            return Response({"error": f"User {user_id} not found"}, status=status.HTTP_404_NOT_FOUND)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error in SendFriendRequestView: {str(e)}")
            return Response({"error": f"Unexpected error: {str(e)}"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class RespondFriendRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, from_user_id, to_user_id):
        serializer = RespondSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            friend_request = services.respond(
                request.user, from_user_id, to_user_id, serializer.validated_data['decision']
            )
            return Response(FriendRequestSerializer(friend_request).data, status=status.HTTP_200_OK)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error in RespondFriendRequestView: {str(e)}")
            return Response({"error": f"Failed to respond to friend request: {str(e)}"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class RelationshipStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id):
        if not User.objects.filter(id=user_id).exists():
            return Response({"error": f"User {user_id} not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"user_id": user_id, "status": services.relationship_status(request.user, user_id)})


class RemoveFriendView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, friend_id):
        try:
            services.remove_friend(request.user, friend_id)
            return Response({"status": "Friend removed successfully"}, status=status.HTTP_200_OK)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error in RemoveFriendView: {str(e)}")
            return Response({"error": f"Failed to remove friend: {str(e)}"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
