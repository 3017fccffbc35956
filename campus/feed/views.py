# feed/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.pagination import PageNumberPagination
from .models import Post
from .serializers import (
    PostSerializer, CommentSerializer, CreatePostSerializer,
    PostReactionSerializer, CreateCommentSerializer
)
from . import services
from campus.errors import CampusError, error_response
import logging

logger = logging.getLogger(__name__)


class FeedPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PostListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        posts = Post.objects.prefetch_related('comments').all()
        paginator = FeedPagination()
        page = paginator.paginate_queryset(posts, request)
        return paginator.get_paginated_response(PostSerializer(page, many=True).data)

    def post(self, request):
        serializer = CreatePostSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            post = services.create_post(
                request.user,
                serializer.validated_data['caption'],
                serializer.validated_data['media_url'],
                serializer.validated_data['media_type'],
            )
            return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error creating post: {str(e)}")
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class PostReactionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, post_id):
        serializer = PostReactionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            reactions = services.toggle_post_reaction(post_id, request.user, serializer.validated_data['reaction'])
            return Response({"post_id": post_id, "reactions": reactions})
        except CampusError as e:
            return error_response(e)


class CommentListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, post_id):
        try:
            post = Post.objects.get(id=post_id)
        except Post.DoesNotExist:
            return Response({"error": "Post not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(CommentSerializer(post.comments.all(), many=True).data)

    def post(self, request, post_id):
        serializer = CreateCommentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            comment = services.add_comment(post_id, request.user, serializer.validated_data['text'])
            return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error adding comment: {str(e)}")
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
