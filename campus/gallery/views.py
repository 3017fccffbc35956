# gallery/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from django.db import DatabaseError
from .models import GalleryItem
from .serializers import GalleryItemSerializer
import logging

logger = logging.getLogger(__name__)


class GalleryListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        items = GalleryItem.objects.all()
        media_type = request.query_params.get('media_type')
        if media_type:
            items = items.filter(media_type=media_type)
        return Response(GalleryItemSerializer(items, many=True).data)

    def post(self, request):
        serializer = GalleryItemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            item = serializer.save(uploaded_by=request.user, uploaded_by_name=request.user.display_name)
            logger.info(f"Gallery item {item.id} added by user {request.user.id}")
            return Response(GalleryItemSerializer(item).data, status=status.HTTP_201_CREATED)
        except DatabaseError as e:
            logger.error(f"Error saving gallery item: {str(e)}")
            return Response({"error": "Could not save media, please retry", "retry": True},
                            status=status.HTTP_503_SERVICE_UNAVAILABLE)
