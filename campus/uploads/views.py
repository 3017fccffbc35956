# uploads/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework import serializers
from campus.errors import CampusError, error_response
from .storage import create_presigned_upload
import logging

logger = logging.getLogger(__name__)


class PresignedUploadSerializer(serializers.Serializer):
    filePath = serializers.CharField(max_length=1024)
    contentType = serializers.CharField(max_length=100)
    fileSize = serializers.IntegerField(required=False, allow_null=True)


class PresignedUploadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = PresignedUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": "Missing filePath or contentType", "details": serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        try:
            upload = create_presigned_upload(data['filePath'], data['contentType'], data.get('fileSize'))
            return Response(upload)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error generating presigned URL: {str(e)}", exc_info=True)
            return Response({"error": "Failed to generate presigned URL"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
