# academia/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from django.db import DatabaseError
from .models import StudyMaterial
from .serializers import StudyMaterialSerializer
import logging

logger = logging.getLogger(__name__)


class StudyMaterialListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        materials = StudyMaterial.objects.all()
        branch = request.query_params.get('branch')
        semester = request.query_params.get('semester')
        if branch:
            materials = materials.filter(branch=branch)
        if semester:
            materials = materials.filter(semester=semester)
        return Response(StudyMaterialSerializer(materials, many=True).data)

    def post(self, request):
        serializer = StudyMaterialSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            material = serializer.save(uploaded_by=request.user, uploaded_by_name=request.user.display_name)
            logger.info(f"Study material {material.id} uploaded by user {request.user.id}")
            return Response(StudyMaterialSerializer(material).data, status=status.HTTP_201_CREATED)
        except DatabaseError as e:
            logger.error(f"Error saving study material: {str(e)}")
            return Response({"error": "Could not save material, please retry", "retry": True},
                            status=status.HTTP_503_SERVICE_UNAVAILABLE)
