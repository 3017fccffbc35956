# committee/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from django.db import DatabaseError
from .models import CommitteeEvent
from .serializers import CommitteeEventSerializer
import logging

logger = logging.getLogger(__name__)


class CommitteeEventListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        events = CommitteeEvent.objects.all()
        committee = request.query_params.get('committee')
        if committee:
            events = events.filter(committee__iexact=committee)
        return Response(CommitteeEventSerializer(events, many=True).data)

    def post(self, request):
        serializer = CommitteeEventSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            event = serializer.save(posted_by=request.user, posted_by_name=request.user.display_name)
            logger.info(f"Committee event {event.id} created by user {request.user.id}")
            return Response(CommitteeEventSerializer(event).data, status=status.HTTP_201_CREATED)
        except DatabaseError as e:
            logger.error(f"Error creating committee event: {str(e)}")
            return Response({"error": "Could not save event, please retry", "retry": True},
                            status=status.HTTP_503_SERVICE_UNAVAILABLE)
