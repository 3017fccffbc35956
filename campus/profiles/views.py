# profiles/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from .models import Profile, PresenceRecord
from authentication.models import User
from .serializers import ProfileSerializer, PresenceSerializer, roster_entry
from .presence import heartbeat, is_effectively_online
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.utils import timezone
import cloudinary
import cloudinary.uploader
import cloudinary.exceptions
import logging

logger = logging.getLogger(__name__)

MAX_PICTURE_BYTES = 5 * 1024 * 1024
PICTURE_CONTENT_TYPES = ['image/jpeg', 'image/png']


class MyProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile, _ = Profile.objects.get_or_create(user=request.user)
        return Response(ProfileSerializer(profile).data)

    def post(self, request):
        try:
            profile, created = Profile.objects.get_or_create(user=request.user)
            serializer = ProfileSerializer(profile, data=request.data, partial=True)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

            if "profile_picture" in request.FILES:
                image = request.FILES["profile_picture"]
                if image.size > MAX_PICTURE_BYTES:
                    return Response({"error": "Image must be under 5MB"}, status=status.HTTP_400_BAD_REQUEST)
                if image.content_type not in PICTURE_CONTENT_TYPES:
                    return Response({"error": "Only JPEG and PNG are supported"}, status=status.HTTP_400_BAD_REQUEST)

                upload_result = cloudinary.uploader.upload(
                    image,
                    folder="profile_pictures",
                    public_id=f"user_{request.user.id}",
                    overwrite=True,
                    resource_type="image"
                )
                profile.profile_picture = upload_result['secure_url']

            serializer.save()
            logger.info(f"Profile updated for user {request.user.id}")
            return Response(serializer.data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload failed for user {request.user.id}: {str(e)}")
            return Response({"error": "Could not upload picture, please retry", "retry": True},
                            status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except Exception as e:
            logger.error(f"Error in POST profile: {str(e)}", exc_info=True)
            return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id):
        try:
            profile = Profile.objects.select_related('user').get(user_id=user_id)
            return Response(ProfileSerializer(profile).data)
        except Profile.DoesNotExist:
            return Response({"error": "Profile not found"}, status=status.HTTP_404_NOT_FOUND)


class HeartbeatView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        try:
            record = heartbeat(request.user.id)
            return Response(PresenceSerializer(record).data)
        except Exception as e:
            logger.error(f"Error in HeartbeatView: {str(e)}", exc_info=True)
            return Response({"error": "Heartbeat failed, will retry", "retry": True},
                            status=status.HTTP_503_SERVICE_UNAVAILABLE)


class PresenceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id):
        record = PresenceRecord.objects.filter(user_id=user_id).first()
        if record is None:
            if not User.objects.filter(id=user_id).exists():
                return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)
            return Response({"user_id": user_id, "is_online": False, "last_heartbeat": None, "online": False})
        return Response(PresenceSerializer(record).data)


class BatchmatesView(APIView):
    """Everyone except the caller, online first, then by name."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = request.query_params.get('query', '').strip()
        profiles = Profile.objects.select_related('user').exclude(user=request.user)
        if query:
            profiles = profiles.filter(
                Q(user__name__icontains=query) |
                Q(user__email__icontains=query) |
                Q(branch__icontains=query)
            )
        records = {r.user_id: r for r in PresenceRecord.objects.filter(user_id__in=[p.user_id for p in profiles])}
        now = timezone.now()
        entries = []
        for profile in profiles:
            entry = roster_entry(profile)
            entry["online"] = is_effectively_online(records.get(profile.user_id), now)
            entries.append(entry)
        entries.sort(key=lambda e: (not e["online"], e["name"].lower()))
        return Response(entries)
