import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication import services
from authentication.serializers import LoginSerializer, LogoutSerializer, RegisterSerializer, UserSerializer
from campus.errors import CampusError, error_response

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            session = services.sign_up(
                serializer.validated_data['email'],
                serializer.validated_data['password'],
                serializer.validated_data['name'],
            )
            return Response(session, status=status.HTTP_201_CREATED)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error in RegisterView: {str(e)}", exc_info=True)
            return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class LoginView(APIView):
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            session = services.sign_in(
                serializer.validated_data['email'],
                serializer.validated_data['password'],
                request=request,
            )
            return Response(session, status=status.HTTP_200_OK)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error in LoginView: {str(e)}", exc_info=True)
            return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            services.sign_out(request.user, serializer.validated_data.get('refresh'), request=request)
            return Response({"status": "Signed out"}, status=status.HTTP_200_OK)
        except CampusError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error in LogoutView: {str(e)}", exc_info=True)
            return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserSerializer(request.user)
        return Response(serializer.data)
