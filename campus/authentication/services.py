# authentication/services.py
import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.db import DatabaseError, IntegrityError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from campus.errors import DomainNotAllowed, InvalidCredentials, TransientBackendError, ValidationError

logger = logging.getLogger(__name__)

User = get_user_model()


def validate_email_domain(email):
    domain = settings.ALLOWED_EMAIL_DOMAIN
    if not email or not email.strip().lower().endswith(f"@{domain}"):
        raise DomainNotAllowed(f"Only {domain} email addresses are allowed")
    return email.strip().lower()


def issue_session(user):
    refresh = RefreshToken.for_user(user)
    return {
        "refresh": str(refresh),
        "access": str(refresh.access_token),
        "user": {
            "id": user.id,
            "email": user.email,
            "name": user.display_name,
        },
    }


def sign_up(email, password, name):
    email = validate_email_domain(email)
    if not password or len(password) < 8:
        raise ValidationError("Password must be at least 8 characters long.")
    name = (name or '').strip()
    if not name:
        raise ValidationError("Name is required.")

    try:
        with transaction.atomic():
            if User.objects.filter(email=email).exists():
                raise ValidationError("This email is already registered.")
            # Profile and presence rows are created by the post_save receiver in profiles.
            user = User.objects.create_user(email=email, password=password, name=name)
    except IntegrityError:
        raise ValidationError("This email is already registered.")
    except DatabaseError as e:
        raise TransientBackendError(f"Could not create account: {str(e)}")

    logger.info(f"User {user.id} signed up as {user.email}")
    return issue_session(user)


def sign_in(email, password, request=None):
    email = validate_email_domain(email)
    user = authenticate(request, email=email, password=password)
    if user is None:
        logger.warning(f"Rejected sign-in for {email}")
        raise InvalidCredentials()
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    logger.info(f"User {user.id} signed in")
    return issue_session(user)


def sign_out(user, refresh_token=None, request=None):
    """End the session: revoke the refresh token and take the user offline.

    Presence is cleared by the ``user_logged_out`` receiver in profiles, which
    also tells every live session of this user to shut down.
    """
    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            logger.warning(f"Ignoring invalid refresh token on sign-out for user {user.id}: {str(e)}")
    user_logged_out.send(sender=user.__class__, request=request, user=user)
    logger.info(f"User {user.id} signed out")
