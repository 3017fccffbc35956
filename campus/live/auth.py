# live/auth.py
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from rest_framework_simplejwt.authentication import JWTAuthentication


def token_from_scope(scope):
    query_string = scope.get('query_string', b'').decode()
    values = parse_qs(query_string).get('token')
    return values[0] if values else None


@database_sync_to_async
def authenticate_token(token):
    jwt_auth = JWTAuthentication()
    validated_token = jwt_auth.get_validated_token(token)
    return jwt_auth.get_user(validated_token)
