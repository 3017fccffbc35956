import itertools

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def make(name=None, email=None, password='password123'):
        n = next(counter)
        return User.objects.create_user(
            email=email or f"student{n}@miet.ac.in",
            password=password,
            name=name or f"Student {n}",
        )

    return make


@pytest.fixture
def alice(make_user):
    return make_user(name="Alice", email="alice@miet.ac.in")


@pytest.fixture
def bob(make_user):
    return make_user(name="Bob", email="bob@miet.ac.in")


@pytest.fixture
def carol(make_user):
    return make_user(name="Carol", email="carol@miet.ac.in")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return make


@pytest.fixture
def access_token_for():
    def make(user):
        return str(RefreshToken.for_user(user).access_token)

    return make
