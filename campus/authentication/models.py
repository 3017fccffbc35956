# authentication/models.py
from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class CampusUserManager(UserManager):
    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('username', email)
        return super().create_user(email=email, password=password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('username', email)
        return super().create_superuser(email=email, password=password, **extra_fields)


class User(AbstractUser):
    email = models.EmailField(unique=True)
    username = models.CharField(max_length=150, unique=True)
    name = models.CharField(max_length=150)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = CampusUserManager()

    def __str__(self):
        return self.email

    @property
    def display_name(self):
        return self.name or self.email.split('@')[0]

    class Meta:
        indexes = [
            models.Index(fields=['email'], name='user_email_idx'),
            models.Index(fields=['name'], name='user_name_idx'),
        ]
