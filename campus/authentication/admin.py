from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from authentication.models import User


@admin.register(User)
class CampusUserAdmin(UserAdmin):
    list_display = ('email', 'name', 'is_staff', 'date_joined')
    search_fields = ('email', 'name')
    ordering = ('email',)
    fieldsets = UserAdmin.fieldsets + (('Campus', {'fields': ('name',)}),)
