from django.contrib import admin
from profiles.models import Profile, PresenceRecord


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'year', 'section', 'branch', 'updated_at')
    search_fields = ('user__email', 'user__name')


@admin.register(PresenceRecord)
class PresenceRecordAdmin(admin.ModelAdmin):
    list_display = ('user', 'is_online', 'last_heartbeat')
    list_filter = ('is_online',)
