from django.contrib import admin
from chat.models import DirectMessage, GroupMessage


@admin.register(DirectMessage)
class DirectMessageAdmin(admin.ModelAdmin):
    list_display = ('message_id', 'conversation_id', 'sender', 'receiver', 'timestamp', 'read')
    list_filter = ('read',)


@admin.register(GroupMessage)
class GroupMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender_name', 'timestamp')
