from django.contrib import admin
from committee.models import CommitteeEvent


@admin.register(CommitteeEvent)
class CommitteeEventAdmin(admin.ModelAdmin):
    list_display = ('title', 'committee', 'date', 'posted_by_name')
    list_filter = ('committee',)
