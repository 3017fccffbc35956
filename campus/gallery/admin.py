from django.contrib import admin
from gallery.models import GalleryItem


@admin.register(GalleryItem)
class GalleryItemAdmin(admin.ModelAdmin):
    list_display = ('id', 'media_type', 'uploaded_by_name', 'timestamp')
    list_filter = ('media_type',)
