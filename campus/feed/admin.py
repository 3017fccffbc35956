from django.contrib import admin
from feed.models import Post, Comment


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ('id', 'author_name', 'media_type', 'timestamp')
    list_filter = ('media_type',)


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'post', 'author_name', 'streak_count', 'timestamp')
