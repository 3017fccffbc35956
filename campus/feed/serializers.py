from rest_framework import serializers
from .models import Post, Comment


class CommentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Comment
        fields = ['id', 'post', 'author', 'author_name', 'author_email', 'text', 'streak_count', 'timestamp']
        read_only_fields = fields


class PostSerializer(serializers.ModelSerializer):
    comments = CommentSerializer(many=True, read_only=True)

    class Meta:
        model = Post
        fields = ['id', 'author', 'author_name', 'author_email', 'media_url', 'media_type',
                  'caption', 'reactions', 'timestamp', 'comments']
        read_only_fields = fields


class CreatePostSerializer(serializers.Serializer):
    media_url = serializers.URLField(max_length=1000)
    media_type = serializers.ChoiceField(choices=Post.MEDIA_TYPE_CHOICES)
    caption = serializers.CharField(required=False, allow_blank=True, default='')


class PostReactionSerializer(serializers.Serializer):
    reaction = serializers.CharField(max_length=32)


class CreateCommentSerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)
