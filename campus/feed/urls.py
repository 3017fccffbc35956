from django.urls import path
from .views import PostListCreateView, PostReactionView, CommentListCreateView

urlpatterns = [
    path('posts/', PostListCreateView.as_view(), name='post-list'),
    path('posts/<int:post_id>/react/', PostReactionView.as_view(), name='post-react'),
    path('posts/<int:post_id>/comments/', CommentListCreateView.as_view(), name='post-comments'),
]
