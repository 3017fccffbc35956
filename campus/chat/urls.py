# chat/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('conversations/', views.ConversationListView.as_view(), name='conversation-list'),
    path('conversations/<int:user_id>/messages/', views.ConversationMessagesView.as_view(), name='conversation-messages'),
    path('conversations/<int:user_id>/read/', views.MarkConversationReadView.as_view(), name='conversation-read'),
    path('messages/<str:message_id>/read/', views.MarkMessageReadView.as_view(), name='message-read'),
    path('global/', views.GroupMessagesView.as_view(), name='group-messages'),
    path('global/<int:message_id>/react/', views.GroupReactionView.as_view(), name='group-reaction'),
    path('global/<int:message_id>/', views.GroupMessageDeleteView.as_view(), name='group-message-delete'),
]
