# profiles/urls.py
from django.urls import path
from .views import MyProfileView, UserProfileView, HeartbeatView, PresenceView, BatchmatesView

urlpatterns = [
    path('profile/', MyProfileView.as_view(), name='my_profile'),
    path('user/<int:user_id>/', UserProfileView.as_view(), name='user_profile'),
    path('heartbeat/', HeartbeatView.as_view(), name='heartbeat'),
    path('presence/<int:user_id>/', PresenceView.as_view(), name='presence'),
    path('batchmates/', BatchmatesView.as_view(), name='batchmates'),
]
