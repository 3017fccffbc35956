from django.urls import path
from .views import (
    FriendsView, SearchUsersView, IncomingRequestsView, OutgoingRequestsView,
    SendFriendRequestView, RespondFriendRequestView, RelationshipStatusView, RemoveFriendView
)

urlpatterns = [
    path('request/', SendFriendRequestView.as_view(), name='send_friend_request'),
    path('requests/', IncomingRequestsView.as_view(), name='incoming_friend_requests'),
    path('sent_requests/', OutgoingRequestsView.as_view(), name='outgoing_friend_requests'),
    path('requests/<int:from_user_id>/<int:to_user_id>/respond/', RespondFriendRequestView.as_view(), name='respond_friend_request'),
    path('status/<int:user_id>/', RelationshipStatusView.as_view(), name='relationship_status'),
    path('list/', FriendsView.as_view(), name='friends'),
    path('search/users/', SearchUsersView.as_view(), name='search_users'),
    path('remove/<int:friend_id>/', RemoveFriendView.as_view(), name='remove_friend'),
]
