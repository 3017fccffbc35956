from django.urls import path
from .views import CommitteeEventListCreateView

urlpatterns = [
    path('events/', CommitteeEventListCreateView.as_view(), name='committee-events'),
]
