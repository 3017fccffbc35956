from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('auth/', include('authentication.urls')),
    path('chat/', include('chat.urls')),
    path('contacts/', include('contacts.urls')),
    path('profiles/', include('profiles.urls')),
    path('feed/', include('feed.urls')),
    path('committee/', include('committee.urls')),
    path('academia/', include('academia.urls')),
    path('gallery/', include('gallery.urls')),
    path('uploads/', include('uploads.urls')),
]
