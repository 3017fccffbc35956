from django.urls import path
from .views import StudyMaterialListCreateView

urlpatterns = [
    path('materials/', StudyMaterialListCreateView.as_view(), name='study-materials'),
]
