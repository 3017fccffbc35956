from django.contrib import admin
from academia.models import StudyMaterial


@admin.register(StudyMaterial)
class StudyMaterialAdmin(admin.ModelAdmin):
    list_display = ('title', 'branch', 'semester', 'uploaded_by_name', 'timestamp')
    list_filter = ('branch', 'semester')
