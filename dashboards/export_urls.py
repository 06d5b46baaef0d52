"""
Export URL Configuration
"""

from django.urls import path
from .export_views import ExportEntityView

app_name = 'exports'

urlpatterns = [
    path('<str:entity>/<str:fmt>/', ExportEntityView.as_view(), name='export-entity'),
]
