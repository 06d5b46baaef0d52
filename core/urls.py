"""
URL configuration for core project.

Every route lives under /api/ and proxies to, or is computed from, the
certification backend.
"""
from django.urls import path, include

urlpatterns = [
    path('api/dashboard/', include('dashboards.urls')),
    path('api/exports/', include('dashboards.export_urls')),
    path('api/', include('certification.urls')),
]
