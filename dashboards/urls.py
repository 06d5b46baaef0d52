"""
Dashboard URL Configuration
"""

from django.urls import path
from .views import DashboardStatsView, ProfileStatsView

app_name = 'dashboards'

urlpatterns = [
    path('stats/', DashboardStatsView.as_view(), name='dashboard-stats'),
    path('profile-stats/', ProfileStatsView.as_view(), name='profile-stats'),
]
