"""
Dashboards App Configuration
Dashboard statistics and tabular exports over the certification backend.
"""
from django.apps import AppConfig


class DashboardsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'dashboards'
    verbose_name = 'Dashboards & Exports'
