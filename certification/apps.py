"""
Certification App Configuration
Proxy routes and services for farmers, farms, inspections, inspectors and certificates.
"""
from django.apps import AppConfig


class CertificationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'certification'
    verbose_name = 'Organic Certification'
