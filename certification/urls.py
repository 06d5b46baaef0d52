"""
Certification URL Configuration

Proxy routes for the certification backend resources.
"""

from django.urls import path
from .views import (
    # Farmers
    FarmerListView,
    FarmerDetailView,

    # Farms
    FarmListView,
    FarmDetailView,
    FarmerFarmsView,

    # Inspections
    InspectionListView,
    InspectionDetailView,
    InspectionApproveView,

    # Inspectors
    InspectorListView,
    InspectorDetailView,

    # Certificates
    CertificateListView,
    CertificateDetailView,
    CertificateRenewView,
    CertificatePDFView,
    CertificateHTMLView,
)

app_name = 'certification'

urlpatterns = [
    # Farmers
    path('farmers/', FarmerListView.as_view(), name='farmer-list'),
    path('farmers/<str:pk>/', FarmerDetailView.as_view(), name='farmer-detail'),

    # Farms
    path('farms/', FarmListView.as_view(), name='farm-list'),
    path('farms/farmer/<str:farmer_id>/', FarmerFarmsView.as_view(), name='farmer-farms'),
    path('farms/<str:pk>/', FarmDetailView.as_view(), name='farm-detail'),

    # Inspections
    path('inspections/', InspectionListView.as_view(), name='inspection-list'),
    path('inspections/<str:pk>/', InspectionDetailView.as_view(), name='inspection-detail'),
    path('inspections/<str:pk>/approve/', InspectionApproveView.as_view(), name='inspection-approve'),

    # Inspectors
    path('inspectors/', InspectorListView.as_view(), name='inspector-list'),
    path('inspectors/<str:pk>/', InspectorDetailView.as_view(), name='inspector-detail'),

    # Certificates
    path('certificates/', CertificateListView.as_view(), name='certificate-list'),
    path('certificates/<str:pk>/', CertificateDetailView.as_view(), name='certificate-detail'),
    path('certificates/<str:pk>/renew/', CertificateRenewView.as_view(), name='certificate-renew'),
    path('certificates/<str:pk>/pdf/', CertificatePDFView.as_view(), name='certificate-pdf'),
    path('certificates/<str:pk>/html/', CertificateHTMLView.as_view(), name='certificate-html'),
]
