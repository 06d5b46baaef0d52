"""
Shared pytest fixtures for dashboards tests.
"""
from datetime import datetime, timezone as dt_timezone

import pytest


@pytest.fixture
def now():
    """Fixed clock for expiry-window tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def farmers():
    return [
        {'id': '1', 'name': 'Jane Wanjiru', 'email': 'jane@example.com', 'phone': '+254700000001',
         'county': 'Kiambu', 'subCounty': 'Limuru', 'village': 'Tigoni', 'farmingType': 'Mixed',
         'totalLandSize': 4.5, 'organicExperience': '5 years', 'educationLevel': 'Secondary',
         'certificationStatus': 'approved', 'registrationDate': '2023-06-10T08:30:00Z', 'status': 'active'},
        {'id': '2', 'name': 'Peter Otieno', 'email': '', 'phone': '+254700000002',
         'county': 'Kisumu', 'farmingType': 'Crops', 'certificationStatus': 'pending',
         'registrationDate': '2024-01-05', 'status': 'active'},
        {'id': '3', 'name': 'Mary Achieng', 'county': 'Siaya', 'certificationStatus': 'pending',
         'status': 'inactive'},
    ]


@pytest.fixture
def inspections():
    return [
        {'id': 'i1', 'status': 'completed', 'score': 80},
        {'id': 'i2', 'status': 'completed', 'score': 91},
        {'id': 'i3', 'status': 'pending'},
        {'id': 'i4', 'status': 'failed', 'score': 30},
    ]


@pytest.fixture
def certificates():
    return [
        {'id': 'c1', 'status': 'active', 'expiryDate': '2024-03-21T12:00:00Z'},
        {'id': 'c2', 'status': 'active', 'expiryDate': '2025-03-01T12:00:00Z'},
        {'id': 'c3', 'status': 'expired', 'expiryDate': '2024-01-01T00:00:00Z'},
        {'id': 'c4', 'status': 'revoked', 'expiryDate': '2024-03-06T12:00:00Z'},
    ]


@pytest.fixture
def populated_backend(backend, farmers, inspections, certificates):
    """Backend answering the three collections in both envelope shapes."""
    backend.add('GET', '/farmers', json_data={'data': farmers, 'total': len(farmers)})
    backend.add('GET', '/inspections', json_data=inspections)
    backend.add('GET', '/certificates', json_data={'data': certificates, 'total': len(certificates)})
    return backend
