"""
Certification entity services
"""

from .base import EntityService
from .farmer import FarmerService
from .farm import FarmService
from .inspection import InspectionService
from .inspector import InspectorService
from .certificate import CertificateService, CertificateTransitionError

__all__ = [
    'EntityService',
    'FarmerService',
    'FarmService',
    'InspectionService',
    'InspectorService',
    'CertificateService',
    'CertificateTransitionError',
]
