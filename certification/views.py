"""
Certification API Views

Thin route handlers that proxy the frontend's JSON calls to the external
certification backend. The caller's bearer token (issued by the identity
provider) is forwarded through an ApiSession created per request.
"""

import logging

from django.http import HttpResponse
from django.utils.http import content_disposition_header
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.backend_client import ApiSession, BackendError
from .certificate_template import generate_certificate_html
from .services import (
    CertificateService,
    CertificateTransitionError,
    FarmerService,
    FarmService,
    InspectionService,
    InspectorService,
)

logger = logging.getLogger(__name__)


class BackendProxyView(APIView):
    """Base view owning one ApiSession for the lifetime of a request."""
    service_class = None

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.api_session = ApiSession.from_request(request)

    def finalize_response(self, request, response, *args, **kwargs):
        session = getattr(self, 'api_session', None)
        if session is not None:
            session.close()
        return super().finalize_response(request, response, *args, **kwargs)

    def get_service(self):
        return self.service_class(self.api_session)

    @property
    def label(self):
        return self.service_class.label

    @property
    def label_lower(self):
        return self.service_class.label.lower()


class EntityListView(BackendProxyView):
    """
    GET  -> every record (empty list when the backend is unreachable)
    POST -> create a record, 201 with the created record
    """

    def get(self, request):
        return Response(self.get_service().fetch_all(), status=status.HTTP_200_OK)

    def post(self, request):
        try:
            record = self.get_service().create(request.data)
        except BackendError as e:
            return Response(
                {'error': f"Failed to create {self.label_lower}", 'detail': e.message},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(record, status=status.HTTP_201_CREATED)


class EntityDetailView(BackendProxyView):
    """
    GET    -> one record, 404 when missing
    PUT    -> update, 404 when the backend reports the record missing
    DELETE -> delete, 404 when the backend refuses
    """

    def get(self, request, pk):
        record = self.get_service().fetch_by_id(pk)
        if not record:
            return Response({'error': f"{self.label} not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(record, status=status.HTTP_200_OK)

    def put(self, request, pk):
        try:
            record = self.get_service().update(pk, request.data)
        except BackendError as e:
            return self.write_error_response(e, 'update')
        return Response(record, status=status.HTTP_200_OK)

    def delete(self, request, pk):
        result = self.get_service().delete(pk)
        if not result['success']:
            return Response({'error': f"{self.label} not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': result['message']}, status=status.HTTP_200_OK)

    def write_error_response(self, error, action):
        if isinstance(error, CertificateTransitionError):
            return Response({'error': error.message, 'code': error.code}, status=status.HTTP_409_CONFLICT)
        if error.status_code == status.HTTP_404_NOT_FOUND:
            return Response({'error': f"{self.label} not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(
            {'error': f"Failed to {action} {self.label_lower}", 'detail': error.message},
            status=status.HTTP_400_BAD_REQUEST
        )


# =============================================================================
# FARMERS
# =============================================================================

class FarmerListView(EntityListView):
    """GET/POST /api/farmers/"""
    service_class = FarmerService


class FarmerDetailView(EntityDetailView):
    """GET/PUT/DELETE /api/farmers/<id>/"""
    service_class = FarmerService


# =============================================================================
# FARMS
# =============================================================================

class FarmListView(EntityListView):
    """GET/POST /api/farms/"""
    service_class = FarmService


class FarmDetailView(EntityDetailView):
    """GET/PUT/DELETE /api/farms/<id>/"""
    service_class = FarmService


class FarmerFarmsView(BackendProxyView):
    """
    Farms owned by a farmer

    GET /api/farms/farmer/<farmer_id>/
    """
    service_class = FarmService

    def get(self, request, farmer_id):
        result = self.get_service().fetch_by_farmer(farmer_id)
        if result.ok:
            return Response(result.items, status=status.HTTP_200_OK)
        if result.status_code == status.HTTP_404_NOT_FOUND:
            return Response({'error': "Farmer not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({'error': "Failed to fetch farms"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


# =============================================================================
# INSPECTIONS
# =============================================================================

class InspectionListView(EntityListView):
    """GET/POST /api/inspections/"""
    service_class = InspectionService


class InspectionDetailView(EntityDetailView):
    """GET/PUT/DELETE /api/inspections/<id>/"""
    service_class = InspectionService


class InspectionApproveView(BackendProxyView):
    """
    Approve an inspection and let the backend issue its certificate

    POST /api/inspections/<id>/approve/
    """
    service_class = InspectionService

    def post(self, request, pk):
        result = self.get_service().approve(pk, request.data)
        if result['success']:
            return Response(result, status=status.HTTP_200_OK)
        return Response(
            {'success': False, 'error': result['error']},
            status=result.get('status') or status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# =============================================================================
# INSPECTORS
# =============================================================================

class InspectorListView(EntityListView):
    """GET/POST /api/inspectors/"""
    service_class = InspectorService


class InspectorDetailView(EntityDetailView):
    """GET/PUT/DELETE /api/inspectors/<id>/"""
    service_class = InspectorService


# =============================================================================
# CERTIFICATES
# =============================================================================

class CertificateListView(EntityListView):
    """GET/POST /api/certificates/"""
    service_class = CertificateService


class CertificateDetailView(EntityDetailView):
    """
    GET/PUT /api/certificates/<id>/

    DELETE revokes the certificate; revocation is final.
    """
    service_class = CertificateService

    def delete(self, request, pk):
        if not self.get_service().revoke(pk):
            return Response({'error': "Certificate not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': "Certificate revoked successfully"}, status=status.HTTP_200_OK)


class CertificateRenewView(BackendProxyView):
    """
    Submit a renewal request for a certificate

    POST /api/certificates/<id>/renew/
    """
    service_class = CertificateService

    def post(self, request, pk):
        try:
            result = self.get_service().renew(pk, request.data)
        except CertificateTransitionError as e:
            return Response({'error': e.message, 'code': e.code}, status=status.HTTP_409_CONFLICT)
        except BackendError as e:
            return Response(
                {'error': e.message},
                status=e.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return Response(result, status=status.HTTP_200_OK)


class CertificatePDFView(BackendProxyView):
    """
    Backend-rendered certificate PDF, passed through as an attachment

    GET /api/certificates/<id>/pdf/
    """
    service_class = CertificateService

    def get(self, request, pk):
        try:
            content, _content_type = self.get_service().fetch_pdf(pk)
        except BackendError as e:
            if e.status_code == status.HTTP_404_NOT_FOUND:
                return Response({'error': "Certificate not found"}, status=status.HTTP_404_NOT_FOUND)
            logger.error(f"Certificate PDF proxy failed for {pk}: {e.message}")
            return Response({'error': "Failed to generate PDF"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        response = HttpResponse(content, content_type='application/pdf')
        response['Content-Disposition'] = content_disposition_header(True, f'certificate-{pk}.pdf')
        response['Content-Length'] = str(len(content))
        return response


class CertificateHTMLView(BackendProxyView):
    """
    Printable certificate rendered locally from the certificate record

    GET /api/certificates/<id>/html/
    """
    service_class = CertificateService

    def get(self, request, pk):
        certificate = self.get_service().fetch_by_id(pk)
        if not certificate:
            return Response({'error': "Certificate not found"}, status=status.HTTP_404_NOT_FOUND)
        return HttpResponse(generate_certificate_html(certificate), content_type='text/html; charset=utf-8')
