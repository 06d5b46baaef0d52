"""
Certificate Service

Certificates carry denormalized display copies of the farmer and farm names
and a number in the form ORG-<year>-<3 digits>. Status only moves forward
(active -> expired | revoked) and a revoked certificate is final, so
status-changing calls are checked against the current record first.
"""

import logging
from typing import Any, Dict, Tuple

from core.backend_client import BackendError
from certification.statuses import CERTIFICATE_REVOKED, can_transition
from .base import EntityService

logger = logging.getLogger(__name__)


class CertificateTransitionError(BackendError):
    """Requested status change would move a certificate backwards."""
    def __init__(self, certificate_id, current: str, target: str):
        super().__init__(
            message=f"Certificate {certificate_id} cannot move from '{current}' to '{target}'",
            code='INVALID_TRANSITION',
            status_code=409,
            details={'current': current, 'target': target},
        )


class CertificateService(EntityService):
    resource = '/certificates'
    label = 'Certificate'

    def update(self, certificate_id, data: Dict[str, Any]) -> Dict[str, Any]:
        target = data.get('status') if isinstance(data, dict) else None
        if target:
            self._check_transition(certificate_id, target)
        return super().update(certificate_id, data)

    def revoke(self, certificate_id) -> bool:
        """Revoke through the backend's DELETE route; True on success."""
        success = self.client.delete(self.detail_endpoint(certificate_id))
        if success:
            logger.info(f"Certificate {certificate_id} revoked")
        return success

    def renew(self, certificate_id, data: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Submit a renewal request.

        Raises:
            CertificateTransitionError: The certificate is revoked
            BackendError: The backend refused the renewal
        """
        current = self.fetch_by_id(certificate_id)
        if current and current.get('status') == CERTIFICATE_REVOKED:
            raise CertificateTransitionError(certificate_id, CERTIFICATE_REVOKED, 'renewed')

        result = self.client.post(f"{self.detail_endpoint(certificate_id)}/renew", data or {})
        return self._check_write(result, 'renew', certificate_id)

    def fetch_pdf(self, certificate_id) -> Tuple[bytes, str]:
        """Backend-rendered certificate PDF; raises BackendError when unavailable."""
        return self.client.get_binary(f"{self.detail_endpoint(certificate_id)}/pdf")

    def _check_transition(self, certificate_id, target: str) -> None:
        current = self.fetch_by_id(certificate_id)
        current_status = current.get('status') if current else None
        if not can_transition(current_status, target):
            logger.warning(
                f"Rejected certificate status change {current_status} -> {target} for {certificate_id}"
            )
            raise CertificateTransitionError(certificate_id, current_status, target)
