"""
Inspection Service

Inspections link a farm, its farmer and an inspector. Approving an
inspection asks the backend to issue the resulting certificate.
"""

import logging
from typing import Any, Dict

from core.backend_client import is_error
from .base import EntityService, backend_message

logger = logging.getLogger(__name__)


class InspectionService(EntityService):
    resource = '/inspections'
    label = 'Inspection'

    def approve(self, inspection_id, data: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Approve an inspection.

        Returns:
            {'success': True, ...backend payload} on success (may include
            certificateId), {'success': False, 'error': ..., 'status': ...} otherwise
        """
        result = self.client.post(f"{self.detail_endpoint(inspection_id)}/approve", data or {})
        if is_error(result):
            logger.error(f"Inspection approval failed for {inspection_id}: {result['error']}")
            return {
                'success': False,
                'error': backend_message(result),
                'status': result.get('status'),
            }
        payload = result if isinstance(result, dict) else {'data': result}
        return {'success': True, **payload}
