"""
Base Entity Service

Shared fetch/create/update/delete behaviour for the certification backend
resources. Each entity service is bound to an ApiSession:

    service = FarmerService(session)
    farmers = service.fetch_all()
    farmer = service.fetch_by_id('42')
    result = service.delete('42')   # {'success': False, 'message': None} on 404

Read paths fail soft (empty list / None); create and update raise
BackendError so callers can prompt for a retry; delete reports a flag.
"""

import logging
from typing import Any, Dict, List, Optional

from core.backend_client import (
    ApiSession,
    BackendClient,
    BackendError,
    ListResult,
    is_error,
    normalize_envelope,
)

logger = logging.getLogger(__name__)


class EntityService:
    """Fetch/create/update/delete for one backend resource."""

    # Backend collection path, e.g. '/farmers'
    resource = None
    # Human readable name used in messages, e.g. 'Farmer'
    label = 'Record'

    def __init__(self, session: ApiSession):
        self.session = session
        self.client = BackendClient(session)

    def detail_endpoint(self, record_id) -> str:
        return f"{self.resource}/{record_id}"

    def fetch_all(self) -> List[Dict[str, Any]]:
        """All records; [] when the backend is unreachable or errors."""
        return normalize_envelope(self.client.get_list(self.resource)).data

    def fetch_list(self) -> ListResult:
        """All records, with the failure kept distinguishable from an empty list."""
        return self.client.fetch_list(self.resource)

    def fetch_by_id(self, record_id) -> Optional[Dict[str, Any]]:
        result = self.client.get(self.detail_endpoint(record_id))
        if is_error(result) or not result:
            return None
        return result

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = self.client.post(self.resource, data)
        return self._check_write(result, 'create')

    def update(self, record_id, data: Dict[str, Any]) -> Dict[str, Any]:
        result = self.client.put(self.detail_endpoint(record_id), data)
        return self._check_write(result, 'update', record_id)

    def delete(self, record_id) -> Dict[str, Any]:
        success = self.client.delete(self.detail_endpoint(record_id))
        return {
            'success': success,
            'message': f'{self.label} deleted successfully' if success else None,
        }

    def _check_write(self, result: Any, action: str, record_id=None) -> Dict[str, Any]:
        if is_error(result):
            logger.error(f"Failed to {action} {self.label.lower()}: {result['error']}", extra={
                'resource': self.resource,
                'record_id': record_id,
            })
            raise BackendError(
                message=backend_message(result) or f"Failed to {action} {self.label.lower()}",
                code=f'{action.upper()}_FAILED',
                status_code=result.get('status'),
                details={'error': result['error']},
            )
        return result


def backend_message(result: Dict[str, Any]) -> Optional[str]:
    """The backend's own error text when it sent one, else the HTTP summary."""
    details = result.get('details')
    if isinstance(details, dict):
        message = details.get('error') or details.get('message')
        if isinstance(message, str) and message:
            return message
    return result.get('error')
