"""
Farm Service

Farms reference their owner through farmerId (lookup only).
"""

import logging
from typing import Any, Dict, List

from core.backend_client import ListResult
from .base import EntityService

logger = logging.getLogger(__name__)


class FarmService(EntityService):
    resource = '/farms'
    label = 'Farm'

    def fetch_by_farmer(self, farmer_id) -> ListResult:
        """Farms owned by one farmer; a 404 means the farmer does not exist."""
        result = self.client.fetch_list(f"{self.resource}/farmer/{farmer_id}")
        if not result.ok:
            logger.warning(f"Could not load farms for farmer {farmer_id}: {result.error}")
        return result

    def fetch_all_for_farmer(self, farmer_id) -> List[Dict[str, Any]]:
        return self.fetch_by_farmer(farmer_id).items
