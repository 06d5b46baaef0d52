"""
Inspector Service
"""

from .base import EntityService


class InspectorService(EntityService):
    resource = '/inspectors'
    label = 'Inspector'
