"""
Farmer Service

Farmer records on the certification backend. The backend may answer the
list endpoint with {data: [...], total} or a bare array; fetch_all()
returns the list either way.
"""

from .base import EntityService


class FarmerService(EntityService):
    resource = '/farmers'
    label = 'Farmer'
