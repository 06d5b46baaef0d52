"""
Profile Statistics Service

Headline numbers for the signed-in agronomist's profile page.
"""

import logging

from certification.statuses import CERTIFICATE_ACTIVE
from .dashboard_stats import fetch_collections, round_half_up

logger = logging.getLogger(__name__)

APPROVED_INSPECTION = 'approved'


def empty_profile_stats():
    return {
        'farmersTotal': 0,
        'inspectionsCompleted': 0,
        'certificatesIssued': 0,
        'successRate': 0,
    }


def calculate_profile_stats(farmers, inspections, certificates):
    completed = sum(1 for i in inspections if i.get('status') == APPROVED_INSPECTION)
    active_certificates = sum(1 for c in certificates if c.get('status') == CERTIFICATE_ACTIVE)

    if farmers:
        success_rate = round_half_up(active_certificates / len(farmers) * 100)
    else:
        success_rate = 0

    return {
        'farmersTotal': len(farmers),
        'inspectionsCompleted': completed,
        'certificatesIssued': active_certificates,
        'successRate': success_rate,
    }


def fetch_profile_stats(session):
    """
    Profile counters over fresh backend data.

    Unreachable collections count as empty, so this returns zeros rather
    than failing.
    """
    collections = fetch_collections(session)
    return calculate_profile_stats(
        collections['farmers'],
        collections['inspections'],
        collections['certificates'],
    )
