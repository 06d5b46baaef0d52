"""
Dashboard services module
"""

from .dashboard_stats import generate_dashboard_stats, EXPIRING_SOON_DAYS
from .profile_stats import fetch_profile_stats

__all__ = [
    'generate_dashboard_stats',
    'fetch_profile_stats',
    'EXPIRING_SOON_DAYS',
]
