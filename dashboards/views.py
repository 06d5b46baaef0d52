"""
Dashboard API Views

GET /api/dashboard/stats/          -> farmer/inspection/certificate summary
GET /api/dashboard/profile-stats/  -> headline numbers for the profile page

Both are recomputed from the certification backend on every request.
"""

from rest_framework import status
from rest_framework.response import Response

from certification.views import BackendProxyView
from .services import fetch_profile_stats, generate_dashboard_stats


class DashboardStatsView(BackendProxyView):
    """
    Dashboard Statistics

    GET /api/dashboard/stats/

    Returns:
    - farmers: total, active, inactive, pendingCertification
    - inspections: total, pending, completed, failed, averageScore
    - certificates: total, active, expired, revoked, expiringSoon

    Unreachable collections count as empty, so this always answers 200.
    """

    def get(self, request):
        data = generate_dashboard_stats(self.api_session)
        return Response(data, status=status.HTTP_200_OK)


class ProfileStatsView(BackendProxyView):
    """
    Profile Statistics

    GET /api/dashboard/profile-stats/
    """

    def get(self, request):
        return Response(fetch_profile_stats(self.api_session), status=status.HTTP_200_OK)
