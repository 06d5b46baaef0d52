"""
Dashboard Statistics Service

Builds the certification dashboard summary from the farmer, inspection and
certificate collections:
- Farmer counts by status and pending certification
- Inspection counts by status and the average completed score
- Certificate counts by status and those expiring within 30 days

Nothing is cached; every call fetches the three collections again.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.backend_client import BackendClient, normalize_envelope
from certification.statuses import (
    CERTIFICATE_ACTIVE,
    CERTIFICATE_EXPIRED,
    CERTIFICATE_REVOKED,
    CERTIFICATION_PENDING,
    FARMER_ACTIVE,
    INSPECTION_COMPLETED,
    INSPECTION_FAILED,
    INSPECTION_PENDING,
)

logger = logging.getLogger(__name__)

# Active certificates expiring within this many days count as "expiring soon"
EXPIRING_SOON_DAYS = 30

COLLECTION_ENDPOINTS = {
    'farmers': '/farmers',
    'inspections': '/inspections',
    'certificates': '/certificates',
}


def fetch_collections(session, endpoints=None):
    """
    Fetch several list endpoints concurrently and wait for all of them.

    get_list() never raises, so one slow or failing endpoint only yields an
    empty list for that collection.
    """
    endpoints = endpoints or COLLECTION_ENDPOINTS
    client = BackendClient(session)

    with ThreadPoolExecutor(max_workers=len(endpoints)) as executor:
        futures = {
            name: executor.submit(client.get_list, endpoint)
            for name, endpoint in endpoints.items()
        }
        return {
            name: normalize_envelope(future.result()).data
            for name, future in futures.items()
        }


def round_half_up(value):
    """Round to the nearest integer, .5 going up. Non-finite values give 0."""
    if not math.isfinite(value):
        return 0
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def parse_backend_datetime(value):
    """
    Parse an ISO date or datetime from the backend into an aware datetime.

    Date-only values and naive datetimes are taken as UTC. Returns None for
    anything unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = parse_datetime(value.replace('Z', '+00:00'))
            if parsed is None:
                day = parse_date(value)
                parsed = datetime(day.year, day.month, day.day) if day else None
        except ValueError:
            return None
    else:
        return None

    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def calculate_farmer_stats(farmers):
    total = len(farmers)
    active = sum(1 for f in farmers if f.get('status') == FARMER_ACTIVE)
    pending_certification = sum(
        1 for f in farmers if f.get('certificationStatus') == CERTIFICATION_PENDING
    )

    return {
        'total': total,
        'active': active,
        'inactive': total - active,
        'pendingCertification': pending_certification,
    }


def _score(value):
    if isinstance(value, bool):
        return 0.0
    try:
        score = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    # "NaN" and "Infinity" parse as floats but cannot be averaged
    return score if math.isfinite(score) else 0.0


def calculate_inspection_stats(inspections):
    completed = [i for i in inspections if i.get('status') == INSPECTION_COMPLETED]

    if completed:
        score_sum = sum(_score(i.get('score')) for i in completed)
        average_score = round_half_up(score_sum / len(completed))
    else:
        average_score = 0

    return {
        'total': len(inspections),
        'pending': sum(1 for i in inspections if i.get('status') == INSPECTION_PENDING),
        'completed': len(completed),
        'failed': sum(1 for i in inspections if i.get('status') == INSPECTION_FAILED),
        'averageScore': average_score,
    }


def is_expiring_soon(certificate, now=None):
    """Active certificate whose expiry falls on or before now + 30 days."""
    if certificate.get('status') != CERTIFICATE_ACTIVE:
        return False

    expiry = parse_backend_datetime(certificate.get('expiryDate'))
    if expiry is None:
        return False

    now = now or timezone.now()
    return expiry <= now + timedelta(days=EXPIRING_SOON_DAYS)


def calculate_certificate_stats(certificates, now=None):
    now = now or timezone.now()

    return {
        'total': len(certificates),
        'active': sum(1 for c in certificates if c.get('status') == CERTIFICATE_ACTIVE),
        'expired': sum(1 for c in certificates if c.get('status') == CERTIFICATE_EXPIRED),
        'revoked': sum(1 for c in certificates if c.get('status') == CERTIFICATE_REVOKED),
        'expiringSoon': sum(1 for c in certificates if is_expiring_soon(c, now)),
    }


def generate_dashboard_stats(session, now=None):
    """
    Compute DashboardStats from fresh backend data.

    Returns:
        dict: {'farmers': {...}, 'inspections': {...}, 'certificates': {...}}
    """
    collections = fetch_collections(session)

    logger.debug(
        "Dashboard stats computed over "
        f"{len(collections['farmers'])} farmers, "
        f"{len(collections['inspections'])} inspections, "
        f"{len(collections['certificates'])} certificates"
    )

    return {
        'farmers': calculate_farmer_stats(collections['farmers']),
        'inspections': calculate_inspection_stats(collections['inspections']),
        'certificates': calculate_certificate_stats(collections['certificates'], now),
    }
