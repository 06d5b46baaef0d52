"""
Status vocabularies shared by services, dashboard statistics and exports.
"""

FARMER_ACTIVE = 'active'
FARMER_INACTIVE = 'inactive'
FARMER_STATUSES = (FARMER_ACTIVE, FARMER_INACTIVE)

CERTIFICATION_PENDING = 'pending'
CERTIFICATION_APPROVED = 'approved'
CERTIFICATION_REJECTED = 'rejected'
CERTIFICATION_STATUSES = (CERTIFICATION_PENDING, CERTIFICATION_APPROVED, CERTIFICATION_REJECTED)

INSPECTION_PENDING = 'pending'
INSPECTION_COMPLETED = 'completed'
INSPECTION_FAILED = 'failed'
INSPECTION_STATUSES = (INSPECTION_PENDING, INSPECTION_COMPLETED, INSPECTION_FAILED)

INSPECTOR_STATUSES = ('active', 'inactive')

CERTIFICATE_ACTIVE = 'active'
CERTIFICATE_EXPIRED = 'expired'
CERTIFICATE_REVOKED = 'revoked'
CERTIFICATE_STATUSES = (CERTIFICATE_ACTIVE, CERTIFICATE_EXPIRED, CERTIFICATE_REVOKED)

# Certificates only move forward; revoked is terminal.
CERTIFICATE_TRANSITIONS = {
    CERTIFICATE_ACTIVE: {CERTIFICATE_EXPIRED, CERTIFICATE_REVOKED},
    CERTIFICATE_EXPIRED: {CERTIFICATE_REVOKED},
    CERTIFICATE_REVOKED: set(),
}


def can_transition(current, target):
    """Whether a certificate may move from `current` to `target` status."""
    if current == target:
        return True
    if current not in CERTIFICATE_TRANSITIONS:
        # Unknown or missing status: the backend decides
        return True
    return target in CERTIFICATE_TRANSITIONS[current]
