"""
Printable certificate document.

generate_certificate_html() fills the certificate template with a
certificate record as returned by the backend. Missing fields render as '-'.
cropTypes may arrive as a list (joined with ', ') or as a pre-joined string.
Values are HTML-escaped by the template engine.
"""

from datetime import date

from django.conf import settings
from django.template.loader import render_to_string

PLACEHOLDER = '-'

TEMPLATE_NAME = 'certification/certificate.html'


def _display(value):
    if value is None or value == '':
        return PLACEHOLDER
    return value


def format_crop_types(crop_types):
    if isinstance(crop_types, (list, tuple)):
        joined = ', '.join(str(crop) for crop in crop_types)
        return joined or PLACEHOLDER
    return _display(crop_types)


def build_certificate_context(certificate, generated_on=None):
    generated_on = generated_on or date.today()
    return {
        'certificate_number': _display(certificate.get('certificateNumber')),
        'farmer_name': _display(certificate.get('farmerName')),
        'farm_name': _display(certificate.get('farmName')),
        'issue_date': _display(certificate.get('issueDate')),
        'expiry_date': _display(certificate.get('expiryDate')),
        'crop_types': format_crop_types(certificate.get('cropTypes')),
        'authority_name': settings.CERTIFICATE_AUTHORITY_NAME,
        'generated_on': generated_on.strftime('%Y-%m-%d'),
    }


def generate_certificate_html(certificate, generated_on=None):
    """Render the printable HTML document for one certificate record."""
    return render_to_string(TEMPLATE_NAME, build_certificate_context(certificate, generated_on))
