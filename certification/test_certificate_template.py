"""
Tests for the printable certificate document.
"""
from datetime import date

from certification.certificate_template import (
    build_certificate_context,
    format_crop_types,
    generate_certificate_html,
)


CERTIFICATE = {
    'id': 'c-1',
    'certificateNumber': 'ORG-2024-001',
    'farmerName': 'Jane Wanjiru',
    'farmName': 'Green Acres',
    'issueDate': '2024-01-15',
    'expiryDate': '2025-01-15',
    'status': 'active',
    'cropTypes': ['Maize', 'Beans', 'Kale'],
}


class TestCropTypes:

    def test_list_joined(self):
        assert format_crop_types(['Maize', 'Beans']) == 'Maize, Beans'

    def test_string_passes_through(self):
        assert format_crop_types('Maize;Beans') == 'Maize;Beans'

    def test_missing(self):
        assert format_crop_types(None) == '-'
        assert format_crop_types([]) == '-'


class TestCertificateContext:

    def test_fields(self):
        context = build_certificate_context(CERTIFICATE, generated_on=date(2024, 3, 1))
        assert context['certificate_number'] == 'ORG-2024-001'
        assert context['farm_name'] == 'Green Acres'
        assert context['crop_types'] == 'Maize, Beans, Kale'
        assert context['generated_on'] == '2024-03-01'

    def test_missing_fields_use_placeholder(self):
        context = build_certificate_context({})
        for key in ('certificate_number', 'farmer_name', 'farm_name', 'issue_date', 'expiry_date', 'crop_types'):
            assert context[key] == '-'

    def test_authority_from_settings(self, settings):
        settings.CERTIFICATE_AUTHORITY_NAME = 'County Organic Board'
        assert build_certificate_context(CERTIFICATE)['authority_name'] == 'County Organic Board'


class TestGenerateCertificateHTML:

    def test_renders_certificate(self):
        html = generate_certificate_html(CERTIFICATE, generated_on=date(2024, 3, 1))
        assert html.lstrip().lower().startswith('<!doctype html>')
        assert 'ORG-2024-001' in html
        assert 'Jane Wanjiru' in html
        assert 'Maize, Beans, Kale' in html
        assert '2025-01-15' in html
        assert 'Generated on: 2024-03-01' in html

    def test_field_values_are_escaped(self):
        html = generate_certificate_html({'farmerName': '<script>alert(1)</script>'})
        assert '<script>alert(1)</script>' not in html
        assert '&lt;script&gt;' in html
