"""
Export column presets per backend entity.

Farmers use the exporters' default layouts; every other entity supplies its
own headers and row mapping, shared by all three formats.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Type

from certification.services import (
    CertificateService,
    EntityService,
    FarmerService,
    FarmService,
    InspectionService,
    InspectorService,
)
from .exporters import format_date


@dataclass
class ExportPreset:
    title: str
    service_class: Type[EntityService]
    headers: Optional[List[str]] = None
    mapping: Optional[Callable] = None
    column_widths: Optional[List[int]] = None
    pdf_column_widths_mm: Optional[List[int]] = None

    def export_options(self, fmt):
        options = {
            'custom_headers': self.headers,
            'custom_mapping': self.mapping,
        }
        if fmt == 'excel' and self.column_widths:
            options['column_widths'] = self.column_widths
        if fmt == 'pdf' and self.pdf_column_widths_mm:
            options['column_widths_mm'] = self.pdf_column_widths_mm
        return options


def farm_row(farm, index):
    return [
        index + 1,
        farm.get('farmName'),
        farm.get('farmerName'),
        farm.get('location'),
        farm.get('totalArea'),
        farm.get('cropTypes'),
        farm.get('organicSince'),
        farm.get('certificationStatus'),
        farm.get('status'),
    ]


def inspection_row(inspection, index):
    return [
        index + 1,
        inspection.get('farmName'),
        inspection.get('farmerName'),
        inspection.get('inspectorName'),
        format_date(inspection.get('scheduledDate')),
        format_date(inspection.get('completedDate')),
        inspection.get('score'),
        inspection.get('status'),
    ]


def inspector_row(inspector, index):
    return [
        index + 1,
        inspector.get('name'),
        inspector.get('email'),
        inspector.get('phone'),
        inspector.get('specialization'),
        inspector.get('status'),
    ]


def certificate_row(certificate, index):
    return [
        index + 1,
        certificate.get('certificateNumber'),
        certificate.get('farmerName'),
        certificate.get('farmName'),
        certificate.get('cropTypes'),
        format_date(certificate.get('issueDate')),
        format_date(certificate.get('expiryDate')),
        certificate.get('status'),
    ]


EXPORT_PRESETS = {
    'farmers': ExportPreset(
        title='Farmers Data Export',
        service_class=FarmerService,
    ),
    'farms': ExportPreset(
        title='Farms Data Export',
        service_class=FarmService,
        headers=['#', 'Farm Name', 'Farmer', 'Location', 'Total Area (Acres)',
                 'Crop Types', 'Organic Since', 'Certification Status', 'Status'],
        mapping=farm_row,
        column_widths=[8, 25, 20, 20, 18, 30, 15, 20, 12],
        pdf_column_widths_mm=[8, 24, 22, 22, 16, 28, 16, 20, 14],
    ),
    'inspections': ExportPreset(
        title='Inspections Data Export',
        service_class=InspectionService,
        headers=['#', 'Farm', 'Farmer', 'Inspector', 'Scheduled Date',
                 'Completed Date', 'Score', 'Status'],
        mapping=inspection_row,
        column_widths=[8, 25, 20, 20, 15, 15, 10, 12],
        pdf_column_widths_mm=[10, 30, 25, 25, 22, 22, 14, 20],
    ),
    'inspectors': ExportPreset(
        title='Inspectors Data Export',
        service_class=InspectorService,
        headers=['#', 'Name', 'Email', 'Phone', 'Specialization', 'Status'],
        mapping=inspector_row,
        column_widths=[8, 20, 25, 15, 25, 12],
        pdf_column_widths_mm=[10, 35, 45, 25, 35, 20],
    ),
    'certificates': ExportPreset(
        title='Certificates Data Export',
        service_class=CertificateService,
        headers=['#', 'Certificate Number', 'Farmer', 'Farm', 'Crop Types',
                 'Issue Date', 'Expiry Date', 'Status'],
        mapping=certificate_row,
        column_widths=[8, 20, 20, 25, 30, 15, 15, 12],
        pdf_column_widths_mm=[8, 28, 25, 25, 30, 20, 20, 14],
    ),
}
