"""
Export Views

GET /api/exports/<entity>/<fmt>/

Downloads one backend collection as CSV, Excel or PDF. Optional query
params: title, subtitle, filename.
"""

import logging
import re

from django.http import HttpResponse
from django.utils.http import content_disposition_header
from rest_framework import status
from rest_framework.response import Response

from certification.views import BackendProxyView
from .export_presets import EXPORT_PRESETS
from .exporters import EXPORTERS, ExportError

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f"\\/]')


def clean_filename(value):
    """Last path segment of a client-supplied filename, without quotes or control characters."""
    if not value:
        return None
    name = re.split(r'[\\/]', value)[-1]
    name = UNSAFE_FILENAME_CHARS.sub('', name).strip().lstrip('.')
    return name or None


class BaseExportView(BackendProxyView):
    """Base class for export views"""

    def get_export_params(self, request, preset):
        return {
            'title': request.query_params.get('title') or preset.title,
            'subtitle': request.query_params.get('subtitle') or None,
            'filename': clean_filename(request.query_params.get('filename')),
        }

    def file_response(self, export_file):
        response = HttpResponse(export_file.content, content_type=export_file.content_type)
        response['Content-Disposition'] = content_disposition_header(
            True, UNSAFE_FILENAME_CHARS.sub('_', export_file.filename)
        )
        return response


class ExportEntityView(BaseExportView):
    """Export one entity collection in the requested format"""

    def get(self, request, entity, fmt):
        preset = EXPORT_PRESETS.get(entity)
        if preset is None:
            return Response(
                {'error': f"Unknown export entity '{entity}'", 'code': 'UNKNOWN_ENTITY'},
                status=status.HTTP_404_NOT_FOUND
            )

        exporter = EXPORTERS.get(fmt)
        if exporter is None:
            return Response(
                {'error': f"Unsupported export format '{fmt}'", 'code': 'UNSUPPORTED_FORMAT'},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = preset.service_class(self.api_session).fetch_all()
        if not data:
            return Response(
                {'error': 'No data available for export', 'code': 'NO_DATA'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            export_file = exporter(data, **self.get_export_params(request, preset), **preset.export_options(fmt))
        except ExportError as e:
            logger.error(f"{fmt} export of {entity} failed: {e.message}")
            return Response(
                {'error': e.message, 'code': e.code},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        logger.info(f"Exported {len(data)} {entity} as {fmt}")
        return self.file_response(export_file)
