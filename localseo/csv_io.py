"""
CSV import/export for the LocalSEO data grid.

Import expects a header row with at least ``city`` and ``service_keyword``;
optional columns are zip, meta_title, meta_description, nearby_cities and
local_landmarks. Quoted fields may span lines.
"""
import csv
import io
import logging
import re
from typing import Dict, Iterable

from .exceptions import LocalSEOError
from .models import LocalPage
from .serializers import LocalPageSerializer

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('city', 'service_keyword')
IMPORT_COLUMNS = (
    'city', 'zip', 'service_keyword', 'meta_title', 'meta_description',
    'nearby_cities', 'local_landmarks',
)
EXPORT_COLUMNS = IMPORT_COLUMNS

UTF8_BOM = '\ufeff'
# Leading characters a spreadsheet would evaluate as a formula
_FORMULA_TRIGGER = re.compile(r'^[=+\-@\t\r]')
_HEADER_CLEAN = re.compile(r'[^a-z0-9_]')


class CSVImportError(ValueError):
    def __init__(self, code, message):
        self.code = code
        super().__init__(message)


def _clean_header(name) -> str:
    return _HEADER_CLEAN.sub('', str(name).strip().lower())


def import_pages(csv_content: str) -> Dict[str, int]:
    """
    Create one LocalPage per data row. Rows without city or service, rows that
    fail the API validation (e.g. over-long values) and rows whose insert
    fails are counted as skipped.

    Returns: {'imported': int, 'skipped': int}
    """
    if not csv_content or not csv_content.strip():
        raise CSVImportError('EMPTY_CSV', 'No CSV data provided.')

    reader = csv.reader(io.StringIO(csv_content.lstrip(UTF8_BOM)))
    try:
        headers = [_clean_header(h) for h in next(reader)]
    except StopIteration:
        raise CSVImportError('INVALID_CSV', 'CSV must contain a header row and at least one data row.')

    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise CSVImportError(
            'MISSING_COLUMNS',
            f"CSV must include these columns: {', '.join(REQUIRED_COLUMNS)}",
        )

    imported = 0
    skipped = 0
    for values in reader:
        if not values:
            continue
        values = values + [''] * (len(headers) - len(values))
        row = dict(zip(headers, values))

        city = row.get('city', '').strip()
        service = row.get('service_keyword', '').strip()
        if not city or not service:
            skipped += 1
            continue

        fields = {col: row.get(col, '').strip() for col in IMPORT_COLUMNS}
        serializer = LocalPageSerializer(data=fields)
        if not serializer.is_valid():
            logger.warning(f"CSV row skipped ({service} / {city}): {dict(serializer.errors)}")
            skipped += 1
            continue
        try:
            serializer.save()
        except LocalSEOError as e:
            logger.warning(f"CSV row skipped ({service} / {city}): {e}")
            skipped += 1
            continue
        imported += 1

    logger.info(f"CSV import finished: {imported} imported, {skipped} skipped")
    return {'imported': imported, 'skipped': skipped}


def _escape_formula(value) -> str:
    if value is None:
        return ''
    value = str(value)
    if value and _FORMULA_TRIGGER.match(value):
        return "'" + value
    return value


def export_pages(pages: Iterable[LocalPage]) -> str:
    """UTF-8 CSV (BOM-prefixed for Excel) of the given rows."""
    output = io.StringIO()
    output.write(UTF8_BOM)
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for page in pages:
        writer.writerow([_escape_formula(getattr(page, col)) for col in EXPORT_COLUMNS])
    return output.getvalue()
