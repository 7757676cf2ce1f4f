"""
AI content generation for LocalSEO rows.

Runs out-of-band from routing: results are written back through the row
store's update_page(), never during request resolution.
"""
import logging
import time
from typing import Any, Dict

from localseo.conf import get_option
from localseo.models import LocalPage

from .providers import AIProviderError, generate_content

logger = logging.getLogger(__name__)


def generate_for_page(page: LocalPage) -> LocalPage:
    """Generate and store intro/meta copy for one row. Raises AIProviderError."""
    content = generate_content(page)
    updated = LocalPage.objects.update_page(page.pk, **content)
    logger.info(f"AI content stored for LocalPage {page.pk}")
    return updated


def generate_missing(delay: float = None) -> Dict[str, Any]:
    """
    Generate copy for every row missing an intro, meta title or meta description.
    Failures are collected and do not stop the run.

    Returns: {'success': int, 'failed': int, 'errors': [{'id', 'message'}]}
    """
    if delay is None:
        delay = float(get_option('AI_BULK_DELAY'))

    results = {'success': 0, 'failed': 0, 'errors': []}
    pages = list(LocalPage.objects.missing_ai_content().order_by('id'))

    for index, page in enumerate(pages):
        try:
            generate_for_page(page)
        except AIProviderError as e:
            results['failed'] += 1
            results['errors'].append({'id': page.pk, 'message': str(e)})
        else:
            results['success'] += 1

        # Pause between provider calls to stay under rate limits
        if delay and index < len(pages) - 1:
            time.sleep(delay)

    logger.info(f"Bulk AI generation: {results['success']} succeeded, {results['failed']} failed")
    return results
