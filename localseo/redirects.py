"""
Redirect Table — static source path → target URL rules.

Consulted on every non-admin, non-API request before LocalSEO routing. The
full rule list is cached for up to an hour; every mutation clears the cache
so the next request sees the change.
"""
import logging
from typing import Optional

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import F

from .conf import get_option
from .exceptions import ConstraintViolation
from .models import RedirectRule

logger = logging.getLogger(__name__)

REDIRECTS_CACHE_KEY = 'localseo_redirects_cache'
VALID_REDIRECT_TYPES = (301, 302)


def normalize_redirect_type(value) -> int:
    """301 or 302; anything else (including garbage input) becomes 301."""
    try:
        code = int(value)
    except (TypeError, ValueError):
        return 301
    return code if code in VALID_REDIRECT_TYPES else 301


def _comparable(path: str) -> str:
    """Leading slash ensured, trailing slashes ignored: /old-page ≡ /old-page/."""
    return ('/' + (path or '').lstrip('/')).rstrip('/')


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

def get_rules_cached():
    rules = cache.get(REDIRECTS_CACHE_KEY)
    if rules is not None:
        return rules

    rules = list(
        RedirectRule.objects.order_by('id').only('id', 'source_path', 'target_url', 'redirect_type')
    )
    cache.set(REDIRECTS_CACHE_KEY, rules, get_option('REDIRECT_CACHE_TIMEOUT'))
    return rules


def clear_cache():
    cache.delete(REDIRECTS_CACHE_KEY)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def lookup(path: str) -> Optional[RedirectRule]:
    """Return the first rule (by ascending id) whose source matches *path*."""
    if not path:
        return None
    wanted = _comparable(path)
    for rule in get_rules_cached():
        if _comparable(rule.source_path) == wanted:
            return rule
    return None


def record_hit(rule) -> None:
    """
    Increment the rule's hit counter in a single UPDATE. Best effort: a
    deleted rule just updates nothing.
    """
    RedirectRule.objects.filter(pk=rule.pk).update(hits=F('hits') + 1)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def list_rules():
    return RedirectRule.objects.order_by('-id')


def create_rule(source_path, target_url, redirect_type=301) -> RedirectRule:
    source_path = (source_path or '').strip()
    target_url = (target_url or '').strip()
    if not source_path or not target_url:
        raise ValueError('Please enter both a source path and a target URL.')

    try:
        with transaction.atomic():
            rule = RedirectRule.objects.create(
                source_path=source_path,
                target_url=target_url,
                redirect_type=normalize_redirect_type(redirect_type),
                hits=0,
            )
    except IntegrityError as exc:
        raise ConstraintViolation('source_path', source_path) from exc
    finally:
        clear_cache()

    logger.info(f"Redirect added: {rule}")
    return rule


def delete_rule(rule_id) -> bool:
    deleted, _ = RedirectRule.objects.filter(pk=rule_id).delete()
    clear_cache()
    if deleted:
        logger.info(f"Redirect {rule_id} deleted")
    return deleted > 0
