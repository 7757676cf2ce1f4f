"""
LocalSEO models — landing-page rows and static redirect rules.

  1. LocalPage     — one (city, service) pair driving one virtual landing page
  2. RedirectRule  — source path → target URL rewrite, consulted before routing
"""
import logging

from django.db import IntegrityError, models, transaction
from django.db.models import Q, Value
from django.db.models.functions import Lower, Replace

from .exceptions import ConstraintViolation, SlugCollisionExhausted
from .slugs import normalize

logger = logging.getLogger(__name__)

# Hard cap on slug disambiguation: base, base-1, ..., base-99
SLUG_MAX_ATTEMPTS = 100
SLUG_MAX_LENGTH = 200
# Room left in the column for the longest "-N" suffix
SLUG_BASE_MAX_LENGTH = SLUG_MAX_LENGTH - len(f"-{SLUG_MAX_ATTEMPTS - 1}")

# Columns the admin grid, API and CSV import may write
EDITABLE_FIELDS = (
    'city', 'zip', 'service_keyword', 'slug',
    'ai_intro', 'meta_title', 'meta_description',
    'nearby_cities', 'local_landmarks',
)

AI_CONTENT_FIELDS = ('ai_intro', 'meta_title', 'meta_description')


# ─────────────────────────────────────────────────────────────
# ROW STORE
# ─────────────────────────────────────────────────────────────

class LocalPageQuerySet(models.QuerySet):

    def missing_ai_content(self):
        """Rows where the intro, meta title or meta description is empty or unset."""
        condition = Q()
        for field in AI_CONTENT_FIELDS:
            condition |= Q(**{field: ''}) | Q(**{f'{field}__isnull': True})
        return self.filter(condition)

    def routable(self):
        """Rows with both a service keyword and a city (the only ones with a canonical URL)."""
        return self.exclude(service_keyword='').exclude(city='')


class LocalPageManager(models.Manager.from_queryset(LocalPageQuerySet)):

    def get_all(self):
        return self.order_by('-created_at', '-id')

    def get_by_id(self, pk):
        return self.filter(pk=pk).first()

    def get_by_slug(self, slug):
        if not slug:
            return None
        return self.filter(slug=slug).first()

    def get_by_service_city_slugs(self, service_slug, city_slug):
        """
        Find a row from the pre-slugified /service/<service>/<city>/ segments.

        Phase 1 narrows candidates in SQL with LOWER(REPLACE(col, ' ', '-')),
        which is only an approximation of normalize(). Phase 2 applies the full
        normalize() to each candidate and compares exactly, so a stored
        "Kloakmester Service" is found for "kloakmester-service". Rows whose
        names need more than lowercasing and space replacement (e.g. "St. Heddinge")
        never reach phase 2; store those in pre-slugified form.
        """
        if not service_slug or not city_slug:
            return None

        candidates = self.annotate(
            service_key=Lower(Replace('service_keyword', Value(' '), Value('-'))),
            city_key=Lower(Replace('city', Value(' '), Value('-'))),
        ).filter(service_key=service_slug, city_key=city_slug).order_by('id')

        for page in candidates:
            if normalize(page.service_keyword) == service_slug and normalize(page.city) == city_slug:
                return page
        return None

    def unique_slug_for(self, service_keyword, city):
        """
        Derive a free slug from service + city, trying base, base-1, ... base-99.
        The base is trimmed so every candidate fits the slug column.

        Returns None when either part is empty or normalizes to nothing.
        Raises SlugCollisionExhausted once all attempts are taken.
        """
        if not service_keyword or not city:
            return None
        base_slug = normalize(f"{service_keyword}-{city}")[:SLUG_BASE_MAX_LENGTH].strip("-")
        if not base_slug:
            return None

        for attempt in range(SLUG_MAX_ATTEMPTS):
            candidate = base_slug if attempt == 0 else f"{base_slug}-{attempt}"
            if not self.filter(slug=candidate).exists():
                return candidate

        raise SlugCollisionExhausted(base_slug, SLUG_MAX_ATTEMPTS)

    def create_page(self, **fields):
        """
        Insert a row. An explicit slug is normalized; otherwise one is derived
        from service + city. A unique clash on slug raises ConstraintViolation.
        """
        _check_fields(fields)

        slug = normalize(fields.get('slug'))
        if not slug:
            slug = self.unique_slug_for(fields.get('service_keyword'), fields.get('city'))
        fields['slug'] = slug or None

        try:
            with transaction.atomic():
                page = self.create(**fields)
        except IntegrityError as exc:
            raise ConstraintViolation('slug', fields['slug']) from exc

        logger.info(f"Created LocalPage {page.id} ({page.service_keyword} / {page.city}, slug={page.slug})")
        return page

    def update_page(self, pk, **fields):
        """
        Patch only the given fields. Raises LocalPage.DoesNotExist for an
        unknown id and ConstraintViolation on a slug clash.
        """
        _check_fields(fields)
        page = self.get(pk=pk)
        if not fields:
            return page

        if 'slug' in fields:
            fields['slug'] = normalize(fields['slug']) or None

        for name, value in fields.items():
            setattr(page, name, value)

        try:
            with transaction.atomic():
                page.save(update_fields=[*fields, 'updated_at'])
        except IntegrityError as exc:
            raise ConstraintViolation('slug', fields.get('slug')) from exc
        return page

    def delete_page(self, pk):
        deleted, _ = self.filter(pk=pk).delete()
        return deleted > 0


def _check_fields(fields):
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown LocalPage fields: {', '.join(sorted(unknown))}")


class LocalPage(models.Model):
    city = models.CharField(max_length=100)
    zip = models.CharField(max_length=20, blank=True, default='')
    service_keyword = models.CharField(max_length=100)
    slug = models.CharField(max_length=SLUG_MAX_LENGTH, unique=True, null=True, blank=True,
        help_text="Legacy /localseo/<slug>/ identifier. Derived from service + city when left empty.")
    ai_intro = models.TextField(blank=True, default='')
    meta_title = models.CharField(max_length=255, blank=True, default='',
        help_text="Recommended: up to 60 characters.")
    meta_description = models.CharField(max_length=500, blank=True, default='',
        help_text="Recommended: up to 155 characters.")
    nearby_cities = models.TextField(blank=True, null=True, default='',
        help_text="Comma-separated list of nearby areas.")
    local_landmarks = models.TextField(blank=True, null=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LocalPageManager()

    class Meta:
        db_table = 'localseo_data'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['city', 'service_keyword'], name='localseo_city_service'),
        ]

    def __str__(self):
        return f"{self.service_keyword} in {self.city}"

    def get_absolute_url(self):
        from .routing import canonical_path
        return canonical_path(self)

    @property
    def nearby_city_list(self):
        return [c.strip() for c in (self.nearby_cities or '').split(',') if c.strip()]


# ─────────────────────────────────────────────────────────────
# REDIRECT TABLE
# ─────────────────────────────────────────────────────────────

class RedirectRule(models.Model):
    REDIRECT_TYPES = [
        (301, '301 – Permanent'),
        (302, '302 – Temporary'),
    ]

    source_path = models.CharField(max_length=255, unique=True,
        help_text="Relative path to redirect FROM, e.g. /old-page/")
    target_url = models.CharField(max_length=2048,
        help_text="Full URL to redirect TO.")
    redirect_type = models.PositiveSmallIntegerField(choices=REDIRECT_TYPES, default=301)
    hits = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'localseo_redirects'
        ordering = ['-id']

    def __str__(self):
        return f"{self.source_path} → {self.target_url} ({self.redirect_type})"
