"""
Errors raised by the LocalSEO row store and redirect table.

Not-found is not an error here: lookups return None and the landing view
answers 404. Degenerate rows (empty service/city) never raise either; their
canonical path falls back to the site root.
"""


class LocalSEOError(Exception):
    """Base class for LocalSEO persistence errors."""
    code = 'LOCALSEO_ERROR'


class SlugCollisionExhausted(LocalSEOError):
    """Every candidate slug (base, base-1 ... base-99) is already taken."""
    code = 'SLUG_EXHAUSTED'

    def __init__(self, base_slug, attempts):
        self.base_slug = base_slug
        self.attempts = attempts
        super().__init__(
            f"Could not find a free slug for '{base_slug}' after {attempts} attempts. "
            "Choose a slug manually."
        )


class ConstraintViolation(LocalSEOError):
    """A unique column (LocalPage.slug, RedirectRule.source_path) already holds the value."""
    code = 'CONFLICT'

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} '{value}' is already in use.")
