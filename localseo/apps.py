from django.apps import AppConfig


class LocalSEOConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'localseo'
    verbose_name = 'LocalSEO Booster'

    def ready(self):
        # Registers the redirect cache invalidation receivers
        import localseo.signals  # noqa: F401
