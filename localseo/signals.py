from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import RedirectRule
from .redirects import clear_cache


@receiver(post_save, sender=RedirectRule)
@receiver(post_delete, sender=RedirectRule)
def invalidate_redirect_cache(sender, instance, **kwargs):
    """
    Rules edited through the Django admin bypass redirects.create_rule /
    delete_rule; drop the cached snapshot for them too.
    """
    clear_cache()
