from django import template

from localseo.bindings import binding_value

register = template.Library()


@register.simple_tag(takes_context=True)
def binding(context, key):
    """
    Bound value of the current LocalSEO page.
    Usage: {% binding "intro" %}
    """
    ctx = context.get('localseo')
    if ctx is None:
        return ''
    return binding_value(ctx.page, key)
