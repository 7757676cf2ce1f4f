from django import forms
from django.contrib import admin

from . import redirects
from .exceptions import SlugCollisionExhausted
from .models import LocalPage, RedirectRule
from .slugs import normalize


class LocalPageAdminForm(forms.ModelForm):
    """
    Normalizes the slug (and derives one for new rows) before the model's
    unique check runs, so clashes surface as form errors.
    """

    class Meta:
        model = LocalPage
        fields = '__all__'

    def clean_slug(self):
        return normalize(self.cleaned_data.get('slug')) or None

    def clean(self):
        cleaned_data = super().clean()
        if self.instance.pk or cleaned_data.get('slug'):
            return cleaned_data

        try:
            cleaned_data['slug'] = LocalPage.objects.unique_slug_for(
                cleaned_data.get('service_keyword'), cleaned_data.get('city'),
            )
        except SlugCollisionExhausted as e:
            self.add_error('slug', str(e))
        return cleaned_data


@admin.register(LocalPage)
class LocalPageAdmin(admin.ModelAdmin):
    form = LocalPageAdminForm
    list_display = ('service_keyword', 'city', 'zip', 'slug', 'has_ai_content', 'updated_at')
    list_filter = ('city', 'service_keyword')
    search_fields = ('city', 'service_keyword', 'zip', 'slug')
    readonly_fields = ('created_at', 'updated_at')

    @admin.display(boolean=True, description='AI content')
    def has_ai_content(self, obj):
        return bool(obj.ai_intro and obj.meta_title and obj.meta_description)


@admin.register(RedirectRule)
class RedirectRuleAdmin(admin.ModelAdmin):
    list_display = ('source_path', 'target_url', 'redirect_type', 'hits', 'created_at')
    search_fields = ('source_path', 'target_url')
    readonly_fields = ('hits', 'created_at')

    def save_model(self, request, obj, form, change):
        obj.redirect_type = redirects.normalize_redirect_type(obj.redirect_type)
        super().save_model(request, obj, form, change)
