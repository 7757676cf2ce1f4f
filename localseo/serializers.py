"""
Serializers for the LocalSEO admin API.
"""
from rest_framework import serializers

from .models import EDITABLE_FIELDS, LocalPage


class LocalPageSerializer(serializers.ModelSerializer):
    """Serializer for LocalPage rows; writes go through the row store."""
    canonical_url = serializers.SerializerMethodField()

    class Meta:
        model = LocalPage
        fields = ('id', *EDITABLE_FIELDS, 'canonical_url', 'created_at', 'updated_at')
        read_only_fields = ('id', 'canonical_url', 'created_at', 'updated_at')
        extra_kwargs = {
            # Uniqueness is enforced by the row store (ConstraintViolation -> 409)
            'slug': {'validators': []},
        }

    def get_canonical_url(self, obj):
        request = self.context.get('request')
        path = obj.get_absolute_url()
        return request.build_absolute_uri(path) if request else path

    def create(self, validated_data):
        return LocalPage.objects.create_page(**validated_data)

    def update(self, instance, validated_data):
        return LocalPage.objects.update_page(instance.pk, **validated_data)
