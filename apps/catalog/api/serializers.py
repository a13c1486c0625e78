from rest_framework import serializers
from apps.catalog.models import Instrument, PriceHistory, PriceAlert


# =============================================================================
# Nested JSON items
# =============================================================================

class SpecItemSerializer(serializers.Serializer):
    category = serializers.CharField(
        error_messages={'blank': 'La categoría es obligatoria', 'required': 'La categoría es obligatoria'}
    )
    label = serializers.CharField(
        error_messages={'blank': 'La etiqueta es obligatoria', 'required': 'La etiqueta es obligatoria'}
    )
    value = serializers.CharField(
        error_messages={'blank': 'El valor es obligatorio', 'required': 'El valor es obligatorio'}
    )


class WebsiteSerializer(serializers.Serializer):
    url = serializers.CharField(
        error_messages={'blank': 'La URL es obligatoria', 'required': 'La URL es obligatoria'}
    )
    is_primary = serializers.BooleanField(default=False)


class DocumentSerializer(serializers.Serializer):
    title = serializers.CharField(
        error_messages={
            'blank': 'El título del documento es obligatorio',
            'required': 'El título del documento es obligatorio',
        }
    )
    url = serializers.URLField(error_messages={'invalid': 'URL del documento inválida'})
    type = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Instrument Serializers
# =============================================================================

class InstrumentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for catalog lists."""
    primary_image = serializers.CharField(read_only=True)
    variant_count = serializers.SerializerMethodField()

    class Meta:
        model = Instrument
        fields = [
            'id', 'type', 'subtype', 'brand', 'model', 'version', 'years',
            'variant_label', 'parent', 'is_base_model', 'primary_image',
            'market_value', 'market_currency', 'status', 'variant_count'
        ]

    def get_variant_count(self, obj):
        count = getattr(obj, 'variant_count', None)
        if count is None:
            count = obj.variants.count()
        return count


class InstrumentSerializer(serializers.ModelSerializer):
    """
    Stored instrument record, without inheritance applied.
    Used for create/update and for the raw view.
    """
    specs = SpecItemSerializer(many=True, required=False)
    websites = WebsiteSerializer(many=True, required=False)
    documents = DocumentSerializer(many=True, required=False)
    years = serializers.ListField(child=serializers.CharField(), required=False)
    generic_images = serializers.ListField(
        child=serializers.URLField(error_messages={'invalid': 'URL de imagen inválida'}),
        required=False
    )
    excluded_images = serializers.ListField(child=serializers.CharField(), required=False)
    reverb_url = serializers.URLField(
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'URL de Reverb inválida'}
    )

    class Meta:
        model = Instrument
        fields = [
            'id', 'parent', 'type', 'subtype', 'brand', 'model', 'version',
            'years', 'description', 'specs', 'websites', 'generic_images',
            'documents', 'variant_label', 'excluded_images', 'is_base_model',
            'original_price', 'original_currency', 'original_year',
            'market_value', 'market_min', 'market_max', 'market_currency',
            'market_updated_at', 'market_source', 'reverb_url',
            'status', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'market_min', 'market_max', 'market_updated_at', 'market_source', 'status',
            'created_by', 'created_at', 'updated_at'
        ]
        extra_kwargs = {
            'brand': {'error_messages': {'blank': 'La marca es obligatoria', 'required': 'La marca es obligatoria'}},
            'model': {'error_messages': {'blank': 'El modelo es obligatorio', 'required': 'El modelo es obligatorio'}},
            'type': {'error_messages': {'blank': 'El tipo es obligatorio', 'required': 'El tipo es obligatorio'}},
        }

    def validate_parent(self, parent):
        """A parent may not be the record itself or one of its variants."""
        if parent is None or self.instance is None:
            return parent

        seen = set()
        current = parent
        while current is not None and current.pk not in seen:
            if current.pk == self.instance.pk:
                raise serializers.ValidationError('El modelo base no puede ser una variante de este instrumento')
            seen.add(current.pk)
            current = current.parent
        return parent


class PriceHistorySerializer(serializers.ModelSerializer):
    instrument_name = serializers.CharField(source='instrument.__str__', read_only=True)
    price_difference = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    percentage_change = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = PriceHistory
        fields = [
            'id', 'instrument', 'instrument_name', 'source', 'previous_value',
            'value', 'min_price', 'max_price', 'currency', 'listing_count',
            'price_difference', 'percentage_change', 'recorded_at', 'notes'
        ]


class PriceAlertSerializer(serializers.ModelSerializer):
    class Meta:
        model = PriceAlert
        fields = [
            'id', 'instrument', 'query', 'target_price', 'currency',
            'is_active', 'last_checked', 'trigger_count', 'created_at'
        ]
        read_only_fields = ['last_checked', 'trigger_count', 'created_at']
