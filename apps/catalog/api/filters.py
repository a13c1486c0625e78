from django_filters import rest_framework as filters
from apps.catalog.models import Instrument, PriceHistory


class InstrumentFilter(filters.FilterSet):
    """Catalog filters; ``brand`` matches case-insensitively."""

    brand = filters.CharFilter(field_name='brand', lookup_expr='iexact')
    type = filters.CharFilter(field_name='type', lookup_expr='iexact')
    parent = filters.NumberFilter(field_name='parent__id')
    has_parent = filters.BooleanFilter(field_name='parent', lookup_expr='isnull', exclude=True)

    # Market value filters
    min_value = filters.NumberFilter(field_name='market_value', lookup_expr='gte')
    max_value = filters.NumberFilter(field_name='market_value', lookup_expr='lte')

    class Meta:
        model = Instrument
        fields = ['type', 'subtype', 'brand', 'status', 'parent', 'is_base_model']


class PriceHistoryFilter(filters.FilterSet):
    since = filters.IsoDateTimeFilter(field_name='recorded_at', lookup_expr='gte')

    class Meta:
        model = PriceHistory
        fields = ['instrument', 'source', 'currency']
