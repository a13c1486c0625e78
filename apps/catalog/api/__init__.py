from .serializers import (
    InstrumentSerializer,
    InstrumentListSerializer,
    PriceHistorySerializer,
    PriceAlertSerializer,
)

__all__ = [
    'InstrumentSerializer',
    'InstrumentListSerializer',
    'PriceHistorySerializer',
    'PriceAlertSerializer',
]
