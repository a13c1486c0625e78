from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    InstrumentViewSet,
    PriceHistoryViewSet,
    PriceAlertViewSet,
)

router = DefaultRouter()
router.register(r'instruments', InstrumentViewSet, basename='instrument')
router.register(r'price-history', PriceHistoryViewSet, basename='price-history')
router.register(r'price-alerts', PriceAlertViewSet, basename='price-alert')

urlpatterns = [
    path('', include(router.urls)),
]
