import structlog
from rest_framework import viewsets, filters, permissions
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import Count, Q

from apps.catalog.models import Instrument, PriceHistory, PriceAlert
from apps.catalog.services import InstrumentInheritanceService
from apps.core.permissions import IsAdminRole, IsEditorOrReadOnly
from apps.notifications.services import create_notification
from .serializers import (
    InstrumentSerializer,
    InstrumentListSerializer,
    PriceHistorySerializer,
    PriceAlertSerializer,
)
from .filters import InstrumentFilter, PriceHistoryFilter

logger = structlog.get_logger(__name__)


def visible_instruments(user, queryset=None):
    """
    Published instruments plus the user's own; editors see everything.
    """
    if queryset is None:
        queryset = Instrument.objects.all()
    if user.is_authenticated and getattr(user, 'is_catalog_editor', False):
        return queryset
    visible = Q(status=Instrument.STATUS_PUBLISHED)
    if user.is_authenticated:
        visible |= Q(created_by=user)
    return queryset.filter(visible)


class InstrumentViewSet(viewsets.ModelViewSet):
    """
    API endpoint for catalog instruments.

    list: Search and filter the catalog
    retrieve: Effective record, with the parent chain merged in
    raw: Stored record, without inheritance
    variants: Direct variants of an instrument
    create/update/delete: Editors only
    submit/approve/reject: Moderation workflow
    """
    queryset = Instrument.objects.select_related('parent', 'created_by')
    filterset_class = InstrumentFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['brand', 'model', 'variant_label']
    ordering_fields = ['brand', 'model', 'created_at', 'market_value']
    ordering = ['brand', 'model']

    def get_permissions(self):
        if self.action in ('approve', 'reject'):
            return [permissions.IsAuthenticated(), IsAdminRole()]
        if self.action == 'submit':
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticatedOrReadOnly(), IsEditorOrReadOnly()]

    def get_serializer_class(self):
        if self.action in ('list', 'variants'):
            return InstrumentListSerializer
        return InstrumentSerializer

    def get_queryset(self):
        queryset = visible_instruments(self.request.user, super().get_queryset())
        if self.action == 'list':
            queryset = queryset.annotate(variant_count=Count('variants'))
        return queryset

    def perform_create(self, serializer):
        instrument = serializer.save(created_by=self.request.user, status=Instrument.STATUS_DRAFT)
        logger.info('instrument_created', instrument_id=instrument.pk, user_id=self.request.user.pk)

    def perform_update(self, serializer):
        instrument = serializer.save()
        logger.info('instrument_updated', instrument_id=instrument.pk, user_id=self.request.user.pk)

    def retrieve(self, request, *args, **kwargs):
        instrument = self.get_object()
        variants = visible_instruments(request.user, instrument.variants.all())
        return Response(InstrumentInheritanceService.resolve(instrument, variants=variants))

    @action(detail=True, methods=['get'])
    def raw(self, request, pk=None):
        """Stored record, as editors see it in the edit form."""
        instrument = self.get_object()
        serializer = InstrumentSerializer(instrument, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def variants(self, request, pk=None):
        instrument = self.get_object()
        queryset = visible_instruments(request.user, instrument.variants.all()).annotate(
            variant_count=Count('variants')
        ).order_by('variant_label', 'pk')
        serializer = InstrumentListSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def snapshots(self, request, pk=None):
        """Market value history for an instrument."""
        instrument = self.get_object()
        history = PriceHistory.objects.filter(instrument=instrument)
        serializer = PriceHistorySerializer(history, many=True)
        return Response(serializer.data)

    # =========================================================================
    # Moderation
    # =========================================================================

    def _transition(self, instrument, new_status, message, extra=None):
        previous = instrument.status
        instrument.status = new_status
        instrument.save(update_fields=['status', 'updated_at'])
        logger.info(
            'instrument_status_changed',
            instrument_id=instrument.pk,
            previous=previous,
            status=new_status,
            user_id=self.request.user.pk,
        )
        if instrument.created_by_id:
            data = {
                'instrument_id': instrument.pk,
                'instrument': str(instrument),
                'status': new_status,
                'message': message,
            }
            data.update(extra or {})
            create_notification(instrument.created_by, 'system', data)
        return Response(InstrumentSerializer(instrument, context=self.get_serializer_context()).data)

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        """Send a draft to review (creator or editor)."""
        instrument = self.get_object()
        if instrument.created_by_id != request.user.pk and not request.user.is_catalog_editor:
            raise PermissionDenied('Acceso denegado: Privilegios insuficientes')
        if instrument.status != Instrument.STATUS_DRAFT:
            raise ValidationError({'status': 'Solo los borradores pueden enviarse a revisión'})
        return self._transition(
            instrument, Instrument.STATUS_PENDING, 'Tu instrumento se ha enviado a revisión'
        )

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        instrument = self.get_object()
        if instrument.status != Instrument.STATUS_PENDING:
            raise ValidationError({'status': 'Solo se pueden aprobar instrumentos pendientes'})
        return self._transition(
            instrument, Instrument.STATUS_PUBLISHED, 'Tu instrumento ha sido aprobado y publicado'
        )

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        instrument = self.get_object()
        if instrument.status != Instrument.STATUS_PENDING:
            raise ValidationError({'status': 'Solo se pueden rechazar instrumentos pendientes'})
        reason = str(request.data.get('reason', '')).strip()
        return self._transition(
            instrument, Instrument.STATUS_REJECTED, 'Tu instrumento ha sido rechazado',
            extra={'reason': reason} if reason else None,
        )


class PriceHistoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for market value snapshots (read-only).
    """
    queryset = PriceHistory.objects.select_related('instrument')
    serializer_class = PriceHistorySerializer
    filterset_class = PriceHistoryFilter
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    ordering = ['-recorded_at']

    def get_queryset(self):
        return super().get_queryset().filter(
            instrument__in=visible_instruments(self.request.user)
        )


class PriceAlertViewSet(viewsets.ModelViewSet):
    """
    API endpoint for the user's own price alerts.
    """
    serializer_class = PriceAlertSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['is_active', 'instrument']
    ordering = ['-created_at']

    def get_queryset(self):
        return PriceAlert.objects.filter(user=self.request.user).select_related('instrument')

    def perform_create(self, serializer):
        alert = serializer.save(user=self.request.user)
        logger.info('price_alert_created', alert_id=alert.pk, user_id=self.request.user.pk)

