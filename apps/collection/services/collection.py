"""
Personal collection management.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import structlog
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.catalog.models import Instrument
from apps.core.context import ActionContext
from apps.core.errors import NotFoundError, ValidationError
from apps.collection.models import CollectionItem

logger = structlog.get_logger(__name__)

ACQUISITION_FIELDS = {
    'currency': 'acquisition_currency',
    'seller': 'acquisition_seller',
    'source': 'acquisition_source',
}


def _parse_date(value, label):
    if value in (None, ''):
        return None
    parsed = parse_date(str(value)[:10])
    if parsed is None:
        raise ValidationError(f'{label} no es una fecha válida')
    return parsed


def _parse_price(value, label):
    if value in (None, ''):
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f'{label} no es un número válido')
    if price < 0:
        raise ValidationError(f'{label} no puede ser negativo')
    return price


def _choice(value, choices, label):
    if value not in dict(choices):
        raise ValidationError(f'{label} inválido: {value}')
    return value


class CollectionService:
    """
    Actions over the authenticated user's collection.
    Items owned by another user behave exactly like missing ones.
    """

    @staticmethod
    def get_owned_item(ctx: ActionContext, item_id) -> CollectionItem:
        item = CollectionItem.objects.select_related('instrument').filter(
            pk=item_id, user_id=ctx.user_id
        ).first()
        if item is None:
            raise NotFoundError('Elemento de colección')
        return item

    @staticmethod
    def list_items(ctx: ActionContext) -> List[Dict[str, Any]]:
        items = CollectionItem.objects.filter(user_id=ctx.user_id).select_related('instrument')
        return [item.to_dict() for item in items]

    @staticmethod
    def add_item(ctx: ActionContext, instrument_id) -> CollectionItem:
        """
        Add a catalog instrument to the collection.

        The item starts as ``active`` with today's acquisition date.
        """
        visible = Q(status=Instrument.STATUS_PUBLISHED) | Q(created_by_id=ctx.user_id)
        queryset = Instrument.objects.all() if ctx.is_editor else Instrument.objects.filter(visible)
        try:
            instrument = queryset.filter(pk=int(instrument_id)).first()
        except (TypeError, ValueError):
            instrument = None
        if instrument is None:
            raise NotFoundError('Instrumento')

        item = CollectionItem.objects.create(
            user_id=ctx.user_id,
            instrument=instrument,
            status='active',
            acquisition_date=timezone.localdate(),
        )
        logger.info('collection_item_added', item_id=item.pk, instrument_id=instrument.pk, user_id=ctx.user_id)
        return item

    @staticmethod
    def update_item(ctx: ActionContext, item_id, data: Dict[str, Any]) -> CollectionItem:
        """
        Update the personal data of an item.

        Args:
            data: Any of status, condition, serial_number, custom_notes,
                acquisition {date, price, currency, seller, source} and
                sale {date, price, buyer}
        """
        item = CollectionService.get_owned_item(ctx, item_id)

        if 'status' in data:
            item.status = _choice(data['status'], CollectionItem.STATUS_CHOICES, 'Estado')
        if 'condition' in data:
            item.condition = _choice(data['condition'], CollectionItem.CONDITION_CHOICES, 'Condición')
        if 'serial_number' in data:
            item.serial_number = str(data['serial_number'] or '').strip()
        if 'custom_notes' in data:
            item.custom_notes = str(data['custom_notes'] or '')

        acquisition = data.get('acquisition')
        if isinstance(acquisition, dict):
            if 'date' in acquisition:
                item.acquisition_date = _parse_date(acquisition['date'], 'La fecha de adquisición')
            if 'price' in acquisition:
                item.acquisition_price = _parse_price(acquisition['price'], 'El precio de adquisición')
            for key, field_name in ACQUISITION_FIELDS.items():
                if key in acquisition:
                    setattr(item, field_name, str(acquisition[key] or '').strip())
            if not item.acquisition_currency:
                item.acquisition_currency = 'EUR'

        sale = data.get('sale')
        if isinstance(sale, dict):
            if 'date' in sale:
                item.sale_date = _parse_date(sale['date'], 'La fecha de venta')
            if 'price' in sale:
                item.sale_price = _parse_price(sale['price'], 'El precio de venta')
            if 'buyer' in sale:
                item.sale_buyer = str(sale['buyer'] or '').strip()

        item.full_clean(exclude=['user', 'instrument'])
        item.save()
        logger.info('collection_item_updated', item_id=item.pk, user_id=ctx.user_id)
        return item

    @staticmethod
    def remove_item(ctx: ActionContext, item_id) -> None:
        item = CollectionService.get_owned_item(ctx, item_id)
        item.delete()
        logger.info('collection_item_removed', item_id=item_id, user_id=ctx.user_id)
