"""
Showrooms: shareable displays built from a user's collection.
"""

import re
import secrets
from typing import Any, Dict, List, Optional

import structlog
from django.db import IntegrityError, transaction
from django.db.models import F, Max

from apps.core.context import ActionContext
from apps.core.errors import NotFoundError, ValidationError
from apps.collection.models import CollectionItem, Showroom, ShowroomItem

logger = structlog.get_logger(__name__)

SLUG_ATTEMPTS = 10

PRIVACY_FLAGS = ('show_prices', 'show_serial_numbers', 'show_acquisition_date', 'show_status')
EDITABLE_TEXT_FIELDS = ('name', 'description', 'cover_image')

_NON_ALNUM_RUN = re.compile(r'[^a-z0-9]+')


def slug_base(name: str) -> str:
    """Lowercase name with every run of other characters collapsed to '-'."""
    return _NON_ALNUM_RUN.sub('-', name.lower())


def generate_slug(name: str) -> str:
    """
    Slug for a new showroom: the slug base plus a 4-digit suffix,
    retried while it collides with an existing showroom.
    """
    base = slug_base(name)
    for _ in range(SLUG_ATTEMPTS):
        slug = f'{base}-{secrets.randbelow(10000):04d}'
        if not Showroom.objects.filter(slug=slug).exists():
            return slug
    return f'{base}-{secrets.token_hex(4)}'


def showroom_dict(showroom: Showroom) -> Dict[str, Any]:
    return {
        'id': showroom.pk,
        'name': showroom.name,
        'slug': showroom.slug,
        'description': showroom.description,
        'cover_image': showroom.cover_image,
        'theme': showroom.theme,
        'status': showroom.status,
        'visibility': showroom.visibility,
        'kiosk_enabled': showroom.kiosk_enabled,
        'privacy': {flag: getattr(showroom, flag) for flag in PRIVACY_FLAGS},
        'stats': {'views': showroom.views, 'likes': showroom.likes},
        'item_count': showroom.items.count(),
        'created_at': showroom.created_at.isoformat() if showroom.created_at else None,
    }


def _public_item(entry: ShowroomItem, showroom: Showroom) -> Dict[str, Any]:
    """Item payload with the fields hidden by the showroom's privacy flags removed."""
    item = entry.collection_item
    payload = {
        'id': entry.pk,
        'display_order': entry.display_order,
        'public_note': entry.public_note,
        'placard_text': entry.placard_text,
        'attribution': entry.attribution,
        'instrument': item.instrument_summary(),
        'condition': item.condition,
    }
    if showroom.show_prices:
        payload['price'] = str(item.acquisition_price) if item.acquisition_price is not None else None
        payload['currency'] = item.acquisition_currency
    if showroom.show_serial_numbers:
        payload['serial_number'] = item.serial_number
    if showroom.show_acquisition_date:
        payload['acquisition_date'] = item.acquisition_date.isoformat() if item.acquisition_date else None
    if showroom.show_status:
        payload['status'] = item.status
    return payload


class ShowroomService:
    """
    Showroom actions. Owners manage their showrooms; anyone may view a
    published public or unlisted showroom through its slug.
    """

    @staticmethod
    def get_owned(ctx: ActionContext, showroom_id) -> Showroom:
        showroom = Showroom.objects.filter(pk=showroom_id, user_id=ctx.user_id).first()
        if showroom is None:
            raise NotFoundError('Showroom')
        return showroom

    @staticmethod
    def list_own(ctx: ActionContext) -> List[Dict[str, Any]]:
        return [showroom_dict(s) for s in Showroom.objects.filter(user_id=ctx.user_id)]

    @staticmethod
    def create(ctx: ActionContext, name: Optional[str], description: str = '') -> Showroom:
        """
        Create an empty draft showroom, publicly visible once published.
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError('El nombre es obligatorio')

        for _ in range(SLUG_ATTEMPTS):
            try:
                with transaction.atomic():
                    showroom = Showroom.objects.create(
                        user_id=ctx.user_id,
                        name=name,
                        description=description or '',
                        slug=generate_slug(name),
                        theme='minimal',
                        status='draft',
                        visibility='public',
                        kiosk_enabled=True,
                    )
                break
            except IntegrityError:
                # Slug taken between the check and the insert
                continue
        else:
            raise ValidationError('No se pudo generar un identificador único')

        logger.info('showroom_created', showroom_id=showroom.pk, slug=showroom.slug, user_id=ctx.user_id)
        return showroom

    @staticmethod
    def delete(ctx: ActionContext, showroom_id) -> None:
        showroom = ShowroomService.get_owned(ctx, showroom_id)
        showroom.delete()
        logger.info('showroom_deleted', showroom_id=showroom_id, user_id=ctx.user_id)

    @staticmethod
    def update(ctx: ActionContext, showroom_id, data: Dict[str, Any]) -> Showroom:
        """
        Update showroom settings.

        Args:
            data: Any of name, description, cover_image, theme, status,
                visibility, kiosk_enabled and privacy {show_prices,
                show_serial_numbers, show_acquisition_date, show_status}
        """
        showroom = ShowroomService.get_owned(ctx, showroom_id)

        for field_name in EDITABLE_TEXT_FIELDS:
            if field_name in data:
                setattr(showroom, field_name, str(data[field_name] or '').strip())
        if 'name' in data and not showroom.name:
            raise ValidationError('El nombre es obligatorio')

        for field_name, choices in (
            ('theme', Showroom.THEME_CHOICES),
            ('status', Showroom.STATUS_CHOICES),
            ('visibility', Showroom.VISIBILITY_CHOICES),
        ):
            if field_name in data:
                if data[field_name] not in dict(choices):
                    raise ValidationError(f'Valor inválido para {field_name}: {data[field_name]}')
                setattr(showroom, field_name, data[field_name])

        if 'kiosk_enabled' in data:
            showroom.kiosk_enabled = bool(data['kiosk_enabled'])

        privacy = data.get('privacy')
        if isinstance(privacy, dict):
            for flag in PRIVACY_FLAGS:
                if flag in privacy:
                    setattr(showroom, flag, bool(privacy[flag]))

        showroom.full_clean(exclude=['user', 'slug'])
        showroom.save()
        logger.info('showroom_updated', showroom_id=showroom.pk, user_id=ctx.user_id)
        return showroom

    @staticmethod
    def add_item(ctx: ActionContext, showroom_id, collection_item_id, data: Optional[Dict[str, Any]] = None) -> ShowroomItem:
        """
        Place one of the user's own collection items at the end of a showroom.
        """
        data = data or {}
        showroom = ShowroomService.get_owned(ctx, showroom_id)
        item = CollectionItem.objects.filter(pk=collection_item_id, user_id=ctx.user_id).first()
        if item is None:
            raise NotFoundError('Elemento de colección')
        if showroom.items.filter(collection_item=item).exists():
            raise ValidationError('El elemento ya está en el showroom')

        last_order = showroom.items.aggregate(last=Max('display_order'))['last']
        entry = ShowroomItem.objects.create(
            showroom=showroom,
            collection_item=item,
            public_note=str(data.get('public_note') or ''),
            placard_text=str(data.get('placard_text') or ''),
            attribution=str(data.get('attribution') or '')[:200],
            display_order=0 if last_order is None else last_order + 1,
        )
        logger.info('showroom_item_added', showroom_id=showroom.pk, item_id=item.pk)
        return entry

    @staticmethod
    def remove_item(ctx: ActionContext, showroom_id, collection_item_id) -> None:
        showroom = ShowroomService.get_owned(ctx, showroom_id)
        deleted, _ = showroom.items.filter(collection_item_id=collection_item_id).delete()
        if not deleted:
            raise NotFoundError('Elemento de showroom')
        logger.info('showroom_item_removed', showroom_id=showroom.pk, item_id=collection_item_id)

    @staticmethod
    def get_public(ctx: ActionContext, slug: str) -> Dict[str, Any]:
        """
        Public payload of a showroom.

        Published public or unlisted showrooms are visible to anyone;
        anything else only to its owner. Views by anyone but the owner
        increment the view counter.
        """
        showroom = Showroom.objects.select_related('user').filter(slug=slug).first()
        if showroom is None:
            raise NotFoundError('Showroom')

        is_owner = ctx.is_authenticated and showroom.user_id == ctx.user_id
        if not showroom.is_publicly_visible and not is_owner:
            raise NotFoundError('Showroom')

        if not is_owner:
            Showroom.objects.filter(pk=showroom.pk).update(views=F('views') + 1)
            showroom.refresh_from_db(fields=['views'])

        entries = showroom.items.select_related('collection_item__instrument')
        payload = {
            'id': showroom.pk,
            'slug': showroom.slug,
            'name': showroom.name,
            'description': showroom.description,
            'cover_image': showroom.cover_image,
            'theme': showroom.theme,
            'kiosk_enabled': showroom.kiosk_enabled,
            'owner': {'id': showroom.user_id, 'username': showroom.user.username},
            'stats': {'views': showroom.views, 'likes': showroom.likes},
            'is_owner': is_owner,
            'items': [_public_item(entry, showroom) for entry in entries],
        }
        return payload
