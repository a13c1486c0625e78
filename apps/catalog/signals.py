"""
Django signals for the catalog app.
Handles automatic creation of market value snapshots.
"""

from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import Instrument, PriceHistory


@receiver(pre_save, sender=Instrument)
def track_market_value_changes(sender, instance, **kwargs):
    """
    Create a PriceHistory snapshot when an instrument's market value changes.

    Saves that record their own snapshot set ``_skip_price_snapshot``.
    """
    if getattr(instance, '_skip_price_snapshot', False):
        instance._skip_price_snapshot = False
        return

    if not instance.pk:
        # New instrument, no history to track
        return

    try:
        old_instance = Instrument.objects.only('market_value').get(pk=instance.pk)
    except Instrument.DoesNotExist:
        return

    if old_instance.market_value != instance.market_value:
        PriceHistory.objects.create(
            instrument=instance,
            source=instance.market_source or 'manual',
            previous_value=old_instance.market_value,
            value=instance.market_value,
            min_price=instance.market_min,
            max_price=instance.market_max,
            currency=instance.market_currency or 'EUR',
        )
