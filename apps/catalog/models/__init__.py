"""
Catalog models for the shared instrument catalog.

Model Hierarchy:
- Instrument: Catalog record; variants point to a base model through ``parent``
- PriceHistory: Market value snapshots per instrument
- PriceAlert: Saved marketplace searches owned by users
- MediaAsset: Uploaded images
"""

from .instrument import Instrument
from .price_history import PriceHistory
from .price_alert import PriceAlert
from .media import MediaAsset

__all__ = [
    'Instrument',
    'PriceHistory',
    'PriceAlert',
    'MediaAsset',
]
