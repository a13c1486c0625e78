"""
Market intelligence for catalog instruments.

Listings are fetched from the Reverb API, cleaned up (accessories, cheap
parts and price outliers removed) and reduced to min/avg/max metrics.
Two batch jobs run on top of it: the weekly market value sync and the
price alert checks.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

import httpx
import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from apps.catalog.models import Instrument, PriceAlert, PriceHistory
from apps.core.errors import ExternalServiceError
from apps.notifications.services import create_notification

logger = structlog.get_logger(__name__)

# =============================================================================
# Constants
# =============================================================================

MARKET_STALE_AFTER = timedelta(days=6)
ALERT_STALE_AFTER = timedelta(hours=24)
PRICE_FLOOR = 20
OUTLIER_MIN_LISTINGS = 4
SYNC_SOURCE = 'Weekly Auto-Sync'

ACCESSORY_KEYWORDS = [
    'cable', 'patch', 'patching', 'decksaver', 'manual', 'skin', 'sticker',
    'dust cover', 'replacement', 'button', 'knob', 'rack ear',
    'power supply', 'adapter', 'transformador',
]

_NON_ALNUM = re.compile(r'[^a-z0-9]')


@dataclass
class MarketListing:
    """A marketplace listing reduced to the fields the metrics need."""
    source: str
    id: str
    title: str
    price: float
    currency: str
    url: str = ''
    image_url: str = ''
    condition: str = ''
    published_at: Optional[datetime] = None

    def to_dict(self):
        return {
            'source': self.source,
            'id': self.id,
            'title': self.title,
            'price': self.price,
            'currency': self.currency,
            'url': self.url,
            'image_url': self.image_url,
            'condition': self.condition,
        }


# =============================================================================
# Reverb client
# =============================================================================

class ReverbClient:
    """Thin client for the public Reverb listings API."""

    def __init__(self, token=None, base_url=None, timeout=None, transport=None):
        self.token = settings.REVERB_API_TOKEN if token is None else token
        self.base_url = (base_url or settings.REVERB_API_BASE).rstrip('/')
        self.timeout = timeout or settings.MARKET_HTTP_TIMEOUT
        self.transport = transport

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not self.token:
            logger.warning('reverb_token_missing', endpoint=endpoint)
            return None

        headers = {
            'Authorization': f'Bearer {self.token}',
            'Accept-Version': '3.0',
            'Content-Type': 'application/hal+json',
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(f'{self.base_url}{endpoint}', params=params, headers=headers)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 401:
                message = 'Token de API inválido'
            elif status == 429:
                message = 'Límite de peticiones excedido'
            else:
                message = f'HTTP {status}'
            raise ExternalServiceError('Reverb', message)
        except httpx.HTTPError as exc:
            raise ExternalServiceError('Reverb', str(exc))

    def search_listings(self, query: str, per_page: int = 10) -> List[MarketListing]:
        """
        Search live listings, cheapest first.

        Returns:
            List of MarketListing; empty when no token is configured
        """
        data = self._get('/listings', {
            'query': query,
            'state': 'listed',
            'per_page': str(per_page),
            'sort': 'price|asc',
        })
        if not data:
            return []
        return [
            listing for listing in (self._parse_listing(raw) for raw in data.get('listings') or [])
            if listing is not None
        ]

    @staticmethod
    def _parse_listing(raw: Dict[str, Any]) -> Optional[MarketListing]:
        price = raw.get('price') or {}
        try:
            amount = float(price.get('amount'))
        except (TypeError, ValueError):
            return None

        photos = raw.get('photos') or []
        image_url = ''
        if photos:
            image_url = photos[0].get('_links', {}).get('large_crop', {}).get('href', '')

        published_at = None
        if raw.get('published_at'):
            try:
                published_at = datetime.fromisoformat(raw['published_at'].replace('Z', '+00:00'))
            except ValueError:
                published_at = None
            if published_at is not None and published_at.tzinfo is None:
                published_at = published_at.replace(tzinfo=dt_timezone.utc)

        return MarketListing(
            source='reverb',
            id=str(raw.get('id', '')),
            title=raw.get('title') or '',
            price=amount,
            currency=price.get('currency') or 'EUR',
            url=raw.get('_links', {}).get('web', {}).get('href', ''),
            image_url=image_url,
            condition=(raw.get('condition') or {}).get('display_name', ''),
            published_at=published_at,
        )


# =============================================================================
# Listing analysis
# =============================================================================

def _normalize(text: str) -> str:
    return _NON_ALNUM.sub('', text.lower())


def is_accessory(title: str) -> bool:
    """
    True when the listing is primarily an accessory ("Case for MS-20",
    "Cable ..."), not when it merely mentions one ("MS-20 with case").
    """
    title = title.lower()
    leading_words = title.split()[:3]
    for keyword in ACCESSORY_KEYWORDS:
        keyword_words = keyword.split()
        if any(word in keyword_words for word in leading_words):
            return True
        if f'{keyword} for' in title or f'{keyword} para' in title:
            return True
    return False


def matches_query(title: str, query: str) -> bool:
    """Every query word must appear in the title, ignoring punctuation."""
    lowered = title.lower()
    normalized_title = _normalize(title)
    for word in query.lower().split():
        if len(word) <= 1:
            continue
        normalized_word = _normalize(word)
        if len(normalized_word) <= 1:
            continue
        if word not in lowered and normalized_word not in normalized_title:
            return False
    return True


def remove_outliers(listings: List[MarketListing]) -> List[MarketListing]:
    """Interquartile range filter, applied only with enough listings."""
    if len(listings) < OUTLIER_MIN_LISTINGS:
        return listings

    prices = sorted(listing.price for listing in listings)
    q1 = prices[int(len(prices) * 0.25)]
    q3 = prices[int(len(prices) * 0.75)]
    iqr = q3 - q1
    low, high = q1 - 1.5 * iqr, q3 + 1.5 * iqr
    return [listing for listing in listings if low <= listing.price <= high]


def filter_listings(listings: List[MarketListing], query: str) -> List[MarketListing]:
    """
    Drop accessories, listings under the price floor, listings that do not
    match the query and price outliers. Newest listings come first.
    """
    kept = [
        listing for listing in listings
        if not is_accessory(listing.title)
        and matches_query(listing.title, query)
        and listing.price >= PRICE_FLOOR
    ]
    kept = remove_outliers(kept)
    epoch = datetime.min.replace(tzinfo=dt_timezone.utc)
    return sorted(kept, key=lambda listing: listing.published_at or epoch, reverse=True)


def _round(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def calculate_metrics(listings: List[MarketListing]) -> Optional[Dict[str, Any]]:
    """
    Args:
        listings: Already filtered listings

    Returns:
        Dict with rounded min, max and avg, currency and count; None when
        there is no positive price to work with
    """
    prices = sorted(listing.price for listing in listings if listing.price > 0)
    if not prices:
        return None

    return {
        'min': _round(prices[0]),
        'max': _round(prices[-1]),
        'avg': _round(sum(prices) / len(prices)),
        'currency': listings[0].currency,
        'count': len(listings),
    }


# =============================================================================
# Batch jobs
# =============================================================================

class MarketDataService:
    """
    Market value sync and price alert checks.
    """

    @staticmethod
    def fetch_listings(query: str, client: Optional[ReverbClient] = None) -> List[MarketListing]:
        client = client or ReverbClient()
        return filter_listings(client.search_listings(query), query)

    @staticmethod
    def get_stale_instruments(limit: int = 20):
        """Published instruments never valued or valued over six days ago."""
        threshold = timezone.now() - MARKET_STALE_AFTER
        return Instrument.objects.filter(
            Q(market_updated_at__isnull=True) | Q(market_updated_at__lt=threshold),
            status=Instrument.STATUS_PUBLISHED,
        ).order_by(F('market_updated_at').asc(nulls_first=True), 'pk')[:limit]

    @staticmethod
    @transaction.atomic
    def apply_metrics(instrument: Instrument, metrics: Dict[str, Any], source: str = SYNC_SOURCE,
                      platform: str = 'reverb') -> PriceHistory:
        """
        Store metrics on the instrument and record a market snapshot.

        Returns:
            The PriceHistory snapshot created
        """
        previous_value = instrument.market_value

        instrument.market_value = metrics['avg']
        instrument.market_min = metrics['min']
        instrument.market_max = metrics['max']
        instrument.market_currency = metrics['currency']
        instrument.market_updated_at = timezone.now()
        instrument.market_source = source
        # Snapshot below replaces the signal's generic one
        instrument._skip_price_snapshot = True
        instrument.save(update_fields=[
            'market_value', 'market_min', 'market_max', 'market_currency',
            'market_updated_at', 'market_source', 'updated_at',
        ])

        return PriceHistory.objects.create(
            instrument=instrument,
            source=platform,
            previous_value=previous_value,
            value=metrics['avg'],
            min_price=metrics['min'],
            max_price=metrics['max'],
            currency=metrics['currency'],
            listing_count=metrics['count'],
            notes=source,
        )

    @staticmethod
    def sync_batch(limit: int = 20, client: Optional[ReverbClient] = None) -> Dict[str, Any]:
        """
        Refresh market values for a batch of stale instruments.

        A failure on one instrument is recorded in its detail entry and
        the batch moves on.

        Args:
            limit: Maximum instruments processed
            client: Marketplace client, mostly for tests

        Returns:
            {'success': True, 'processedCount': n, 'details': [...]}
        """
        client = client or ReverbClient()
        instruments = list(MarketDataService.get_stale_instruments(limit))
        logger.info('market_sync_started', count=len(instruments))

        details = []
        for instrument in instruments:
            query = instrument.market_query
            entry = {'id': instrument.pk, 'name': query}
            try:
                listings = MarketDataService.fetch_listings(query, client)
                metrics = calculate_metrics(listings)
                if metrics:
                    platform = listings[0].source if listings else 'reverb'
                    MarketDataService.apply_metrics(instrument, metrics, platform=platform)
                    entry['success'] = True
                else:
                    entry.update(success=False, reason='No listings found')
            except Exception as exc:
                logger.exception('market_sync_item_failed', instrument_id=instrument.pk, query=query)
                entry.update(success=False, error=str(exc))
            details.append(entry)

        logger.info(
            'market_sync_finished',
            processed=len(details),
            updated=sum(1 for d in details if d['success']),
        )
        return {
            'success': True,
            'processedCount': len(details),
            'details': details,
        }

    @staticmethod
    def run_alert(alert: PriceAlert, client: Optional[ReverbClient] = None) -> Dict[str, Any]:
        """
        Check one price alert and notify its owner about deals.

        Deals are listings at or under the target price, or every listing
        when the alert has no target.

        Returns:
            Dict with listing and deal counts
        """
        listings = MarketDataService.fetch_listings(alert.query, client)
        if alert.target_price is None:
            deals = listings
        else:
            target = float(alert.target_price)
            deals = [listing for listing in listings if listing.price <= target]

        if deals:
            create_notification(alert.user, 'price_alert', {
                'alert_id': alert.pk,
                'query': alert.query,
                'target_price': str(alert.target_price) if alert.target_price is not None else None,
                'deal_count': len(deals),
                'deals': [deal.to_dict() for deal in deals[:5]],
            })

        PriceAlert.objects.filter(pk=alert.pk).update(
            last_checked=timezone.now(),
            trigger_count=F('trigger_count') + 1,
        )
        alert.refresh_from_db(fields=['last_checked', 'trigger_count'])

        logger.info('price_alert_checked', alert_id=alert.pk, listings=len(listings), deals=len(deals))
        return {'listings': len(listings), 'deals': len(deals)}

    @staticmethod
    def process_stale_alerts(batch_size: int = 5, client: Optional[ReverbClient] = None) -> Dict[str, Any]:
        """
        Run active alerts never checked or checked over 24 hours ago.

        Returns:
            {'success': True, 'processed': n, 'results': [...]}
        """
        client = client or ReverbClient()
        threshold = timezone.now() - ALERT_STALE_AFTER
        alerts = list(
            PriceAlert.objects.filter(
                Q(last_checked__isnull=True) | Q(last_checked__lt=threshold),
                is_active=True,
            ).select_related('user').order_by(F('last_checked').asc(nulls_first=True), 'pk')[:batch_size]
        )

        results = []
        for alert in alerts:
            try:
                outcome = MarketDataService.run_alert(alert, client)
                results.append({'id': alert.pk, 'success': True, **outcome})
            except Exception as exc:
                logger.exception('price_alert_failed', alert_id=alert.pk, query=alert.query)
                results.append({'id': alert.pk, 'success': False, 'error': str(exc)})

        return {
            'success': True,
            'processed': len(results),
            'results': results,
        }


def sync_market_data_batch(limit: int = 20, client: Optional[ReverbClient] = None):
    return MarketDataService.sync_batch(limit=limit, client=client)


def run_price_alert(alert: PriceAlert, client: Optional[ReverbClient] = None):
    return MarketDataService.run_alert(alert, client=client)


def process_stale_alerts(batch_size: int = 5, client: Optional[ReverbClient] = None):
    return MarketDataService.process_stale_alerts(batch_size=batch_size, client=client)
