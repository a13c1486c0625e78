"""Tests for market listing analysis and the market batch jobs."""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import httpx
import pytest
from django.utils import timezone

from apps.catalog.models import Instrument, PriceAlert, PriceHistory
from apps.catalog.services import process_stale_alerts, sync_market_data_batch
from apps.catalog.services.market import (
    ReverbClient,
    calculate_metrics,
    filter_listings,
    is_accessory,
    matches_query,
    remove_outliers,
)
from apps.core.errors import ExternalServiceError
from apps.notifications.models import Notification


# =============================================================================
# Listing analysis
# =============================================================================

class TestListingAnalysis:

    @pytest.mark.parametrize('title, expected', [
        ('Cable for Korg MS-20', True),
        ('Dust cover Roland Juno', True),
        ('Decksaver para Minilogue', True),
        ('Korg MS-20 with patch cables', False),
        ('Roland Juno-106 serviced', False),
    ])
    def test_accessory_detection(self, title, expected):
        assert is_accessory(title) is expected

    def test_query_matching_ignores_punctuation(self):
        assert matches_query('Korg MS20 Mini', 'Korg MS-20')
        assert not matches_query('Korg Minilogue', 'Korg MS-20')

    def test_outliers_removed(self, make_listing):
        listings = [make_listing(f'Juno {p}', p) for p in (100, 110, 120, 130, 5000)]

        kept = remove_outliers(listings)

        assert [listing.price for listing in kept] == [100, 110, 120, 130]

    def test_outliers_kept_with_few_listings(self, make_listing):
        listings = [make_listing('Juno', 100), make_listing('Juno', 5000)]

        assert remove_outliers(listings) == listings

    def test_filter_drops_noise_and_sorts_newest_first(self, make_listing):
        older = make_listing('Korg MS-20', 500, published_at=datetime(2026, 1, 1, tzinfo=dt_timezone.utc))
        newer = make_listing('Korg MS-20 mini', 450, published_at=datetime(2026, 3, 1, tzinfo=dt_timezone.utc))
        undated = make_listing('Korg MS-20 kit', 480)
        listings = [
            older,
            make_listing('Cable for Korg MS-20', 30),
            make_listing('Korg MS-20 knob', 15),
            make_listing('Korg Volca', 150),
            newer,
            undated,
        ]

        assert filter_listings(listings, 'Korg MS-20') == [newer, older, undated]

    def test_metrics_are_rounded(self, make_listing):
        metrics = calculate_metrics([make_listing('a', 100), make_listing('b', 201)])

        assert metrics == {
            'min': Decimal('100'),
            'max': Decimal('201'),
            'avg': Decimal('151'),
            'currency': 'EUR',
            'count': 2,
        }

    def test_metrics_need_listings(self):
        assert calculate_metrics([]) is None


# =============================================================================
# Reverb client
# =============================================================================

class TestReverbClient:

    def test_missing_token_skips_request(self):
        def handler(request):
            raise AssertionError('no request expected')

        client = ReverbClient(token='', base_url='https://api.test', transport=httpx.MockTransport(handler))

        assert client.search_listings('Korg MS-20') == []

    def test_parses_listings(self):
        seen = {}

        def handler(request):
            seen['auth'] = request.headers['Authorization']
            seen['params'] = dict(request.url.params)
            return httpx.Response(200, json={'listings': [
                {
                    'id': 10,
                    'title': 'Korg MS-20',
                    'price': {'amount': '450.00', 'currency': 'EUR'},
                    'condition': {'display_name': 'Very Good'},
                    'published_at': '2026-02-01T10:00:00Z',
                    '_links': {'web': {'href': 'https://reverb.com/item/10'}},
                    'photos': [{'_links': {'large_crop': {'href': 'https://img.test/10.jpg'}}}],
                },
                {'id': 11, 'title': 'No price', 'price': {}},
            ]})

        client = ReverbClient(token='tok', base_url='https://api.test', transport=httpx.MockTransport(handler))
        listings = client.search_listings('Korg MS-20')

        assert seen['auth'] == 'Bearer tok'
        assert seen['params']['query'] == 'Korg MS-20'
        assert seen['params']['sort'] == 'price|asc'
        assert len(listings) == 1
        found = listings[0]
        assert found.id == '10'
        assert found.price == 450.0
        assert found.url == 'https://reverb.com/item/10'
        assert found.image_url == 'https://img.test/10.jpg'
        assert found.condition == 'Very Good'
        assert found.published_at == datetime(2026, 2, 1, 10, 0, tzinfo=dt_timezone.utc)

    def test_rate_limit_is_an_external_error(self):
        client = ReverbClient(
            token='tok',
            base_url='https://api.test',
            transport=httpx.MockTransport(lambda request: httpx.Response(429)),
        )

        with pytest.raises(ExternalServiceError) as excinfo:
            client.search_listings('Korg MS-20')

        assert excinfo.value.status_code == 503
        assert 'Límite de peticiones excedido' in excinfo.value.message


# =============================================================================
# Batch jobs
# =============================================================================

@pytest.mark.django_db
class TestMarketSync:

    def _listings(self, make_listing):
        return [make_listing('Korg MS-20 synth', price) for price in (500, 600, 700)]

    def test_sync_updates_stale_instruments(self, make_instrument, make_listing, fake_market):
        instrument = make_instrument(brand='Korg', model='MS-20')
        client = fake_market(self._listings(make_listing))

        result = sync_market_data_batch(20, client=client)

        assert result == {
            'success': True,
            'processedCount': 1,
            'details': [{'id': instrument.pk, 'name': 'Korg MS-20', 'success': True}],
        }
        instrument.refresh_from_db()
        assert instrument.market_value == Decimal('600')
        assert instrument.market_min == Decimal('500')
        assert instrument.market_max == Decimal('700')
        assert instrument.market_source == 'Weekly Auto-Sync'
        assert instrument.market_updated_at is not None

        snapshot = PriceHistory.objects.get(instrument=instrument)
        assert snapshot.source == 'reverb'
        assert snapshot.previous_value is None
        assert snapshot.listing_count == 3

    def test_fresh_and_unpublished_instruments_are_skipped(self, make_instrument, fake_market):
        make_instrument(market_updated_at=timezone.now() - timedelta(days=1))
        make_instrument(status=Instrument.STATUS_DRAFT)
        client = fake_market()

        result = sync_market_data_batch(20, client=client)

        assert result['processedCount'] == 0
        assert client.queries == []

    def test_no_listings_and_failures_do_not_stop_batch(self, make_instrument, fake_market):
        make_instrument(brand='Korg', model='MS-20')
        make_instrument(brand='Moog', model='Minimoog')

        empty = sync_market_data_batch(20, client=fake_market())
        failing = sync_market_data_batch(20, client=fake_market(error=ExternalServiceError('Reverb', 'HTTP 500')))

        assert [d['reason'] for d in empty['details']] == ['No listings found', 'No listings found']
        assert failing['processedCount'] == 2
        assert all(not d['success'] and 'HTTP 500' in d['error'] for d in failing['details'])

    def test_manual_value_change_records_snapshot(self, make_instrument):
        instrument = make_instrument(market_value=Decimal('100'))

        instrument.market_value = Decimal('150')
        instrument.save()

        snapshot = PriceHistory.objects.get(instrument=instrument)
        assert snapshot.source == 'manual'
        assert snapshot.previous_value == Decimal('100')
        assert snapshot.price_difference == Decimal('50')


@pytest.mark.django_db
class TestPriceAlerts:

    def test_deals_notify_owner(self, user, make_listing, fake_market):
        alert = PriceAlert.objects.create(user=user, query='Korg MS-20', target_price=Decimal('550'))
        client = fake_market([make_listing('Korg MS-20 synth', price) for price in (500, 600, 700)])

        result = process_stale_alerts(5, client=client)

        assert result['processed'] == 1
        assert result['results'][0]['deals'] == 1
        notification = Notification.objects.get(user=user)
        assert notification.type == 'price_alert'
        assert notification.data['deal_count'] == 1
        assert notification.data['deals'][0]['price'] == 500
        alert.refresh_from_db()
        assert alert.trigger_count == 1
        assert alert.last_checked is not None

    def test_no_deals_no_notification(self, user, make_listing, fake_market):
        PriceAlert.objects.create(user=user, query='Korg MS-20', target_price=Decimal('100'))
        client = fake_market([make_listing('Korg MS-20 synth', 500)])

        process_stale_alerts(5, client=client)

        assert not Notification.objects.filter(user=user).exists()

    def test_recent_and_inactive_alerts_wait(self, user, fake_market):
        PriceAlert.objects.create(user=user, query='Recent', last_checked=timezone.now())
        PriceAlert.objects.create(user=user, query='Off', is_active=False)
        client = fake_market()

        result = process_stale_alerts(5, client=client)

        assert result == {'success': True, 'processed': 0, 'results': []}
