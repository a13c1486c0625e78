"""
Shared pytest fixtures.

Provides users for every role, authenticated clients and factories for
catalog instruments and collection items.
"""

import itertools

import pytest
from rest_framework.test import APIClient

from apps.catalog.models import Instrument
from apps.catalog.services.market import MarketListing
from apps.collection.models import CollectionItem
from apps.core.context import ROLE_ADMIN, ROLE_EDITOR, ROLE_NORMAL, ROLE_SUPEREDITOR


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_settings(settings, tmp_path):
    """Keep uploads in a temp dir and pin every external credential."""
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    settings.CRON_SECRET = 'test-cron-secret'
    settings.REVERB_API_TOKEN = ''
    settings.VAPID_PUBLIC_KEY = 'test-public-key'
    settings.VAPID_PRIVATE_KEY = 'test-private-key'
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    return settings


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def make_user(db, django_user_model):
    counter = itertools.count(1)

    def factory(role=ROLE_NORMAL, username=None, **kwargs):
        username = username or f'{role}-{next(counter)}'
        return django_user_model.objects.create_user(
            username=username, password='secret-pass', role=role, **kwargs
        )
    return factory


@pytest.fixture
def user(make_user):
    return make_user(username='collector')


@pytest.fixture
def other_user(make_user):
    return make_user(username='another-collector')


@pytest.fixture
def editor(make_user):
    return make_user(role=ROLE_EDITOR, username='editor')


@pytest.fixture
def supereditor(make_user):
    return make_user(role=ROLE_SUPEREDITOR, username='supereditor')


@pytest.fixture
def catalog_admin(make_user):
    return make_user(role=ROLE_ADMIN, username='catalog-admin')


# =============================================================================
# Clients
# =============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    """Return a client logged in as the given user."""
    def factory(user):
        client = APIClient()
        client.force_login(user)
        return client
    return factory


@pytest.fixture
def user_client(client_for, user):
    return client_for(user)


@pytest.fixture
def editor_client(client_for, editor):
    return client_for(editor)


@pytest.fixture
def catalog_admin_client(client_for, catalog_admin):
    return client_for(catalog_admin)


# =============================================================================
# Catalog and collection
# =============================================================================

@pytest.fixture
def make_instrument(db):
    counter = itertools.count(1)

    def factory(**kwargs):
        n = next(counter)
        fields = {
            'type': 'synthesizer',
            'brand': 'Korg',
            'model': f'MS-{n}',
            'status': Instrument.STATUS_PUBLISHED,
        }
        fields.update(kwargs)
        return Instrument.objects.create(**fields)
    return factory


@pytest.fixture
def make_collection_item(db):
    def factory(user, instrument, **kwargs):
        return CollectionItem.objects.create(user=user, instrument=instrument, **kwargs)
    return factory


# =============================================================================
# Marketplace
# =============================================================================

class FakeMarketClient:
    """Stands in for ReverbClient, answering every search with fixed listings."""

    def __init__(self, listings=None, error=None):
        self.listings = listings or []
        self.error = error
        self.queries = []

    def search_listings(self, query, per_page=10):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.listings)


def listing(title, price, currency='EUR', **kwargs):
    return MarketListing(
        source='reverb',
        id=kwargs.pop('id', title),
        title=title,
        price=price,
        currency=currency,
        **kwargs
    )


@pytest.fixture
def fake_market():
    return FakeMarketClient


@pytest.fixture
def make_listing():
    return listing
