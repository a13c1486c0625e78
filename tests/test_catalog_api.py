"""Tests for the catalog REST API."""

import pytest
from django.urls import reverse

from apps.catalog.models import Instrument, PriceAlert
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db


def _ids(response):
    return {row['id'] for row in response.data['results']}


class TestInstrumentVisibility:

    def test_anonymous_sees_only_published(self, api_client, make_instrument, user):
        published = make_instrument()
        draft = make_instrument(status=Instrument.STATUS_DRAFT, created_by=user)

        response = api_client.get(reverse('instrument-list'))

        assert response.status_code == 200
        assert published.pk in _ids(response)
        assert draft.pk not in _ids(response)

    def test_creator_sees_own_drafts(self, user_client, make_instrument, user, other_user):
        own = make_instrument(status=Instrument.STATUS_DRAFT, created_by=user)
        foreign = make_instrument(status=Instrument.STATUS_PENDING, created_by=other_user)

        ids = _ids(user_client.get(reverse('instrument-list')))

        assert own.pk in ids
        assert foreign.pk not in ids

    def test_editor_sees_everything(self, editor_client, make_instrument, other_user):
        pending = make_instrument(status=Instrument.STATUS_PENDING, created_by=other_user)

        assert pending.pk in _ids(editor_client.get(reverse('instrument-list')))

    def test_hidden_instrument_is_not_found(self, api_client, make_instrument, user):
        draft = make_instrument(status=Instrument.STATUS_DRAFT, created_by=user)

        response = api_client.get(reverse('instrument-detail', args=[draft.pk]))

        assert response.status_code == 404

    def test_list_filters_by_brand(self, api_client, make_instrument):
        roland = make_instrument(brand='Roland', model='Juno-60')
        make_instrument(brand='Moog', model='Minimoog')

        response = api_client.get(reverse('instrument-list'), {'brand': 'roland'})

        assert _ids(response) == {roland.pk}


class TestInstrumentWrites:

    payload = {
        'type': 'synthesizer',
        'brand': 'Sequential',
        'model': 'Prophet-5',
        'description': 'Five voice polysynth',
        'specs': [{'category': 'Voices', 'label': 'Polyphony', 'value': '5'}],
        'websites': [{'url': 'https://sequential.com'}],
        'generic_images': ['https://img.example.com/p5.jpg'],
    }

    def test_normal_user_cannot_create(self, user_client):
        response = user_client.post(reverse('instrument-list'), self.payload, format='json')

        assert response.status_code == 403

    def test_editor_creates_instrument(self, editor_client, editor):
        response = editor_client.post(reverse('instrument-list'), self.payload, format='json')

        assert response.status_code == 201
        instrument = Instrument.objects.get(pk=response.data['id'])
        assert instrument.created_by == editor
        assert instrument.websites == [{'url': 'https://sequential.com', 'is_primary': False}]

    def test_editor_creation_starts_as_draft(self, editor_client):
        payload = dict(self.payload, status=Instrument.STATUS_PUBLISHED)

        response = editor_client.post(reverse('instrument-list'), payload, format='json')

        assert response.status_code == 201
        assert Instrument.objects.get(pk=response.data['id']).status == Instrument.STATUS_DRAFT

    def test_status_cannot_be_patched_past_moderation(self, editor_client, make_instrument, user):
        pending = make_instrument(status=Instrument.STATUS_PENDING, created_by=user)

        response = editor_client.patch(
            reverse('instrument-detail', args=[pending.pk]),
            {'status': Instrument.STATUS_PUBLISHED, 'version': 'Rev 2'},
            format='json',
        )

        assert response.status_code == 200
        pending.refresh_from_db()
        assert pending.status == Instrument.STATUS_PENDING
        assert pending.version == 'Rev 2'
        assert not Notification.objects.exists()

    def test_invalid_image_url_is_rejected(self, editor_client):
        payload = dict(self.payload, generic_images=['not a url'])

        response = editor_client.post(reverse('instrument-list'), payload, format='json')

        assert response.status_code == 400
        assert 'URL de imagen inválida' in str(response.data['generic_images'])

    def test_missing_brand_message(self, editor_client):
        payload = dict(self.payload, brand='')

        response = editor_client.post(reverse('instrument-list'), payload, format='json')

        assert response.status_code == 400
        assert response.data['brand'] == ['La marca es obligatoria']

    def test_parent_cannot_be_own_variant(self, editor_client, make_instrument):
        base = make_instrument(model='Base')
        variant = make_instrument(model='Variant', parent=base)

        response = editor_client.patch(
            reverse('instrument-detail', args=[base.pk]), {'parent': variant.pk}, format='json'
        )

        assert response.status_code == 400
        assert 'parent' in response.data


class TestEffectiveRecord:

    def test_retrieve_returns_merged_variant(self, api_client, make_instrument):
        base = make_instrument(
            brand='Roland', model='Juno-106', description='Six voice polysynth',
            generic_images=['https://img.example.com/juno.jpg'],
        )
        variant = make_instrument(
            brand='Roland', model='Juno-106S', parent=base, variant_label='S',
        )

        response = api_client.get(reverse('instrument-detail', args=[variant.pk]))

        assert response.status_code == 200
        assert response.data['id'] == variant.pk
        assert response.data['description'] == 'Six voice polysynth'
        assert response.data['generic_images'] == ['https://img.example.com/juno.jpg']
        assert [h['id'] for h in response.data['_hierarchy']] == [base.pk]

    def test_raw_returns_stored_record(self, api_client, make_instrument):
        base = make_instrument(model='Juno-60', description='Analog')
        variant = make_instrument(model='Juno-60 MIDI', parent=base)

        response = api_client.get(reverse('instrument-raw', args=[variant.pk]))

        assert response.status_code == 200
        assert response.data['description'] == ''
        assert response.data['parent'] == base.pk

    def test_variants_hide_unpublished(self, api_client, make_instrument):
        base = make_instrument(model='DX7')
        visible = make_instrument(model='DX7 II', parent=base)
        make_instrument(model='DX7 S', parent=base, status=Instrument.STATUS_DRAFT)

        response = api_client.get(reverse('instrument-variants', args=[base.pk]))

        assert [row['id'] for row in response.data] == [visible.pk]


class TestModeration:

    def test_creator_submits_draft(self, user_client, make_instrument, user):
        draft = make_instrument(status=Instrument.STATUS_DRAFT, created_by=user)

        response = user_client.post(reverse('instrument-submit', args=[draft.pk]))

        assert response.status_code == 200
        draft.refresh_from_db()
        assert draft.status == Instrument.STATUS_PENDING

    def test_only_drafts_can_be_submitted(self, user_client, make_instrument, user):
        pending = make_instrument(status=Instrument.STATUS_PENDING, created_by=user)

        response = user_client.post(reverse('instrument-submit', args=[pending.pk]))

        assert response.status_code == 400

    def test_normal_user_cannot_approve(self, user_client, make_instrument, user):
        pending = make_instrument(status=Instrument.STATUS_PENDING, created_by=user)

        response = user_client.post(reverse('instrument-approve', args=[pending.pk]))

        assert response.status_code == 403

    def test_admin_approval_publishes_and_notifies(self, catalog_admin_client, make_instrument, user):
        pending = make_instrument(status=Instrument.STATUS_PENDING, created_by=user)

        response = catalog_admin_client.post(reverse('instrument-approve', args=[pending.pk]))

        assert response.status_code == 200
        pending.refresh_from_db()
        assert pending.status == Instrument.STATUS_PUBLISHED
        notification = Notification.objects.get(user=user)
        assert notification.type == 'system'
        assert notification.data['status'] == Instrument.STATUS_PUBLISHED

    def test_rejection_carries_reason(self, catalog_admin_client, make_instrument, user):
        pending = make_instrument(status=Instrument.STATUS_PENDING, created_by=user)

        response = catalog_admin_client.post(
            reverse('instrument-reject', args=[pending.pk]), {'reason': 'Duplicado'}, format='json'
        )

        assert response.status_code == 200
        assert Notification.objects.get(user=user).data['reason'] == 'Duplicado'


class TestPriceAlerts:

    def test_alerts_are_private(self, client_for, user, other_user):
        PriceAlert.objects.create(user=other_user, query='Korg MS-20')
        client = client_for(user)

        created = client.post(
            reverse('price-alert-list'), {'query': 'Roland TB-303', 'target_price': '1500.00'}, format='json'
        )
        listed = client.get(reverse('price-alert-list'))

        assert created.status_code == 201
        assert [row['query'] for row in listed.data['results']] == ['Roland TB-303']

    def test_anonymous_cannot_list_alerts(self, api_client):
        assert api_client.get(reverse('price-alert-list')).status_code == 403
