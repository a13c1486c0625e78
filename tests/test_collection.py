"""Tests for personal collection actions and exports."""

from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from apps.catalog.models import Instrument
from apps.collection.models import CollectionItem
from apps.collection.services.export import BOM, build_pdf

pytestmark = pytest.mark.django_db


class TestCollectionActions:

    def test_anonymous_is_refused(self, api_client):
        response = api_client.get(reverse('collection:items'))

        assert response.status_code == 401
        assert response.json() == {
            'success': False,
            'error': 'No autorizado: Inicia sesión para continuar',
        }

    def test_add_instrument(self, user_client, user, make_instrument):
        instrument = make_instrument(brand='Roland', model='TB-303')

        response = user_client.post(
            reverse('collection:items'), {'instrumentId': instrument.pk}, format='json'
        )

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        assert body['data']['instrument']['model'] == 'TB-303'
        item = CollectionItem.objects.get(user=user)
        assert item.status == 'active'
        assert item.acquisition_date == timezone.localdate()

    def test_add_requires_visible_instrument(self, user_client, make_instrument, other_user):
        hidden = make_instrument(status=Instrument.STATUS_DRAFT, created_by=other_user)

        response = user_client.post(reverse('collection:items'), {'instrumentId': hidden.pk}, format='json')

        assert response.status_code == 404
        assert response.json()['error'] == 'Instrumento no encontrado'

    def test_add_validates_payload(self, user_client):
        response = user_client.post(reverse('collection:items'), {'instrumentId': 'abc'}, format='json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('Error de validación:')

    def test_list_is_newest_first_and_own_only(self, user_client, user, other_user, make_instrument, make_collection_item):
        first = make_collection_item(user, make_instrument())
        second = make_collection_item(user, make_instrument())
        make_collection_item(other_user, make_instrument())

        response = user_client.get(reverse('collection:items'))

        assert [row['id'] for row in response.json()['data']] == [second.pk, first.pk]

    def test_update_item(self, user_client, user, make_instrument, make_collection_item):
        item = make_collection_item(user, make_instrument())

        response = user_client.patch(
            reverse('collection:item_detail', args=[item.pk]),
            {
                'status': 'repair',
                'condition': 'excellent',
                'serial_number': ' 123456 ',
                'custom_notes': 'New caps',
                'acquisition': {'date': '2024-05-01', 'price': '899.50', 'seller': 'Shop'},
            },
            format='json',
        )

        assert response.status_code == 200
        item.refresh_from_db()
        assert item.status == 'repair'
        assert item.condition == 'excellent'
        assert item.serial_number == '123456'
        assert item.acquisition_date == date(2024, 5, 1)
        assert item.acquisition_price == Decimal('899.50')
        assert item.acquisition_seller == 'Shop'
        assert item.acquisition_currency == 'EUR'

    @pytest.mark.parametrize('payload', [
        {'status': 'lost'},
        {'acquisition': {'price': '-5'}},
        {'acquisition': {'date': 'yesterday'}},
    ])
    def test_update_rejects_invalid_values(self, user_client, user, make_instrument, make_collection_item, payload):
        item = make_collection_item(user, make_instrument())

        response = user_client.patch(reverse('collection:item_detail', args=[item.pk]), payload, format='json')

        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_foreign_item_is_not_found(self, user_client, other_user, make_instrument, make_collection_item):
        item = make_collection_item(other_user, make_instrument())

        for method in ('get', 'patch', 'delete'):
            response = getattr(user_client, method)(reverse('collection:item_detail', args=[item.pk]))
            assert response.status_code == 404

        assert CollectionItem.objects.filter(pk=item.pk).exists()

    def test_remove_item(self, user_client, user, make_instrument, make_collection_item):
        item = make_collection_item(user, make_instrument())

        response = user_client.delete(reverse('collection:item_detail', args=[item.pk]))

        assert response.json() == {'success': True}
        assert not CollectionItem.objects.filter(pk=item.pk).exists()


class TestExport:

    def test_csv_export(self, user_client, user, make_instrument, make_collection_item):
        make_collection_item(
            user,
            make_instrument(brand='Roland', model='Juno-60', type='synthesizer'),
            status='active',
            condition='good',
            serial_number='A1',
            acquisition_date=date(2023, 2, 14),
            acquisition_price=Decimal('1200'),
        )

        response = user_client.get(reverse('collection:export_csv'))

        assert response.status_code == 200
        assert response['Content-Disposition'] == 'attachment; filename="mi_coleccion_instrumentos.csv"'
        text = response.content.decode('utf-8')
        assert text.startswith(BOM)
        lines = text[len(BOM):].splitlines()
        assert lines[0] == '"Marca","Modelo","Tipo","Estado","Condición","Número Serie","Fecha Adquisición","Precio"'
        assert lines[1] == '"Roland","Juno-60","synthesizer","active","good","A1","14/02/2023","1200.00"'

    def test_empty_collection(self, user_client):
        response = user_client.get(reverse('collection:export_csv'))

        assert response.status_code == 404
        assert response.content == b'No data found'

    def test_pdf_export(self, user_client, user, make_instrument, make_collection_item):
        make_collection_item(user, make_instrument(brand='Moog', model='Minimoog'))

        response = user_client.get(reverse('collection:export_pdf'))

        assert response.status_code == 200
        assert response['Content-Type'] == 'application/pdf'
        assert response['Content-Disposition'] == 'attachment; filename="mi_coleccion_instrumentos.pdf"'
        assert response.content.startswith(b'%PDF')

    def test_export_requires_login(self, api_client):
        assert api_client.get(reverse('collection:export_pdf')).status_code == 401

    def test_pdf_handles_items_without_price(self, user, make_instrument, make_collection_item):
        item = make_collection_item(user, make_instrument())

        assert build_pdf([item]).startswith(b'%PDF')
