"""Tests for the cron endpoints and image uploads."""

import io
from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from PIL import Image

from apps.catalog.models import MediaAsset

pytestmark = pytest.mark.django_db

AUTH = {'HTTP_AUTHORIZATION': 'Bearer test-cron-secret'}


class TestCronEndpoints:

    @pytest.mark.parametrize('headers', [{}, {'HTTP_AUTHORIZATION': 'Bearer wrong'}, {'HTTP_AUTHORIZATION': 'test-cron-secret'}])
    def test_rejects_missing_or_wrong_token(self, api_client, headers):
        response = api_client.get(reverse('catalog:cron_sync_market'), **headers)

        assert response.status_code == 401
        assert response.content == b'Unauthorized'

    def test_rejects_everything_without_configured_secret(self, api_client, settings):
        settings.CRON_SECRET = ''

        response = api_client.get(reverse('catalog:cron_update_prices'), HTTP_AUTHORIZATION='Bearer ')

        assert response.status_code == 401

    def test_sync_market_summary(self, api_client):
        summary = {'success': True, 'processedCount': 1, 'details': [{'id': 1, 'name': 'Korg MS-20', 'success': True}]}
        with patch('apps.catalog.views.sync_market_data_batch', return_value=summary) as sync:
            response = api_client.get(reverse('catalog:cron_sync_market'), **AUTH)

        sync.assert_called_once_with(20)
        assert response.status_code == 200
        body = response.json()
        assert body['processedCount'] == 1
        assert body['details'] == summary['details']
        assert 'timestamp' in body

    def test_sync_market_failure(self, api_client):
        with patch('apps.catalog.views.sync_market_data_batch', side_effect=RuntimeError('database is gone')):
            response = api_client.get(reverse('catalog:cron_sync_market'), **AUTH)

        assert response.status_code == 500
        assert response.content == b'database is gone'

    def test_update_prices_summary(self, api_client):
        outcome = {'success': True, 'processed': 2, 'results': [{'id': 1, 'success': True}, {'id': 2, 'success': False}]}
        with patch('apps.catalog.views.process_stale_alerts', return_value=outcome) as run:
            response = api_client.get(reverse('catalog:cron_update_prices'), **AUTH)

        run.assert_called_once_with(5)
        assert response.json() == {'success': True, 'processed': 2, 'details': outcome['results']}


def _png(name='photo.png', size=(64, 48)):
    buffer = io.BytesIO()
    Image.new('RGB', size, 'red').save(buffer, 'PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class TestUploads:

    def test_anonymous_upload_is_refused(self, api_client):
        response = api_client.post(reverse('catalog:media_upload'), {'file': _png()})

        assert response.status_code == 401
        assert response.json()['success'] is False

    def test_image_is_stored(self, user_client, user):
        response = user_client.post(reverse('catalog:media_upload'), {'file': _png(), 'purpose': 'showroom'})

        assert response.status_code == 200
        url = response.json()['url']
        assert url.startswith('/media/uploads/')
        asset = MediaAsset.objects.get(owner=user)
        assert asset.purpose == 'showroom'
        assert asset.original_name == 'photo.png'

    def test_file_is_required(self, user_client):
        response = user_client.post(reverse('catalog:media_upload'), {})

        assert response.status_code == 400
        assert response.json() == {'success': False, 'error': 'No se ha enviado ningún archivo'}

    def test_only_images(self, user_client):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')

        response = user_client.post(reverse('catalog:media_upload'), {'file': upload})

        assert response.status_code == 400
        assert response.json()['error'] == 'Solo se permiten imágenes'

    def test_size_limit(self, user_client, settings):
        settings.UPLOAD_MAX_BYTES = 10

        response = user_client.post(reverse('catalog:media_upload'), {'file': _png()})

        assert response.status_code == 400
        assert not MediaAsset.objects.exists()

    def test_unreadable_image(self, user_client):
        upload = SimpleUploadedFile('fake.png', b'not really a png', content_type='image/png')

        response = user_client.post(reverse('catalog:media_upload'), {'file': upload})

        assert response.status_code == 400
        assert response.json()['error'] == 'El archivo no es una imagen válida'
