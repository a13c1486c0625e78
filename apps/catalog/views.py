import hmac

import structlog
from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from apps.core.context import ActionContext
from apps.core.results import UNAUTHENTICATED_MESSAGE
from .models import MediaAsset
from .services import process_stale_alerts, sync_market_data_batch

logger = structlog.get_logger(__name__)

CRON_SYNC_BATCH = 20
CRON_ALERT_BATCH = 5


# =============================================================================
# UPLOADS
# =============================================================================

def _upload_error(message, status=400):
    return JsonResponse({'success': False, 'error': message}, status=status)


@require_http_methods(["POST"])
def media_upload(request):
    """
    Upload one image sent as multipart ``file``.
    The image is resized and stored as a MediaAsset; responds {url}.
    """
    ctx = ActionContext.from_request(request)
    if not ctx.is_authenticated:
        return _upload_error(UNAUTHENTICATED_MESSAGE, status=401)

    upload = request.FILES.get('file')
    if upload is None:
        return _upload_error('No se ha enviado ningún archivo')

    content_type = upload.content_type or ''
    if not content_type.startswith('image/'):
        return _upload_error('Solo se permiten imágenes')

    if upload.size > settings.UPLOAD_MAX_BYTES:
        max_mb = settings.UPLOAD_MAX_BYTES // (1024 * 1024)
        return _upload_error(f'El archivo supera el tamaño máximo de {max_mb} MB')

    purpose = request.POST.get('purpose', 'media')
    if purpose not in dict(MediaAsset.PURPOSE_CHOICES):
        purpose = 'media'

    try:
        asset = MediaAsset.objects.create(
            owner=ctx.user,
            image=upload,
            purpose=purpose,
            original_name=upload.name[:255],
        )
    except OSError:
        # Pillow could not read the file
        logger.warning('media_upload_invalid_image', user_id=ctx.user_id, name=upload.name)
        return _upload_error('El archivo no es una imagen válida')

    logger.info('media_uploaded', asset_id=asset.pk, user_id=ctx.user_id, size=upload.size)
    return JsonResponse({'url': asset.image.url})


# =============================================================================
# CRON
# =============================================================================

def _cron_authorized(request):
    secret = settings.CRON_SECRET
    if not secret:
        return False
    expected = f'Bearer {secret}'
    provided = request.headers.get('Authorization', '')
    return hmac.compare_digest(provided.encode(), expected.encode())


@require_http_methods(["GET"])
def cron_sync_market(request):
    """Weekly market value sync for a batch of stale instruments."""
    if not _cron_authorized(request):
        return HttpResponse('Unauthorized', status=401)

    try:
        result = sync_market_data_batch(CRON_SYNC_BATCH)
    except Exception as exc:
        logger.exception('cron_sync_market_failed')
        return HttpResponse(str(exc), status=500)

    return JsonResponse({'timestamp': timezone.now().isoformat(), **result})


@require_http_methods(["GET"])
def cron_update_prices(request):
    """Check a batch of stale price alerts."""
    if not _cron_authorized(request):
        return HttpResponse('Unauthorized', status=401)

    try:
        result = process_stale_alerts(CRON_ALERT_BATCH)
    except Exception as exc:
        logger.exception('cron_update_prices_failed')
        return HttpResponse(str(exc), status=500)

    return JsonResponse({
        'success': result['success'],
        'processed': result['processed'],
        'details': result['results'],
    })
