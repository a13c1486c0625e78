import structlog
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.context import PUSH_SENDER_ROLES, ActionContext
from apps.core.errors import NotFoundError, ValidationError
from apps.core.results import (
    FORBIDDEN_MESSAGE,
    UNAUTHENTICATED_MESSAGE,
    ActionResult,
    parse_json_body,
    safe_action,
)
from .models import Notification, PushSubscription
from .services import PushConfigurationError, PushService, build_push_payload

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _positive_int(value, default, maximum=None):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


# =============================================================================
# NOTIFICATIONS
# =============================================================================

@safe_action(methods=['GET'])
def notification_list(request, ctx):
    """Own notifications, newest first, paginated with ?page= and ?limit=."""
    page = _positive_int(request.GET.get('page'), 1)
    limit = _positive_int(request.GET.get('limit'), DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)

    queryset = Notification.objects.filter(user_id=ctx.user_id)
    total = queryset.count()
    offset = (page - 1) * limit
    notifications = queryset[offset:offset + limit]

    return {
        'notifications': [n.to_dict() for n in notifications],
        'page': page,
        'limit': limit,
        'total': total,
        'has_more': offset + limit < total,
    }


@safe_action(methods=['GET'])
def unread_count(request, ctx):
    return {'count': Notification.objects.filter(user_id=ctx.user_id, read=False).count()}


@safe_action(methods=['POST'])
def mark_read(request, ctx, notification_id):
    updated = Notification.objects.filter(pk=notification_id, user_id=ctx.user_id).update(read=True)
    if not updated:
        raise NotFoundError('Notificación')
    return ActionResult.ok()


@safe_action(methods=['POST'])
def mark_all_read(request, ctx):
    updated = Notification.objects.filter(user_id=ctx.user_id, read=False).update(read=True)
    return {'updated': updated}


# =============================================================================
# WEB PUSH
# =============================================================================

@safe_action(methods=['POST'])
def push_subscribe(request, ctx):
    """Store the browser subscription sent as {subscription: {...}}."""
    payload = parse_json_body(request)
    subscription = payload.get('subscription')
    if (
        not isinstance(subscription, dict)
        or not subscription.get('endpoint')
        or not isinstance(subscription.get('keys'), dict)
        or not subscription['keys'].get('auth')
    ):
        raise ValidationError('Datos de suscripción inválidos')

    PushService.subscribe(ctx.user, subscription, request.headers.get('User-Agent', ''))
    return ActionResult.ok()


@require_http_methods(['POST'])
def push_send(request):
    """
    Send a push notification.

    Body: {userId?, title?, message?, url?}. userId may be a user id or
    "all"; without it the notification goes to the caller.

    Responds {success, sent, total}, or {success: false, message} when
    nobody is subscribed.
    """
    ctx = ActionContext.from_request(request)
    if not ctx.is_authenticated:
        return JsonResponse({'success': False, 'error': UNAUTHENTICATED_MESSAGE}, status=401)
    if not ctx.has_role(*PUSH_SENDER_ROLES):
        return JsonResponse({'success': False, 'error': FORBIDDEN_MESSAGE}, status=403)

    try:
        PushService.ensure_configured()
        body = parse_json_body(request)
    except PushConfigurationError as exc:
        return JsonResponse({'success': False, 'error': exc.message}, status=exc.status_code)
    except ValidationError as exc:
        return JsonResponse({'success': False, 'error': exc.message}, status=exc.status_code)

    target = body.get('userId')
    if target == 'all':
        subscriptions = PushSubscription.objects.all()
    elif target:
        subscriptions = PushSubscription.objects.filter(user_id=_positive_int(target, None))
    else:
        subscriptions = PushSubscription.objects.filter(user_id=ctx.user_id)

    subscriptions = list(subscriptions)
    if not subscriptions:
        return JsonResponse({'success': False, 'message': 'No subscriptions found'})

    payload = build_push_payload(body.get('title'), body.get('message'), body.get('url'))
    try:
        outcome = PushService.send_many(subscriptions, payload)
    except Exception:
        logger.exception('push_send_failed', correlation_id=ctx.correlation_id)
        return JsonResponse({'success': False, 'error': 'Internal Server Error'}, status=500)

    logger.info('push_sent', target=target or ctx.user_id, **outcome)
    return JsonResponse({'success': True, **outcome})
