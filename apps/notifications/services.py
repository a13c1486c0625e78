"""
Notification delivery: in-app notifications and Web Push.
"""

import json
from typing import Any, Dict, Iterable, Optional

import structlog
from django.conf import settings
from pywebpush import WebPushException, webpush

from apps.core.errors import AppError
from .models import Notification, PushSubscription

logger = structlog.get_logger(__name__)

DEFAULT_PUSH_TITLE = 'Notificación de Prueba'
DEFAULT_PUSH_BODY = '¡Hola! Esto es una prueba de Instrument Collector.'
DEFAULT_PUSH_ICON = '/icons/icon-192.png'
DEFAULT_PUSH_URL = '/dashboard'

GONE_STATUSES = (404, 410)


def create_notification(user, type: str, data: Optional[Dict[str, Any]] = None) -> Optional[Notification]:
    """
    Create an in-app notification.

    Errors are logged and swallowed: a failed notification must never
    fail the action that triggered it.

    Returns:
        The Notification, or None when it could not be stored
    """
    try:
        return Notification.objects.create(user=user, type=type, data=data or {})
    except Exception:
        logger.exception('notification_create_failed', user_id=getattr(user, 'pk', user), type=type)
        return None


def build_push_payload(title=None, message=None, url=None, icon=None) -> Dict[str, str]:
    return {
        'title': title or DEFAULT_PUSH_TITLE,
        'body': message or DEFAULT_PUSH_BODY,
        'icon': icon or DEFAULT_PUSH_ICON,
        'url': url or DEFAULT_PUSH_URL,
    }


class PushConfigurationError(AppError):
    def __init__(self):
        super().__init__('Server Config Error', status_code=500, code='PUSH_NOT_CONFIGURED')


class PushService:
    """
    Web Push delivery through pywebpush with the configured VAPID keys.
    """

    @staticmethod
    def ensure_configured():
        if not settings.VAPID_PRIVATE_KEY or not settings.VAPID_PUBLIC_KEY:
            logger.error('push_vapid_keys_missing')
            raise PushConfigurationError()

    @staticmethod
    def subscribe(user, subscription: Dict[str, Any], user_agent: str = '') -> PushSubscription:
        """
        Store a browser subscription, updating it when the endpoint is known.

        Args:
            user: Subscribing user
            subscription: {endpoint, keys: {p256dh, auth}}
            user_agent: Browser user agent
        """
        push_subscription, created = PushSubscription.objects.update_or_create(
            endpoint=subscription['endpoint'],
            defaults={
                'user': user,
                'subscription': subscription,
                'user_agent': (user_agent or 'Unknown')[:255],
            },
        )
        logger.info('push_subscription_saved', user_id=user.pk, created=created)
        return push_subscription

    @staticmethod
    def send(subscription: PushSubscription, payload: Dict[str, str]) -> bool:
        """
        Deliver one payload.

        Subscriptions the push service reports as gone (404/410) are
        deleted and count as not delivered. Other failures propagate.

        Returns:
            True when delivered
        """
        try:
            webpush(
                subscription_info=subscription.subscription,
                data=json.dumps(payload),
                vapid_private_key=settings.VAPID_PRIVATE_KEY,
                vapid_claims={'sub': settings.WEB_PUSH_EMAIL},
            )
            return True
        except WebPushException as exc:
            status = getattr(exc.response, 'status_code', None)
            if status in GONE_STATUSES:
                logger.info('push_subscription_expired', subscription_id=subscription.pk, status=status)
                subscription.delete()
                return False
            raise

    @staticmethod
    def send_many(subscriptions: Iterable[PushSubscription], payload: Dict[str, str]) -> Dict[str, int]:
        """
        Deliver a payload to every subscription; one failure does not stop
        the others.

        Returns:
            {'sent': delivered count, 'total': subscriptions attempted}
        """
        sent = 0
        total = 0
        for subscription in subscriptions:
            total += 1
            try:
                if PushService.send(subscription, payload):
                    sent += 1
            except WebPushException:
                logger.exception('push_delivery_failed', subscription_id=subscription.pk)
        return {'sent': sent, 'total': total}
