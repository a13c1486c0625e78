"""
Tagged results for action endpoints.

Every action answers ``{"success": bool, "data"?: ..., "error"?: str}``.
Callers branch on ``success``; exceptions never cross the handler boundary.
"""

import functools
import json
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from .context import ActionContext
from .errors import AppError, ValidationError

logger = structlog.get_logger(__name__)

UNAUTHENTICATED_MESSAGE = 'No autorizado: Inicia sesión para continuar'
FORBIDDEN_MESSAGE = 'Acceso denegado: Privilegios insuficientes'
INTERNAL_ERROR_MESSAGE = 'Error interno del servidor'


@dataclass
class ActionResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    status: int = 200

    @classmethod
    def ok(cls, data=None, status=200):
        return cls(success=True, data=data, status=status)

    @classmethod
    def fail(cls, error, status=400):
        return cls(success=False, error=error, status=status)

    def to_dict(self):
        payload = {'success': self.success}
        if self.data is not None:
            payload['data'] = self.data
        if self.error is not None:
            payload['error'] = self.error
        return payload

    def to_response(self):
        return JsonResponse(self.to_dict(), status=self.status)


def validation_message(messages: Iterable[str]) -> str:
    return f"Error de validación: {', '.join(messages)}"


def parse_json_body(request) -> dict:
    """Decode a JSON request body; an empty body is an empty dict."""
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('JSON inválido')
    if not isinstance(payload, dict):
        raise ValidationError('Se esperaba un objeto JSON')
    return payload


def run_action(handler, ctx: ActionContext, *args, protected=True, allowed_roles=None,
               action_name=None, **kwargs) -> ActionResult:
    """
    Run ``handler(ctx, ...)`` and fold any outcome into an ActionResult.

    Authorization failures and exceptions both come back as failures; a
    handler may return an ActionResult itself or plain data.
    """
    if protected and not ctx.is_authenticated:
        return ActionResult.fail(UNAUTHENTICATED_MESSAGE, status=401)
    if allowed_roles and ctx.role not in allowed_roles:
        return ActionResult.fail(FORBIDDEN_MESSAGE, status=403)

    try:
        result = handler(ctx, *args, **kwargs)
    except ValidationError as exc:
        messages = exc.details or [exc.message]
        return ActionResult.fail(validation_message(messages), status=400)
    except DjangoValidationError as exc:
        return ActionResult.fail(validation_message(exc.messages), status=400)
    except AppError as exc:
        if exc.status_code >= 500:
            logger.error(
                'action_failed',
                action=action_name or handler.__name__,
                code=exc.code,
                error=exc.message,
                correlation_id=ctx.correlation_id,
            )
        return ActionResult.fail(exc.message, status=exc.status_code)
    except Exception:
        logger.exception(
            'action_crashed',
            action=action_name or handler.__name__,
            correlation_id=ctx.correlation_id,
        )
        return ActionResult.fail(INTERNAL_ERROR_MESSAGE, status=500)

    if isinstance(result, ActionResult):
        return result
    return ActionResult.ok(result)


def safe_action(view=None, *, protected=True, allowed_roles=None, methods=None):
    """
    Decorate a Django view written as ``view(request, ctx, *args, **kwargs)``.

    The decorator builds the ActionContext from the request, runs the
    authorization checks and returns the tagged result as JSON.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(request, *args, **kwargs):
            ctx = ActionContext.from_request(request)
            result = run_action(
                lambda c, *a, **kw: func(request, c, *a, **kw),
                ctx,
                *args,
                protected=protected,
                allowed_roles=allowed_roles,
                action_name=func.__name__,
                **kwargs
            )
            return result.to_response()

        if methods:
            return require_http_methods(methods)(wrapper)
        return wrapper

    if view is not None:
        return decorator(view)
    return decorator
