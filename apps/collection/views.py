import structlog
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from apps.core.context import ActionContext
from apps.core.errors import ValidationError
from apps.core.results import UNAUTHENTICATED_MESSAGE, ActionResult, parse_json_body, safe_action
from .services import CollectionService, ShowroomService, build_csv, build_pdf, get_export_items
from .services.export import CSV_FILENAME, PDF_FILENAME
from .services.showrooms import showroom_dict

logger = structlog.get_logger(__name__)


def _required_id(payload, key):
    try:
        return int(payload[key])
    except KeyError:
        raise ValidationError(f'{key} es obligatorio')
    except (TypeError, ValueError):
        raise ValidationError(f'{key} debe ser un número')


# =============================================================================
# COLLECTION
# =============================================================================

@safe_action(methods=['GET', 'POST'])
def collection_items(request, ctx):
    """GET lists own items, POST adds {instrumentId} to the collection."""
    if request.method == 'POST':
        payload = parse_json_body(request)
        item = CollectionService.add_item(ctx, _required_id(payload, 'instrumentId'))
        return ActionResult.ok(item.to_dict(), status=201)
    return CollectionService.list_items(ctx)


@safe_action(methods=['GET', 'PATCH', 'DELETE'])
def collection_item_detail(request, ctx, item_id):
    if request.method == 'PATCH':
        item = CollectionService.update_item(ctx, item_id, parse_json_body(request))
        return item.to_dict()
    if request.method == 'DELETE':
        CollectionService.remove_item(ctx, item_id)
        return ActionResult.ok()
    return CollectionService.get_owned_item(ctx, item_id).to_dict()


# =============================================================================
# SHOWROOMS
# =============================================================================

@safe_action(methods=['GET', 'POST'])
def showrooms(request, ctx):
    if request.method == 'POST':
        payload = parse_json_body(request)
        showroom = ShowroomService.create(ctx, payload.get('name'), payload.get('description') or '')
        return ActionResult.ok(showroom_dict(showroom), status=201)
    return ShowroomService.list_own(ctx)


@safe_action(methods=['PATCH', 'DELETE'])
def showroom_detail(request, ctx, showroom_id):
    if request.method == 'DELETE':
        ShowroomService.delete(ctx, showroom_id)
        return ActionResult.ok()
    showroom = ShowroomService.update(ctx, showroom_id, parse_json_body(request))
    return showroom_dict(showroom)


@safe_action(methods=['POST'])
def showroom_add_item(request, ctx, showroom_id):
    payload = parse_json_body(request)
    entry = ShowroomService.add_item(ctx, showroom_id, _required_id(payload, 'collectionItemId'), payload)
    return ActionResult.ok({
        'id': entry.pk,
        'collection_item_id': entry.collection_item_id,
        'display_order': entry.display_order,
    }, status=201)


@safe_action(methods=['DELETE'])
def showroom_remove_item(request, ctx, showroom_id, collection_item_id):
    ShowroomService.remove_item(ctx, showroom_id, collection_item_id)
    return ActionResult.ok()


@safe_action(protected=False, methods=['GET'])
def showroom_public(request, ctx, slug):
    return ShowroomService.get_public(ctx, slug)


# =============================================================================
# EXPORT
# =============================================================================

def _export_items(request):
    """Own items for an export, or the error response to return instead."""
    ctx = ActionContext.from_request(request)
    if not ctx.is_authenticated:
        return None, JsonResponse({'success': False, 'error': UNAUTHENTICATED_MESSAGE}, status=401)
    items = get_export_items(ctx.user_id)
    if not items:
        return None, HttpResponse('No data found', status=404, content_type='text/plain; charset=utf-8')
    return items, None


@require_GET
def export_csv(request):
    items, error = _export_items(request)
    if error is not None:
        return error

    response = HttpResponse(build_csv(items), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{CSV_FILENAME}"'
    logger.info('collection_exported', format='csv', count=len(items), user_id=request.user.pk)
    return response


@require_GET
def export_pdf(request):
    items, error = _export_items(request)
    if error is not None:
        return error

    response = HttpResponse(build_pdf(items), content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{PDF_FILENAME}"'
    logger.info('collection_exported', format='pdf', count=len(items), user_id=request.user.pk)
    return response
