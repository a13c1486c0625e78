"""Tests for tagged action results, the safe_action decorator and request correlation."""

import json

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import RequestFactory

from apps.core.context import ROLE_ADMIN, ActionContext
from apps.core.errors import ExternalServiceError, NotFoundError, ValidationError
from apps.core.results import ActionResult, run_action, safe_action


def _body(response):
    return json.loads(response.content)


@pytest.fixture
def rf_request():
    def factory(user=None, method='get', body=None):
        rf = RequestFactory()
        if method == 'post':
            request = rf.post('/action/', data=json.dumps(body or {}), content_type='application/json')
        else:
            request = rf.get('/action/')
        request.user = user or AnonymousUser()
        request.correlation_id = 'test-correlation'
        return request
    return factory


class TestActionResult:

    def test_success_shape(self):
        assert ActionResult.ok({'id': 1}).to_dict() == {'success': True, 'data': {'id': 1}}
        assert ActionResult.ok().to_dict() == {'success': True}

    def test_failure_shape(self):
        result = ActionResult.fail('Algo salió mal', status=409)

        assert result.to_dict() == {'success': False, 'error': 'Algo salió mal'}
        assert result.to_response().status_code == 409


class TestRunAction:

    ctx = ActionContext(user_id=1, role='normal', correlation_id='abc')

    def test_plain_data_is_wrapped(self):
        result = run_action(lambda ctx: [1, 2], self.ctx)

        assert result.success is True
        assert result.data == [1, 2]

    def test_anonymous_is_refused_before_handler_runs(self):
        calls = []

        result = run_action(lambda ctx: calls.append(ctx), ActionContext.anonymous())

        assert calls == []
        assert result.status == 401
        assert result.error == 'No autorizado: Inicia sesión para continuar'

    def test_unprotected_handler_accepts_anonymous(self):
        result = run_action(lambda ctx: 'ok', ActionContext.anonymous(), protected=False)

        assert result.data == 'ok'

    def test_wrong_role(self):
        result = run_action(lambda ctx: 'ok', self.ctx, allowed_roles=[ROLE_ADMIN])

        assert result.status == 403
        assert result.error == 'Acceso denegado: Privilegios insuficientes'

    def test_validation_errors(self):
        def app_error(ctx):
            raise ValidationError('Datos inválidos', details=['nombre vacío', 'precio negativo'])

        def django_error(ctx):
            raise DjangoValidationError('Campo obligatorio')

        assert run_action(app_error, self.ctx).error == 'Error de validación: nombre vacío, precio negativo'
        assert run_action(django_error, self.ctx).error == 'Error de validación: Campo obligatorio'

    def test_app_errors_keep_status(self):
        def missing(ctx):
            raise NotFoundError('Showroom')

        def upstream(ctx):
            raise ExternalServiceError('Reverb', 'HTTP 502')

        assert run_action(missing, self.ctx).status == 404
        result = run_action(upstream, self.ctx)
        assert result.status == 503
        assert result.error == 'Error en servicio externo (Reverb): HTTP 502'

    def test_unexpected_errors_are_hidden(self):
        def crash(ctx):
            raise KeyError('secret detail')

        result = run_action(crash, self.ctx)

        assert result.status == 500
        assert result.error == 'Error interno del servidor'


@pytest.mark.django_db
class TestSafeAction:

    def test_context_is_built_from_request(self, rf_request, catalog_admin):
        @safe_action
        def whoami(request, ctx):
            return {'user_id': ctx.user_id, 'role': ctx.role, 'correlation_id': ctx.correlation_id}

        response = whoami(rf_request(catalog_admin))

        assert _body(response) == {
            'success': True,
            'data': {'user_id': catalog_admin.pk, 'role': 'admin', 'correlation_id': 'test-correlation'},
        }

    def test_roles_and_methods(self, rf_request, user):
        @safe_action(allowed_roles=[ROLE_ADMIN], methods=['POST'])
        def admin_only(request, ctx):
            return 'done'

        assert admin_only(rf_request(user)).status_code == 405
        response = admin_only(rf_request(user, method='post'))
        assert response.status_code == 403

    def test_invalid_json_body(self, user_client):
        response = user_client.post('/api/collection/items/', data='{broken', content_type='application/json')

        assert response.status_code == 400
        assert _body(response)['error'] == 'Error de validación: JSON inválido'


class TestCorrelationId:

    @pytest.mark.django_db
    def test_header_is_echoed(self, api_client):
        response = api_client.get('/api/instruments/', HTTP_X_CORRELATION_ID='req-123')

        assert response['X-Correlation-ID'] == 'req-123'

    @pytest.mark.django_db
    def test_header_is_generated(self, api_client):
        response = api_client.get('/api/instruments/')

        assert len(response['X-Correlation-ID']) == 36
