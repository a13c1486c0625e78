"""
Application error hierarchy.

Each error carries the HTTP status and a machine-readable code so the action
layer can turn it into a tagged failure result without inspecting types.
"""


class AppError(Exception):
    """Base class for all application errors."""

    def __init__(self, message, status_code=500, code='INTERNAL_ERROR', details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def __str__(self):
        return self.message


class ValidationError(AppError):
    def __init__(self, message, details=None):
        super().__init__(message, 400, 'VALIDATION_ERROR', details)


class AuthError(AppError):
    def __init__(self, message='No autorizado'):
        super().__init__(message, 401, 'AUTH_ERROR')


class PermissionDeniedError(AppError):
    def __init__(self, message='Acceso denegado: Privilegios insuficientes'):
        super().__init__(message, 403, 'PERMISSION_DENIED')


class NotFoundError(AppError):
    def __init__(self, resource):
        super().__init__(f'{resource} no encontrado', 404, 'NOT_FOUND')
        self.resource = resource


class DatabaseError(AppError):
    def __init__(self, message, details=None):
        super().__init__(message, 500, 'DATABASE_ERROR', details)


class ExternalServiceError(AppError):
    """Raised when a third-party API (marketplace, web push) fails."""

    def __init__(self, service, message, details=None):
        super().__init__(
            f'Error en servicio externo ({service}): {message}',
            503,
            'EXTERNAL_SERVICE_ERROR',
            details,
        )
        self.service = service
