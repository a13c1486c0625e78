from dataclasses import dataclass, field
from typing import Any, Optional

ROLE_NORMAL = 'normal'
ROLE_EDITOR = 'editor'
ROLE_SUPEREDITOR = 'supereditor'
ROLE_ADMIN = 'admin'

EDITOR_ROLES = (ROLE_EDITOR, ROLE_SUPEREDITOR, ROLE_ADMIN)
PUSH_SENDER_ROLES = (ROLE_SUPEREDITOR, ROLE_ADMIN)


@dataclass(frozen=True)
class ActionContext:
    """
    Request-scoped identity handed explicitly to every action handler.
    Handlers never look up the session themselves.
    """
    user_id: Optional[int] = None
    role: str = ROLE_NORMAL
    correlation_id: str = ''
    user: Any = field(default=None, compare=False, repr=False)

    @property
    def is_authenticated(self):
        return self.user_id is not None

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def is_editor(self):
        return self.role in EDITOR_ROLES

    def has_role(self, *roles):
        return self.role in roles

    @classmethod
    def anonymous(cls, correlation_id=''):
        return cls(correlation_id=correlation_id)

    @classmethod
    def from_request(cls, request):
        correlation_id = getattr(request, 'correlation_id', '') or ''
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return cls.anonymous(correlation_id)
        return cls(
            user_id=user.pk,
            role=getattr(user, 'role', ROLE_NORMAL) or ROLE_NORMAL,
            correlation_id=correlation_id,
            user=user,
        )
