"""API-layer dependencies: request-scoped wiring (UoW, current user, roles)."""

from pawboard.api.dependencies.current_user import ensure_role, get_current_user, require_roles
from pawboard.api.dependencies.unit_of_work import UnitOfWork, get_uow

__all__ = ["UnitOfWork", "ensure_role", "get_current_user", "get_uow", "require_roles"]
