# services/access.py
from models.enums import Role
from services.errors import AuthorizationError


def require_actor(actor):
    """``actor`` is the {"id", "role"} dict from routes.auth.current_actor()."""
    if not actor or actor.get("id") is None:
        raise AuthorizationError("Authentication required", authenticated=False)
    return actor


def require_role(actor, *roles):
    require_actor(actor)
    wanted = {r.value if isinstance(r, Role) else str(r) for r in roles}
    if actor.get("role") not in wanted:
        raise AuthorizationError(f"Requires role: {', '.join(sorted(wanted))}")
    return actor


def require_admin(actor):
    return require_role(actor, Role.ADMIN)


def is_admin(actor) -> bool:
    return bool(actor) and actor.get("role") == Role.ADMIN.value
