"""Authorization hooks keyed on authority strings."""

import falcon
import falcon.asgi

ROLE_READ = "role:read"
ROLE_SAVE = "role:save"


def require_authority(authority: str):
    """Build a ``falcon.before`` hook that requires ``authority``."""

    async def hook(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
        user = getattr(req.context, "user", None)
        if user is None:
            raise falcon.HTTPUnauthorized(
                title="Unauthorized",
                challenges=["Bearer"],
            )
        if authority not in user.authorities:
            raise falcon.HTTPForbidden(
                title="Forbidden",
                description=f"Missing authority: {authority}",
            )

    return hook
