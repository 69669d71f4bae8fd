"""Role administration screens under /roles."""

import re
from typing import Any
from urllib.parse import urlencode
from uuid import UUID

import falcon
import falcon.asgi
import structlog

from roleadmin.application.dto import RoleForm, SearchRoleForm
from roleadmin.application.services import PermissionService, RoleService
from roleadmin.application.validators import RoleFormValidator
from roleadmin.domain.exceptions import NotFound
from roleadmin.domain.value_objects import Pageable
from roleadmin.interfaces.web.forms import bind, role_form_data, search_form_data
from roleadmin.interfaces.web.hooks import ROLE_READ, ROLE_SAVE, require_authority
from roleadmin.interfaces.web.http import content_disposition, redirect
from roleadmin.interfaces.web.middleware.flash import flash
from roleadmin.interfaces.web.templates import render

logger = structlog.get_logger(__name__)

VIEW_NEW = "modules/role/new.html"
VIEW_FIND = "modules/role/find.html"
VIEW_SHOW = "modules/role/show.html"

SUCCESS_MESSAGE = "success_message"
MESSAGE_CREATED = "Role was created."
MESSAGE_UPDATED = "Role was updated."
MESSAGE_DELETED = "Role was deleted."

CSV_FILENAME = re.compile(r".+\.csv")


def _parse_role_id(role_id: str) -> UUID:
    try:
        return UUID(role_id)
    except ValueError:
        raise NotFound("Role", role_id) from None


def _search_form(data: dict[str, Any]) -> SearchRoleForm:
    """Bind search criteria, dropping fields that fail validation."""
    form, invalid = bind(SearchRoleForm, data)
    if form is None:
        form, _ = bind(SearchRoleForm, {k: v for k, v in data.items() if k not in invalid})
    return form


class RoleResource:
    """New / find / show / edit / remove / download for roles.

    Mounted with route suffixes, e.g. ``/roles/new`` dispatches to
    ``on_get_new`` and ``on_post_new``. POST handlers answer with 303
    redirects; validation errors and the submitted input travel to the
    redisplayed form as flash data.
    """

    def __init__(
        self,
        role_service: RoleService,
        permission_service: PermissionService,
        role_form_validator: RoleFormValidator,
        page_size: int = 10,
    ) -> None:
        self._role_service = role_service
        self._permission_service = permission_service
        self._validator = role_form_validator
        self._page_size = page_size

    # --- new ---

    @falcon.before(require_authority(ROLE_SAVE))
    async def on_get_new(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Empty role form, or the rejected input after a failed submit."""
        flashed = req.context.flash.get("form")
        form = RoleForm.model_construct(**flashed) if flashed else RoleForm.empty()
        permissions = await self._permission_service.list_all()
        self._render(
            req,
            resp,
            VIEW_NEW,
            form=form,
            errors=req.context.flash.get("errors", {}),
            permissions=permissions,
            action="/roles/new",
        )

    @falcon.before(require_authority(ROLE_SAVE))
    async def on_post_new(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create role from the posted form."""
        data = role_form_data(await req.get_media(default_when_empty={}))
        form, errors = await self._bind_role_form(data)
        if errors:
            flash(req, errors=errors, form=data)
            redirect(resp, "/roles/new")
            return

        created = await self._role_service.create(form.to_role())

        flash(req, **{SUCCESS_MESSAGE: MESSAGE_CREATED})
        redirect(resp, f"/roles/show/{created.id}")

    # --- find ---

    @falcon.before(require_authority(ROLE_READ))
    async def on_get_find(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Paged role list filtered by the search form (query string)."""
        flashed = req.context.flash.get("form")
        if req.get_param_as_bool("init"):
            data: dict[str, Any] = {}
        else:
            data = flashed or search_form_data(req.params)
        form = _search_form(data)

        page = req.get_param_as_int("page", min_value=1) or 1
        size = req.get_param_as_int("size", min_value=1) or self._page_size
        pages = await self._role_service.find_all(form.to_criteria(), Pageable(page=page, size=size))

        self._render(
            req,
            resp,
            VIEW_FIND,
            form=SearchRoleForm.model_construct(**flashed) if flashed else form,
            errors=req.context.flash.get("errors", {}),
            pages=pages,
            query=urlencode(form.to_query()),
        )

    @falcon.before(require_authority(ROLE_READ))
    async def on_post_find(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Validate the search form and redirect to the list."""
        data = search_form_data(await req.get_media(default_when_empty={}))
        form, errors = bind(SearchRoleForm, data)
        if errors:
            flash(req, errors=errors, form=data)
            redirect(resp, "/roles/find")
            return

        query = urlencode(form.to_query())
        redirect(resp, f"/roles/find?{query}" if query else "/roles/find")

    # --- show ---

    @falcon.before(require_authority(ROLE_READ))
    async def on_get_show(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Role detail with every catalog permission and its flag."""
        role = await self._role_service.find_by_id(_parse_role_id(role_id))
        self._render(req, resp, VIEW_SHOW, role=role, permissions=role.permissions)

    # --- edit ---

    @falcon.before(require_authority(ROLE_SAVE))
    async def on_get_edit(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Edit form loaded from the role unless rejected input is being redisplayed."""
        role = await self._role_service.find_by_id(_parse_role_id(role_id))
        errors = req.context.flash.get("errors", {})
        flashed = req.context.flash.get("form")
        if errors and flashed:
            form = RoleForm.model_construct(**flashed)
        else:
            form = RoleForm.from_role(role, role.permissions)

        self._render(
            req,
            resp,
            VIEW_NEW,
            form=form,
            errors=errors,
            permissions=role.permissions,
            action=f"/roles/edit/{role.id}",
        )

    @falcon.before(require_authority(ROLE_SAVE))
    async def on_post_edit(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Apply posted flags and fields to the stored role."""
        role_uuid = _parse_role_id(role_id)
        data = role_form_data(await req.get_media(default_when_empty={}))
        data["id"] = role_uuid
        form, errors = await self._bind_role_form(data)
        if errors:
            flash(req, errors=errors, form=data)
            redirect(resp, f"/roles/edit/{role_uuid}")
            return

        role = await self._role_service.find_by_id(role_uuid)
        updated = await self._role_service.update(form.apply_to(role))

        flash(req, **{SUCCESS_MESSAGE: MESSAGE_UPDATED})
        redirect(resp, f"/roles/show/{updated.id}")

    # --- remove ---

    @falcon.before(require_authority(ROLE_SAVE))
    async def on_post_remove(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Soft-delete role."""
        await self._role_service.delete(_parse_role_id(role_id))

        flash(req, **{SUCCESS_MESSAGE: MESSAGE_DELETED})
        redirect(resp, "/roles/find")

    # --- download ---

    @falcon.before(require_authority(ROLE_READ))
    async def on_get_download(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, filename: str
    ) -> None:
        """Stream roles matching the search query string as CSV."""
        if not CSV_FILENAME.fullmatch(filename):
            raise falcon.HTTPNotFound()

        form = _search_form(search_form_data(req.params))
        logger.info("roles_download", filename=filename, criteria=form.to_query())

        resp.status = falcon.HTTP_200
        resp.content_type = "text/csv; charset=UTF-8"
        resp.set_header("Content-Disposition", content_disposition(filename))
        resp.stream = self._role_service.write_csv(form.to_criteria())

    # --- helpers ---

    async def _bind_role_form(
        self, data: dict[str, Any]
    ) -> tuple[RoleForm | None, dict[str, list[str]]]:
        form, errors = bind(RoleForm, data)
        if form is None:
            return None, errors
        errors = await self._validator.validate(form)
        return (None, errors) if errors else (form, {})

    def _render(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, template: str, **context
    ) -> None:
        resp.status = falcon.HTTP_200
        resp.content_type = falcon.MEDIA_HTML
        resp.text = render(
            template,
            user=getattr(req.context, "user", None),
            success_message=req.context.flash.get(SUCCESS_MESSAGE),
            **context,
        )
