"""API tests for the /roles screens."""

import csv
import io
from urllib.parse import urlencode
from uuid import uuid4

import pytest
from falcon.testing import TestClient

from roleadmin.interfaces.web.hooks import ROLE_READ
from roleadmin.interfaces.web.middleware.flash import FLASH_COOKIE

from tests.conftest import FakeUnitOfWork, make_role

FORM = "application/x-www-form-urlencoded"


def _post(client: TestClient, path: str, fields: list[tuple[str, str]], **kwargs):
    return client.simulate_post(path, body=urlencode(fields), content_type=FORM, **kwargs)


def _follow(client: TestClient, result, **kwargs):
    """GET the redirect target, carrying the flash cookie."""
    cookies = {}
    if FLASH_COOKIE in result.cookies:
        cookies[FLASH_COOKIE] = result.cookies[FLASH_COOKIE].value
    return client.simulate_get(result.headers["location"], cookies=cookies, **kwargs)


def _role_fields(code: str, name: str, enabled: dict[str, bool], version: str | None = None):
    fields = [("role_code", code), ("role_name", name)]
    for perm, on in enabled.items():
        fields.append((f"permissions[{perm}]", "false"))
        if on:
            fields.append((f"permissions[{perm}]", "true"))
    if version is not None:
        fields.append(("version", version))
    return fields


class TestNew:
    def test_get_renders_catalog(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/new")
        assert result.status_code == 200
        assert "text/html" in result.headers["content-type"]
        assert 'name="permissions[user:read]"' in result.text
        assert 'name="permissions[role:save]"' in result.text

    def test_post_creates_and_redirects_to_show(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        result = _post(
            client,
            "/roles/new",
            _role_fields("ADMIN", "Administrator", {"user:read": True, "user:save": False}),
        )
        assert result.status_code == 303

        roles = fake_uow.roles.live()
        assert len(roles) == 1
        assert roles[0].enabled_permission_codes == ["user:read"]
        assert result.headers["location"] == f"/roles/show/{roles[0].id}"

        page = _follow(client, result)
        assert page.status_code == 200
        assert "Role was created." in page.text
        assert "Administrator" in page.text

    def test_invalid_post_persists_nothing_and_redisplays_input(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        result = _post(
            client,
            "/roles/new",
            _role_fields("bad code", "Keep me", {"user:read": True}),
        )
        assert result.status_code == 303
        assert result.headers["location"] == "/roles/new"
        assert len(fake_uow.roles) == 0

        page = _follow(client, result)
        assert page.status_code == 200
        assert 'value="bad code"' in page.text
        assert 'value="Keep me"' in page.text
        assert 'data-field="role_code"' in page.text

    def test_unknown_permission_rejected(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        result = _post(client, "/roles/new", _role_fields("ADMIN", "Admin", {"nuke:all": True}))
        assert result.headers["location"] == "/roles/new"
        assert len(fake_uow.roles) == 0
        assert 'data-field="permissions"' in _follow(client, result).text

    def test_duplicate_code_rejected(self, client: TestClient, fake_uow: FakeUnitOfWork) -> None:
        fake_uow.roles.add_role(make_role())
        result = _post(client, "/roles/new", _role_fields("ADMIN", "Again", {}))
        assert result.headers["location"] == "/roles/new"
        assert len(fake_uow.roles) == 1

    def test_flash_is_consumed_once(self, client: TestClient) -> None:
        result = _post(client, "/roles/new", _role_fields("", "", {}))
        first = _follow(client, result)
        assert 'data-field="role_code"' in first.text
        again = client.simulate_get(
            "/roles/new", cookies={FLASH_COOKIE: result.cookies[FLASH_COOKIE].value}
        )
        assert 'data-field="role_code"' not in again.text


class TestShow:
    def test_show_lists_catalog_with_flags(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        role = fake_uow.roles.add_role(make_role(enabled={"user:read": True}))
        result = client.simulate_get(f"/roles/show/{role.id}")
        assert result.status_code == 200
        assert 'data-permission="user:read">yes' in result.text
        assert 'data-permission="user:save">no' in result.text

    def test_unknown_id(self, client: TestClient) -> None:
        assert client.simulate_get(f"/roles/show/{uuid4()}").status_code == 404

    def test_malformed_id(self, client: TestClient) -> None:
        assert client.simulate_get("/roles/show/not-a-uuid").status_code == 404


class TestEdit:
    def test_get_prefills_form(self, client: TestClient, fake_uow: FakeUnitOfWork) -> None:
        role = fake_uow.roles.add_role(make_role(enabled={"user:read": True}))
        result = client.simulate_get(f"/roles/edit/{role.id}")
        assert result.status_code == 200
        assert 'value="Administrator"' in result.text
        assert f'action="/roles/edit/{role.id}"' in result.text
        assert "readonly" in result.text

    def test_unknown_id(self, client: TestClient) -> None:
        assert client.simulate_get(f"/roles/edit/{uuid4()}").status_code == 404
        result = _post(client, f"/roles/edit/{uuid4()}", _role_fields("X", "X", {}, "1"))
        assert result.status_code == 404

    def test_post_updates_flags_and_name(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        role = fake_uow.roles.add_role(make_role(enabled={"user:read": True}))
        result = _post(
            client,
            f"/roles/edit/{role.id}",
            _role_fields(
                "ADMIN", "Renamed", {"user:read": False, "user:save": True}, str(role.version)
            ),
        )
        assert result.status_code == 303
        assert result.headers["location"] == f"/roles/show/{role.id}"

        updated = fake_uow.roles.stored(role.id)
        assert updated.role_name == "Renamed"
        assert updated.enabled_permission_codes == ["user:save"]
        assert "Role was updated." in _follow(client, result).text

    def test_post_without_changes_keeps_flags(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        role = fake_uow.roles.add_role(
            make_role(enabled={"user:read": True, "user:save": False})
        )
        _post(
            client,
            f"/roles/edit/{role.id}",
            _role_fields(
                "ADMIN", "Administrator", {"user:read": True, "user:save": False}, "1"
            ),
        )
        updated = fake_uow.roles.stored(role.id)
        assert updated.role_name == "Administrator"
        assert updated.enabled_permission_codes == ["user:read"]

    def test_invalid_post_keeps_input(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        role = fake_uow.roles.add_role(make_role())
        result = _post(
            client, f"/roles/edit/{role.id}", _role_fields("ADMIN", "", {"user:read": True}, "1")
        )
        assert result.headers["location"] == f"/roles/edit/{role.id}"
        assert fake_uow.roles.stored(role.id).version == 1

        page = _follow(client, result)
        assert 'data-field="role_name"' in page.text
        assert "checked" in page.text

    def test_stale_version_conflict(self, client: TestClient, fake_uow: FakeUnitOfWork) -> None:
        role = fake_uow.roles.add_role(make_role())
        fields = _role_fields("ADMIN", "One", {}, "1")
        assert _post(client, f"/roles/edit/{role.id}", fields).status_code == 303
        assert _post(client, f"/roles/edit/{role.id}", fields).status_code == 409


class TestRemove:
    def test_remove_soft_deletes(self, client: TestClient, fake_uow: FakeUnitOfWork) -> None:
        role = fake_uow.roles.add_role(make_role())
        result = client.simulate_post(f"/roles/remove/{role.id}")
        assert result.status_code == 303
        assert result.headers["location"] == "/roles/find"
        assert fake_uow.roles.live() == []
        assert fake_uow.roles.stored(role.id).deleted_at is not None

        assert "Role was deleted." in _follow(client, result).text
        assert client.simulate_get(f"/roles/show/{role.id}").status_code == 404

    def test_remove_unknown(self, client: TestClient) -> None:
        assert client.simulate_post(f"/roles/remove/{uuid4()}").status_code == 404


class TestFind:
    @pytest.fixture(autouse=True)
    def _roles(self, fake_uow: FakeUnitOfWork) -> None:
        for code, name in [("ADMIN", "Administrator"), ("AUDIT", "Auditor"), ("DEV", "Developer")]:
            fake_uow.roles.add_role(make_role(role_code=code, role_name=name))

    def test_lists_first_page(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/find")
        assert result.status_code == 200
        assert "3 role(s)" in result.text
        assert "ADMIN" in result.text
        assert "AUDIT" in result.text
        assert "DEV" not in result.text
        assert "page=2" in result.text

    def test_second_page(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/find", params={"page": "2"})
        assert "DEV" in result.text
        assert "ADMIN" not in result.text

    def test_filters_by_query_string(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/find", params={"role_name": "dev"})
        assert "1 role(s)" in result.text
        assert "/roles/download/roles.csv?role_name=dev" in result.text

    def test_query_string_is_stripped(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/find", params={"role_name": "  dev  "})
        assert "1 role(s)" in result.text
        assert "/roles/download/roles.csv?role_name=dev\"" in result.text

    def test_invalid_query_string_criteria_are_dropped(self, client: TestClient) -> None:
        result = client.simulate_get(
            "/roles/find", params={"role_name": "x" * 101, "role_code": "DEV"}
        )
        assert result.status_code == 200
        assert "1 role(s)" in result.text
        assert "x" * 101 not in result.text

    def test_init_resets_criteria(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/find", params={"role_name": "dev", "init": "true"})
        assert "3 role(s)" in result.text

    def test_post_redirects_with_criteria(self, client: TestClient) -> None:
        result = _post(client, "/roles/find", [("role_code", "DEV"), ("role_name", "")])
        assert result.status_code == 303
        assert result.headers["location"] == "/roles/find?role_code=DEV"

    def test_invalid_post_redirects_with_errors(self, client: TestClient) -> None:
        result = _post(client, "/roles/find", [("role_name", "x" * 101)])
        assert result.headers["location"] == "/roles/find"
        assert 'data-field="role_name"' in _follow(client, result).text


class TestDownload:
    def test_streams_csv(self, client: TestClient, fake_uow: FakeUnitOfWork) -> None:
        for code in ["A", "B", "C"]:
            fake_uow.roles.add_role(
                make_role(role_code=code, role_name=f"Role {code}", enabled={"user:read": True})
            )
        result = client.simulate_get("/roles/download/roles.csv")
        assert result.status_code == 200
        assert result.headers["content-type"] == "text/csv; charset=UTF-8"
        assert result.headers["content-disposition"] == (
            "attachment; filename=\"roles.csv\"; filename*=UTF-8''roles.csv"
        )
        rows = list(csv.reader(io.StringIO(result.text)))
        assert rows[0][:3] == ["id", "role_code", "role_name"]
        assert [r[1] for r in rows[1:]] == ["A", "B", "C"]
        assert all(r[3] == "user:read" for r in rows[1:])

    def test_filters_by_query_string(self, client: TestClient, fake_uow: FakeUnitOfWork) -> None:
        fake_uow.roles.add_role(make_role(role_code="A", role_name="Alpha"))
        fake_uow.roles.add_role(make_role(role_code="B", role_name="Beta"))
        result = client.simulate_get("/roles/download/roles.csv", params={"role_code": "B"})
        rows = list(csv.reader(io.StringIO(result.text)))
        assert [r[1] for r in rows[1:]] == ["B"]

    def test_bad_filename(self, client: TestClient) -> None:
        assert client.simulate_get("/roles/download/roles.txt").status_code == 404

    @pytest.mark.parametrize(
        "path", ["/roles/download/roles.csv\n", "/roles/download/roles.csv%0A", "/roles/download/.csv"]
    )
    def test_filename_must_end_in_csv(self, client: TestClient, path: str) -> None:
        assert client.simulate_get(path).status_code == 404

    def test_invalid_criteria_are_ignored(
        self, client: TestClient, fake_uow: FakeUnitOfWork
    ) -> None:
        fake_uow.roles.add_role(make_role(role_code="A", role_name="Alpha"))
        result = client.simulate_get("/roles/download/roles.csv", params={"role_code": "x" * 51})
        rows = list(csv.reader(io.StringIO(result.text)))
        assert [r[1] for r in rows[1:]] == ["A"]


class TestAuthorities:
    @pytest.mark.parametrize("authorities", [frozenset({ROLE_READ})])
    def test_read_only_user_cannot_save(self, client: TestClient) -> None:
        assert client.simulate_get("/roles/find").status_code == 200
        assert client.simulate_get("/roles/new").status_code == 403
        assert _post(client, "/roles/new", _role_fields("A", "A", {})).status_code == 403

    @pytest.mark.parametrize("authorities", [frozenset()])
    def test_user_without_authorities(self, client: TestClient) -> None:
        result = client.simulate_get("/roles/find")
        assert result.status_code == 403
        assert "role:read" in result.text

    @pytest.mark.parametrize("authorities", [None])
    def test_unauthenticated(self, client: TestClient) -> None:
        assert client.simulate_get("/roles/find").status_code == 401
