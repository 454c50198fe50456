"""Tests per le API di amministrazione e per i ruoli di default."""

from app.services.admin_service import PAGE_PATHS, seed_default_roles
from app.services.results import Ok


class TestUsers:
    def test_list_users_with_roles(self, client, seed):
        admin = seed.role("ADMIN")
        seed.user("Ana", "Silva", "ana@example.com", role=admin)
        seed.user("Bruno", None, "bruno@example.com")

        body = client.get("/api/admin/users").get_json()

        assert body["success"] is True
        users = body["payload"]
        assert [u["full_name"] for u in users] == ["Ana Silva", "Bruno"]
        assert users[0]["role_name"] == "ADMIN"
        assert users[1]["role_name"] is None


class TestRolePermissions:
    def test_get_permissions_map(self, client, seed):
        role = seed.role("PRODUCAO", {"/producao": True, "/definicoes/armazens": False})
        body = client.get("/api/admin/role-permissions", query_string={"roleId": role.id}).get_json()
        assert body["payload"] == {"/producao": True, "/definicoes/armazens": False}

    def test_role_id_required(self, client):
        assert client.get("/api/admin/role-permissions").status_code == 400
        assert client.get("/api/admin/role-permissions?roleId=abc").status_code == 400

    def test_unknown_role(self, client, app):
        assert client.get("/api/admin/role-permissions?roleId=42").status_code == 404

    def test_put_upserts(self, client, seed):
        role = seed.role("PRODUCAO", {"/producao": False})
        response = client.put(
            "/api/admin/role-permissions",
            json={"roleId": role.id, "permissions": {"/producao": True, "/definicoes/feriados": True}},
        )
        assert response.status_code == 200
        assert response.get_json()["payload"] == {"/definicoes/feriados": True, "/producao": True}

    def test_put_requires_permissions(self, client, seed):
        role = seed.role()
        response = client.put("/api/admin/role-permissions", json={"roleId": role.id})
        assert response.status_code == 400


class TestSeedRoles:
    def test_seed_is_idempotent(self, app):
        first = seed_default_roles()
        second = seed_default_roles()
        assert isinstance(first, Ok)
        assert first.value == second.value

    def test_producao_only_sees_production(self, client, app):
        roles = seed_default_roles().value
        body = client.get("/api/admin/role-permissions", query_string={"roleId": roles["PRODUCAO"]}).get_json()
        permissions = body["payload"]
        assert set(permissions) == set(PAGE_PATHS)
        assert permissions["/producao/logistica"] is True
        assert permissions["/definicoes/armazens"] is False
