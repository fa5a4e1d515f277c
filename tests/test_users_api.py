from app.core.roles import Role
from app.models import User


class TestListUsers:
    def test_admin_and_manager_can_list(self, client, admin, manager, cashier, auth_headers):
        for user in (admin, manager):
            response = client.get("/users/", headers=auth_headers(user))
            assert response.status_code == 200
            body = response.json()
            assert body["total"] == 3
            assert all("password_hash" not in u for u in body["users"])

    def test_cashier_cannot_list(self, client, cashier, auth_headers):
        response = client.get("/users/", headers=auth_headers(cashier))

        assert response.status_code == 403
        assert response.json()["error"] == "ForbiddenError"

    def test_filters_and_pagination(self, client, admin, manager, cashier, make_user, auth_headers):
        make_user("cashier2@pos.com", Role.CASHIER)
        headers = auth_headers(admin)

        by_role = client.get("/users/", params={"role": "cashier"}, headers=headers).json()
        assert by_role["total"] == 2
        assert {u["role"] for u in by_role["users"]} == {"cashier"}

        page = client.get("/users/", params={"page": 2, "limit": 3}, headers=headers).json()
        assert page["total"] == 4
        assert len(page["users"]) == 1

    def test_filter_by_branch(self, client, admin, make_user, branch, auth_headers):
        make_user("bob@pos.com", Role.CASHIER, branch_id=branch.id)

        body = client.get(
            "/users/", params={"branch_id": branch.id}, headers=auth_headers(admin)
        ).json()

        assert [u["email"] for u in body["users"]] == ["bob@pos.com"]


class TestCreateUser:
    NEW_MANAGER = {
        "name": "Chef",
        "email": "chef@pos.com",
        "password": "Secret123",
        "role": "manager",
    }

    def test_admin_creates_user(self, client, admin, branch, auth_headers):
        payload = dict(self.NEW_MANAGER, branchId=branch.id)
        response = client.post("/users/", json=payload, headers=auth_headers(admin))

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "manager"
        assert body["branch_id"] == branch.id
        assert "password_hash" not in body

    def test_manager_cannot_create(self, client, manager, auth_headers):
        response = client.post("/users/", json=self.NEW_MANAGER, headers=auth_headers(manager))
        assert response.status_code == 403

    def test_anonymous_cannot_create(self, client):
        assert client.post("/users/", json=self.NEW_MANAGER).status_code == 401

    def test_duplicate_email(self, client, admin, manager, auth_headers):
        payload = dict(self.NEW_MANAGER, email="manager@pos.com")
        response = client.post("/users/", json=payload, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["error"] == "ConflictError"


class TestGetUser:
    def test_self_access(self, client, cashier, auth_headers):
        response = client.get(f"/users/{cashier.id}", headers=auth_headers(cashier))

        assert response.status_code == 200
        assert response.json()["email"] == "cashier@pos.com"

    def test_cashier_cannot_read_others(self, client, cashier, admin, auth_headers):
        response = client.get(f"/users/{admin.id}", headers=auth_headers(cashier))
        assert response.status_code == 403

    def test_manager_reads_others(self, client, cashier, manager, auth_headers):
        response = client.get(f"/users/{cashier.id}", headers=auth_headers(manager))
        assert response.status_code == 200

    def test_unknown_user(self, client, admin, auth_headers):
        assert client.get("/users/9999", headers=auth_headers(admin)).status_code == 404


class TestUpdateUser:
    def test_admin_updates_role_and_branch(self, client, db, admin, cashier, branch, auth_headers):
        response = client.put(
            f"/users/{cashier.id}",
            json={"role": "manager", "branchId": branch.id, "name": "Chef"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "manager"
        assert body["branch_id"] == branch.id
        assert body["name"] == "Chef"

    def test_update_password_rehashes(self, client, admin, cashier, auth_headers):
        client.put(
            f"/users/{cashier.id}",
            json={"password": "Fresh123"},
            headers=auth_headers(admin),
        )

        response = client.post(
            "/auth/login", json={"email": "cashier@pos.com", "password": "Fresh123"}
        )
        assert response.status_code == 200

    def test_duplicate_email_conflicts(self, client, admin, cashier, manager, auth_headers):
        response = client.put(
            f"/users/{cashier.id}",
            json={"email": "MANAGER@pos.com"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "ConflictError"

    def test_unknown_branch(self, client, admin, cashier, auth_headers):
        response = client.put(
            f"/users/{cashier.id}", json={"branch_id": 77}, headers=auth_headers(admin)
        )
        assert response.status_code == 404

    def test_manager_cannot_update(self, client, manager, cashier, auth_headers):
        response = client.put(
            f"/users/{cashier.id}", json={"role": "admin"}, headers=auth_headers(manager)
        )
        assert response.status_code == 403

    def test_deactivated_user_cannot_login(self, client, admin, cashier, auth_headers):
        client.put(f"/users/{cashier.id}", json={"is_active": False}, headers=auth_headers(admin))

        response = client.post(
            "/auth/login", json={"email": "cashier@pos.com", "password": "Secret123"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Identifiants invalides"


class TestDeleteUser:
    def test_admin_deletes_user(self, client, db, admin, cashier, auth_headers):
        user_id = cashier.id
        response = client.delete(f"/users/{user_id}", headers=auth_headers(admin))

        assert response.status_code == 200
        db.expire_all()
        assert db.query(User).filter(User.id == user_id).first() is None

    def test_admin_cannot_delete_self(self, client, admin, auth_headers):
        response = client.delete(f"/users/{admin.id}", headers=auth_headers(admin))
        assert response.status_code == 400

    def test_cashier_cannot_delete(self, client, admin, cashier, auth_headers):
        response = client.delete(f"/users/{admin.id}", headers=auth_headers(cashier))
        assert response.status_code == 403

    def test_unknown_user(self, client, admin, auth_headers):
        assert client.delete("/users/9999", headers=auth_headers(admin)).status_code == 404
