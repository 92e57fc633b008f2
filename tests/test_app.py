from storefront.core.cors import CORS_REJECTED_MESSAGE


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "env": "test"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["database"] == "reachable"


def test_uploads_served(client):
    response = client.get("/uploads/banner.txt")
    assert response.status_code == 200
    assert response.data == b"summer sale"


def test_missing_upload_is_json_404(client):
    response = client.get("/uploads/nope.png")
    assert response.status_code == 404
    assert response.get_json()["code"] == "NOT_FOUND"


def test_unknown_route_is_json_404(client):
    assert client.get("/does-not-exist").get_json()["code"] == "NOT_FOUND"


def test_wrong_method_is_json_405(client):
    response = client.get("/admin/login")
    assert response.status_code == 405
    assert "error" in response.get_json()


# ---------------------------------------------------------------------- #
# CORS                                                                     #
# ---------------------------------------------------------------------- #
def test_request_without_origin_passes(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Access-Control-Allow-Origin" not in response.headers


def test_dev_origin_allowed_with_credentials(client):
    response = client.get("/", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert response.headers["Access-Control-Allow-Credentials"] == "true"
    assert "Origin" in response.headers["Vary"]


def test_production_domain_variants_allowed(client):
    for origin in ("https://storefront.io", "http://www.storefront.io", "https://www.storefront.io"):
        response = client.get("/", headers={"Origin": origin})
        assert response.headers["Access-Control-Allow-Origin"] == origin


def test_unknown_origin_rejected(client):
    response = client.post("/admin/login", json={}, headers={"Origin": "https://evil.example"})

    assert response.status_code == 403
    assert response.get_json()["error"] == CORS_REJECTED_MESSAGE
    assert "Access-Control-Allow-Origin" not in response.headers


def test_preflight(client):
    response = client.options(
        "/admin/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 204
    assert "POST" in response.headers["Access-Control-Allow-Methods"]
    assert "Content-Type" in response.headers["Access-Control-Allow-Headers"]


# ---------------------------------------------------------------------- #
# CLI                                                                      #
# ---------------------------------------------------------------------- #
def test_create_admin_command(app, auth_service):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "cli@storefront.io"], input="cli password\ncli password\n")

    assert result.exit_code == 0, result.output
    assert "cli@storefront.io" in result.output
    assert auth_service.login("cli@storefront.io", "cli password").admin.email == "cli@storefront.io"


def test_create_admin_command_duplicate(app, admin):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", admin.email], input="pw\npw\n")

    assert result.exit_code != 0
    assert "Email already in use" in result.output


def test_init_db_command_is_idempotent(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "created" in result.output
