import pytest

from storefront.app import create_app
from storefront.core.config import AppConfig, Config, DatabaseConfig, SecurityConfig
from storefront.db import init_db

TEST_SECRET = "test-only-signing-key-0123456789abcdef"
ADMIN_EMAIL = "owner@storefront.io"
ADMIN_PASSWORD = "correct horse battery staple"


@pytest.fixture
def uploads_dir(tmp_path):
    directory = tmp_path / "uploads"
    directory.mkdir()
    (directory / "banner.txt").write_text("summer sale")
    return directory


@pytest.fixture
def config(uploads_dir):
    return Config(
        database=DatabaseConfig(url="sqlite://"),
        security=SecurityConfig(
            jwt_secret_key=TEST_SECRET,
            password_hash_rounds=4,  # bcrypt minimum, keeps the suite fast
        ),
        app=AppConfig(
            environment="test",
            uploads_dir=str(uploads_dir),
            domain_name="storefront.io",
        ),
    )


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    engine = app.extensions["db_engine"]
    init_db(engine)
    yield app
    engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def engine(app):
    return app.extensions["db_engine"]


@pytest.fixture
def auth_service(app):
    return app.extensions["auth_service"]


@pytest.fixture
def admin(auth_service):
    return auth_service.create_admin(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def logged_in_client(client, admin):
    response = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
