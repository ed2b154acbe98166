import pytest
from fastapi.testclient import TestClient

from booking_relay.server import create_app


@pytest.fixture
def build_dir(tmp_path):
    build = tmp_path / "build"
    (build / "static").mkdir(parents=True)
    (build / "index.html").write_text("<html>app shell</html>")
    (build / "static" / "main.js").write_text("console.log('hi')")
    (tmp_path / "secret.txt").write_text("do not serve")
    return build


@pytest.fixture
def spa_client(settings, gateway, mailer, build_dir):
    settings.BUILD_DIR = str(build_dir)
    return TestClient(create_app(settings=settings, gateway=gateway, mailer=mailer))


def test_root_serves_index(spa_client):
    response = spa_client.get("/")

    assert response.status_code == 200
    assert "app shell" in response.text


def test_asset_is_served(spa_client):
    response = spa_client.get("/static/main.js")

    assert response.status_code == 200
    assert "console.log" in response.text


def test_client_side_route_falls_back_to_index(spa_client):
    response = spa_client.get("/booking/confirmed")

    assert response.status_code == 200
    assert "app shell" in response.text


def test_path_outside_build_dir_falls_back_to_index(spa_client):
    response = spa_client.get("/%2E%2E/secret.txt")

    assert response.status_code == 200
    assert "do not serve" not in response.text


def test_api_routes_take_precedence(spa_client):
    assert spa_client.get("/api/razorpay-key").json()["key_id"].startswith("rzp_test_")
    assert spa_client.get("/health").json()["gateway_configured"] is True


def test_without_build_dir_unmatched_routes_404(client):
    assert client.get("/booking/confirmed").status_code == 404
