import base64

import pytest
from fastapi.testclient import TestClient

from qrsign.common.config import Config
from qrsign.core.context import CryptoContext
from qrsign.server.core import SigningServer


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.fixture
def server(context: CryptoContext) -> SigningServer:
    return SigningServer(context=context)


@pytest.fixture
def client(server: SigningServer) -> TestClient:
    return TestClient(server.app)


def test_server_initialization(server: SigningServer) -> None:
    """Test server picks up config defaults."""
    config = Config()
    assert server.server_host == config.SERVER_HOST
    assert server.server_port == config.SERVER_PORT
    assert server.max_document_bytes == config.MAX_DOCUMENT_BYTES
    routes = [route.path for route in server.app.routes]  # type: ignore[attr-defined]
    assert "/health" in routes
    assert "/sign" in routes
    assert "/verify" in routes


def test_server_overrides(context: CryptoContext) -> None:
    server = SigningServer(context=context, server_port=9100, max_document_bytes=5)
    assert server.server_port == 9100  # noqa: PLR2004
    assert server.max_document_bytes == 5  # noqa: PLR2004


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200  # noqa: PLR2004
    assert response.json()["status"] == "ok"


def test_entropy_endpoints(client: TestClient) -> None:
    response = client.get("/entropy")
    assert response.json()["size"] == 0
    assert response.json()["seeded"] is False

    response = client.post("/entropy", json={"samples": list(range(60))})
    status = response.json()
    assert status["size"] == 60  # noqa: PLR2004
    assert status["capacity"] == 2048  # noqa: PLR2004
    assert status["level"] == 30.0  # noqa: PLR2004
    assert status["recent"] == list(range(10, 60))


def test_key_endpoints(client: TestClient) -> None:
    response = client.post("/keys")
    assert response.status_code == 201  # noqa: PLR2004
    pair = response.json()
    assert "private" not in "".join(pair).lower()

    assert client.get("/keys").json()[0]["id"] == pair["id"]
    assert client.get(f"/keys/{pair['id']}").json() == pair
    assert client.get("/keys/ffffffff").status_code == 404  # noqa: PLR2004


def test_private_key_export_refused(client: TestClient) -> None:
    key_id = client.post("/keys").json()["id"]
    assert client.get(f"/keys/{key_id}/private").status_code == 403  # noqa: PLR2004
    assert client.get("/keys/ffffffff/private").status_code == 404  # noqa: PLR2004


def test_sign_and_verify(client: TestClient) -> None:
    pair = client.post("/keys").json()
    response = client.post(
        "/sign",
        json={"key_id": pair["id"], "content": b64(b"hello"), "file_name": "hello.txt"},
    )
    assert response.status_code == 200  # noqa: PLR2004
    signed = response.json()
    assert signed["document"]["file_name"] == "hello.txt"
    assert signed["document"]["public_key_fingerprint"] == pair["id"]

    for payload in (signed["payload"], signed["qr"]):
        response = client.post(
            "/verify",
            json={
                "public_key_pem": pair["public_key_pem"],
                "content": b64(b"hello"),
                "payload": payload,
            },
        )
        assert response.json() == {
            "valid": True,
            "file_hash": signed["document"]["file_hash"],
        }

    response = client.post(
        "/verify",
        json={
            "public_key_pem": pair["public_key_pem"],
            "content": b64(b"hellp"),
            "payload": signed["payload"],
        },
    )
    assert response.status_code == 200  # noqa: PLR2004
    assert response.json()["valid"] is False


def test_sign_unknown_key(client: TestClient) -> None:
    response = client.post("/sign", json={"key_id": "ffffffff", "content": b64(b"x")})
    assert response.status_code == 404  # noqa: PLR2004


def test_verify_malformed_input(client: TestClient) -> None:
    pair = client.post("/keys").json()
    response = client.post(
        "/verify",
        json={
            "public_key_pem": pair["public_key_pem"],
            "content": b64(b"hello"),
            "payload": "abc|def",
        },
    )
    assert response.status_code == 400  # noqa: PLR2004

    response = client.post(
        "/verify",
        json={"public_key_pem": "garbage", "content": b64(b"hello"), "payload": "ab|cd|ef"},
    )
    assert response.status_code == 400  # noqa: PLR2004


def test_bad_content(client: TestClient) -> None:
    key_id = client.post("/keys").json()["id"]
    response = client.post("/sign", json={"key_id": key_id, "content": "***"})
    assert response.status_code == 400  # noqa: PLR2004


def test_document_too_large(context: CryptoContext) -> None:
    client = TestClient(SigningServer(context=context, max_document_bytes=4).app)
    key_id = client.post("/keys").json()["id"]
    response = client.post("/sign", json={"key_id": key_id, "content": b64(b"hello")})
    assert response.status_code == 413  # noqa: PLR2004


def test_seeded_entropy_gate(context: CryptoContext) -> None:
    client = TestClient(SigningServer(context=context, require_seeded_entropy=True).app)
    assert client.post("/keys").status_code == 409  # noqa: PLR2004

    client.post("/entropy", json={"samples": [7] * 200})
    assert client.post("/keys").status_code == 201  # noqa: PLR2004


def test_injected_context_is_used(context: CryptoContext) -> None:
    assert SigningServer(context=context).context is context


def test_entropy_samples_out_of_range(client: TestClient) -> None:
    assert client.post("/entropy", json={"samples": [256]}).status_code == 422  # noqa: PLR2004
    assert client.get("/entropy").json()["size"] == 0
