from fastapi.testclient import TestClient


def test_request_without_origin_is_allowed(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


def test_allowed_subdomain_receives_cors_headers(client: TestClient) -> None:
    response = client.get("/", headers={"Origin": "https://api.tarnglobal.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://api.tarnglobal.com"


def test_disallowed_origin_is_rejected_before_routing(client: TestClient) -> None:
    response = client.post(
        "/answer-question",
        json={"question": "hello"},
        headers={"Origin": "https://eviltarnglobal.com"},
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Origin not allowed"}


def test_plain_http_subdomain_is_rejected(client: TestClient) -> None:
    response = client.get("/", headers={"Origin": "http://api.tarnglobal.com"})

    assert response.status_code == 403


def test_preflight_for_allowed_origin(client: TestClient) -> None:
    response = client.options(
        "/upload-documents",
        headers={
            "Origin": "https://tarnglobal.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type, Authorization",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://tarnglobal.com"
    assert response.headers["access-control-allow-methods"] == "GET, POST"


def test_preflight_rejects_unsupported_method(client: TestClient) -> None:
    response = client.options(
        "/upload-documents",
        headers={
            "Origin": "https://tarnglobal.com",
            "Access-Control-Request-Method": "DELETE",
        },
    )

    assert response.status_code == 400
