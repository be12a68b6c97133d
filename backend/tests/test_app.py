def test_health(client):
    response = client.get("/api/v1/health")

    assert response.get_json() == {"status": "ok", "service": "hospitium-api"}


def test_openapi_document_is_served(client):
    response = client.get("/openapi/hospitium.yaml")

    assert response.status_code == 200
    assert response.mimetype == "application/yaml"
    assert b"Hospitium Research API" in response.data


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/v1/nowhere")

    assert response.status_code == 404
    assert response.get_json()["success"] is False
