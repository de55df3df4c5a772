def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["uptime"] >= 0
    assert body["timestamp"]


def test_ready_reports_store_backend(client):
    r = client.get("/api/health/ready")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"
    assert r.json()["store"] == "memory"


def test_openapi_lists_routes(client):
    paths = client.get("/openapi.json").json()["paths"]
    for path in ("/api/workflows", "/api/workflows/validate", "/api/rpc/test", "/api/payments/verify",
                 "/api/bags/trending", "/api/ai/generate-workflow"):
        assert path in paths, path
