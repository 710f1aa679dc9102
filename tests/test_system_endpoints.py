def test_health_is_up_by_default(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "UP"
    assert {c["name"]: c["status"] for c in body["checks"]} == {
        "speaker": "UP",
        "database": "UP",
    }


def test_health_follows_update_health_status(client):
    client.post("/updateHealthStatus", params={"isAppDown": "true"})
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "DOWN"

    client.post("/updateHealthStatus", params={"isAppDown": "false"})
    assert client.get("/health").status_code == 200


def test_readiness_probe_ignores_health_flag(client):
    client.post("/updateHealthStatus", params={"isAppDown": "true"})
    assert client.get("/nessProbe").status_code == 200


def test_fault_tolerance_status(client):
    policies = client.get("/system/fault-tolerance").json()["policies"]
    assert set(policies) == {"list", "search", "failing_service"}
    assert policies["list"]["bulkhead"]["max_concurrent"] == 3
    assert policies["search"]["circuit_breaker"]["state"] == "closed"
    assert policies["search"]["circuit_breaker"]["delay_s"] == 5.0
    assert policies["failing_service"]["fallback"] is True
