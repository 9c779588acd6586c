# File: /tests/test_router_smoke.py | Version: 2.0 | Path: /tests/test_router_smoke.py
def test_openapi_has_core_routes(client):
    # Ask FastAPI for its OpenAPI schema and verify key routes exist
    r = client.get("/openapi.json")
    assert r.status_code == 200, r.text
    paths = r.json().get("paths", {})

    app_base = "/apps/spaces/{spaceID}/applications/{appName}/deployments/{deployName}"
    expected = {
        "/spaces": ["post"],
        "/spaces/{space_id}": ["get"],
        "/spaces/{space_id}/workitemtypes": ["get", "post"],
        "/spaces/{space_id}/workitemtypes/{wit_id}": ["get"],
        "/apps/spaces/{spaceID}": ["get"],
        "/apps/spaces/{spaceID}/applications/{appName}": ["get"],
        app_base: ["get"],
        app_base + "/stats": ["get"],
        app_base + "/statseries": ["get"],
        app_base + "/control": ["put"],
        "/apps/spaces/{spaceID}/environments": ["get"],
        "/apps/environments/{envName}": ["get"],
        "/apps/environments/{envName}/applications/{appName}/pods": ["get"],
        "/auth/login": ["post"],
        "/healthz": ["get"],
    }

    missing = []
    for p, methods in expected.items():
        if p not in paths:
            missing.append(f"{p} (missing path)")
            continue
        present = {m.lower() for m in paths[p].keys()}
        for m in methods:
            if m not in present:
                missing.append(f"{p} missing {m.upper()}")

    assert not missing, "Missing routes: " + ", ".join(missing)


def test_openapi_declares_jwt_scheme(client):
    schemes = client.get("/openapi.json").json()["components"]["securitySchemes"]
    assert "jwt" in schemes
