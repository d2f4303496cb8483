def test_list_modules(client):
    response = client.get("/api/admin/modules")
    assert response.status_code == 200
    modules = {m["id"]: m for m in response.json()["modules"]}
    assert modules["orders"]["enabled"] is True
    assert modules["fraud-check"]["enabled"] is False
    assert modules["fraud-check"]["purchased"] is False


def test_purchase_then_enable(client):
    response = client.post("/api/admin/modules", json={"moduleId": "menus", "action": "purchase"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["module"]["purchased"] is True
    assert body["module"]["enabled"] is False

    response = client.post("/api/admin/modules", json={"moduleId": "menus", "action": "enable"})
    assert response.json()["module"]["enabled"] is True

    status = client.get("/api/admin/modules/status", params={"modules": "menus,analytics"})
    assert status.json() == {"status": {"menus": True, "analytics": False}}


def test_enable_without_purchase_is_400(client):
    response = client.post("/api/admin/modules", json={"moduleId": "menus", "action": "enable"})
    assert response.status_code == 400
    assert "purchased" in response.json()["detail"]


def test_disable_core_module_is_403(client):
    response = client.post("/api/admin/modules", json={"moduleId": "orders", "action": "disable"})
    assert response.status_code == 403


def test_unknown_module_is_404(client):
    response = client.post("/api/admin/modules", json={"moduleId": "nope", "action": "purchase"})
    assert response.status_code == 404


def test_invalid_action_is_400(client):
    response = client.post("/api/admin/modules", json={"moduleId": "menus", "action": "delete"})
    assert response.status_code == 400


def test_patch_settings_merges(client):
    client.post("/api/admin/modules", json={"moduleId": "whatsapp-marketing", "action": "purchase"})
    client.patch(
        "/api/admin/modules",
        json={"moduleId": "whatsapp-marketing", "settings": {"apiKey": "k"}},
    )
    response = client.patch(
        "/api/admin/modules",
        json={"moduleId": "whatsapp-marketing", "settings": {"apiUrl": "https://example.test"}},
    )
    assert response.status_code == 200
    assert response.json()["module"]["settings"] == {"apiKey": "k", "apiUrl": "https://example.test"}


def test_patch_settings_requires_purchase(client):
    response = client.patch("/api/admin/modules", json={"moduleId": "menus", "settings": {"a": 1}})
    assert response.status_code == 400


def test_status_without_filter_lists_enabled(client, enable_module):
    enable_module("analytics")
    response = client.get("/api/admin/modules/status")
    assert response.json() == {"enabled": ["dashboard", "orders", "products", "analytics"]}
