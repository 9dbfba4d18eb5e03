"""Integration tests for health and system stats."""


class TestHealth:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": "0.1.0", "service": "land-registry"}


class TestStats:
    async def test_counts(self, client, owner_headers, verifier_headers, admin_headers, land_details):
        first = (await client.post("/api/lands", json=land_details, headers=owner_headers)).json()
        await client.post("/api/lands", json=land_details, headers=owner_headers)
        await client.patch(
            f"/api/lands/{first['id']}/status",
            json={"status": "verified"},
            headers=verifier_headers,
        )

        resp = await client.get("/api/system/stats", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == {
            "userCount": 3,
            "verifierCount": 1,
            "landCount": 2,
            "pendingRegistrations": 1,
            "pendingTransfers": 0,
            "verifiedLands": 1,
            "transactionCount": 0,
            "completedTransactions": 0,
        }

    async def test_unknown_route(self, client):
        resp = await client.get("/api/nowhere")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Not Found"}
