"""
HTTP surface tests: request/response shapes and error status codes.
Run from repo root: python -m pytest tests/test_api.py -v
"""
import unittest

from fastapi.testclient import TestClient

from main import app

LEGACY_DECISION = {
    "id": "d1",
    "status": "approved",
    "businessName": "Acme Corp",
    "advanceAmount": "10000",
    "lender": "Y",
    "approvalDate": "2024-03-15",
    "additionalApprovals": [{"lender": "X", "amount": "5000"}],
}


class TestFundingProfileApi(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_prime_borrower(self):
        resp = self.client.post(
            "/api/funding-profile",
            json={"timeInBusinessMonths": 36, "monthlyRevenue": 50000, "creditScore": 700, "industry": "Retail"},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["tier"], "Prime Borrower")
        self.assertEqual(body["gate"], "prime_borrower")
        self.assertFalse(body["isFoundationBuilding"])
        self.assertNotIn("foundationCTA", body)

    def test_junk_input_is_not_rejected(self):
        resp = self.client.post("/api/funding-profile", json={"creditScore": "abc", "monthlyRevenue": None})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["gate"], "foundation_general")
        self.assertTrue(body["isFoundationBuilding"])
        self.assertIn("foundationCTA", body)

    def test_gates_listing(self):
        resp = self.client.post(
            "/api/funding-profile/gates",
            json={"timeInBusinessMonths": 8, "monthlyRevenue": 20000, "creditScore": 700},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["gates"][:2], ["working_capital", "startup_capital"])

    def test_camel_case_wire_keys(self):
        applicant = self.client.post("/api/funding-profile/gates", json={"timeInBusiness": 3}).json()["applicant"]
        self.assertEqual(
            set(applicant),
            {"monthlyRevenue", "creditScore", "timeInBusinessMonths", "industry", "requestedAmount"},
        )
        body = self.client.post("/api/funding-profile", json={}).json()
        for key in ("maxAmount", "rateDescriptor", "isFoundationBuilding", "foundationReason",
                    "alternativeOptions", "foundationCTA"):
            self.assertIn(key, body)


class TestDecisionsApi(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_approvals(self):
        body = self.client.post("/api/decisions/approvals", json=LEGACY_DECISION).json()
        self.assertEqual([a["id"] for a in body["approvals"]], ["primary-d1", "migrated-0"])
        self.assertEqual(body["best"]["lender"], "Y")
        self.assertEqual([o["lender"] for o in body["others"]], ["X"])
        self.assertTrue(body["needsMigration"])
        self.assertTrue(body["mostRecentApprovalDate"].startswith("2024-03-15T00:00:00"))

    def test_migrate(self):
        body = self.client.post("/api/decisions/migrate", json=LEGACY_DECISION).json()
        self.assertEqual(body["schemaVersion"], 2)
        self.assertTrue(body["additionalApprovals"][0]["isPrimary"])

    def test_sort_with_summary(self):
        decisions = [
            {"id": "a", "status": "funded", "approvalDate": "2024-01-01", "advanceAmount": "1000"},
            {"id": "b", "status": "approved", "approvalDate": "2024-02-01"},
            {"id": "c", "status": "funded", "approvalDate": "2024-03-01", "advanceAmount": "2000"},
        ]
        body = self.client.post("/api/decisions/sort", json={"decisions": decisions, "status": "funded"}).json()
        self.assertEqual([d["id"] for d in body["decisions"]], ["c", "a"])
        self.assertEqual(body["summary"], {"totalFunded": 2, "totalAmount": 3000.0, "totalApproved": 1})

    def test_sort_unknown_status(self):
        resp = self.client.post("/api/decisions/sort", json={"decisions": [], "status": "archived"})
        self.assertEqual(resp.status_code, 400)

    def test_status_to_funded(self):
        resp = self.client.post(
            "/api/decisions/status",
            json={"decision": {"id": "d1", "status": "approved"}, "status": "funded"},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "funded")
        self.assertIsInstance(body["fundedDate"], str)

    def test_status_leaving_funded(self):
        resp = self.client.post(
            "/api/decisions/status",
            json={"decision": {"id": "d1", "status": "funded", "fundedDate": "2024-01-01"}, "status": "declined"},
        )
        self.assertEqual(resp.json(), {"status": "declined", "fundedDate": None})

    def test_status_unknown(self):
        resp = self.client.post("/api/decisions/status", json={"decision": {}, "status": "archived"})
        self.assertEqual(resp.status_code, 400)

    def test_approval_update(self):
        approvals = [{"id": "appr-0", "lender": "Alpha", "advanceAmount": "20000", "isPrimary": True}]
        resp = self.client.post(
            "/api/decisions/approvals/update",
            json={"approvals": approvals, "newApproval": {"lender": "Beta", "advanceAmount": "30000"}, "makePrimary": True},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["schemaVersion"], 2)
        self.assertEqual(body["lender"], "Beta")
        self.assertEqual([a["lender"] for a in body["additionalApprovals"]], ["Beta", "Alpha"])

    def test_approval_update_unknown_primary(self):
        resp = self.client.post("/api/decisions/approvals/update", json={"approvals": [], "primaryId": "missing"})
        self.assertEqual(resp.status_code, 404)

    def test_approval_update_duplicate_id(self):
        approvals = [{"id": "appr-0", "lender": "Alpha", "isPrimary": True}]
        resp = self.client.post(
            "/api/decisions/approvals/update",
            json={"approvals": approvals, "newApproval": {"id": "appr-0"}},
        )
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
