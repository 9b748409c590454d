"""
Tests for decision status changes and the coupled fundedDate field.
"""
import unittest
from datetime import datetime, timezone

from schemas.approval import DecisionStatus, UnderwritingDecisionRaw
from services.status import apply_status_change, parse_status, status_updates

NOW = datetime(2024, 7, 1, 15, 0, tzinfo=timezone.utc)


class TestStatusUpdates(unittest.TestCase):
    def test_entering_funded_stamps_funded_date(self):
        change = status_updates({"id": "d1", "status": "approved"}, "funded", now=NOW)
        self.assertTrue(change.sets_funded_date)
        self.assertEqual(change.to_updates(), {"status": "funded", "fundedDate": NOW})

    def test_funded_date_defaults_to_current_time(self):
        before = datetime.now(timezone.utc)
        change = status_updates({"id": "d1", "status": "approved"}, DecisionStatus.FUNDED)
        self.assertGreaterEqual(change.funded_date, before)

    def test_existing_funded_date_kept(self):
        decision = {"id": "d1", "status": "approved", "fundedDate": "2024-05-01T00:00:00Z"}
        change = status_updates(decision, "funded", now=NOW)
        self.assertFalse(change.sets_funded_date)
        self.assertEqual(change.to_updates(), {"status": "funded"})

    def test_leaving_funded_clears_funded_date(self):
        decision = {"id": "d1", "status": "funded", "fundedDate": "2024-05-01T00:00:00Z"}
        change = status_updates(decision, "approved", now=NOW)
        self.assertTrue(change.clears_funded_date)
        self.assertEqual(change.to_updates(), {"status": "approved", "fundedDate": None})

    def test_other_moves_touch_status_only(self):
        for start, target in [("pending", "approved"), ("approved", "declined"), ("declined", "unqualified")]:
            with self.subTest(start=start, target=target):
                change = status_updates({"id": "d", "status": start}, target, now=NOW)
                self.assertEqual(change.to_updates(), {"status": target})

    def test_any_transition_allowed(self):
        for target in DecisionStatus:
            with self.subTest(target=target):
                self.assertEqual(status_updates({"status": "declined"}, target, now=NOW).status, target)

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValueError):
            status_updates({"id": "d1"}, "archived")
        with self.assertRaises(ValueError):
            parse_status("")

    def test_status_text_normalized(self):
        self.assertIs(parse_status(" Funded "), DecisionStatus.FUNDED)


class TestApplyStatusChange(unittest.TestCase):
    def test_returns_updated_copy(self):
        original = UnderwritingDecisionRaw(id="d1", status="approved")
        updated = apply_status_change(original, "funded", now=NOW)
        self.assertEqual(updated.status, "funded")
        self.assertEqual(updated.funded_date, NOW)
        self.assertEqual(original.status, "approved")
        self.assertIsNone(original.funded_date)

    def test_clears_on_leaving_funded(self):
        updated = apply_status_change({"id": "d1", "status": "funded", "fundedDate": NOW}, "pending")
        self.assertEqual(updated.status, "pending")
        self.assertIsNone(updated.funded_date)

    def test_logs_transition(self):
        with self.assertLogs("services.status", level="INFO") as logs:
            apply_status_change({"id": "d9", "status": "pending"}, "approved")
        self.assertIn("d9", logs.output[0])


if __name__ == "__main__":
    unittest.main()
