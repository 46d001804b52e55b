# tests/test_seed_db.py
from scripts.seed_db import apply_seed, parse_entries


class TestSeedPublicAdmins:

    ENTRIES = [
        {"email": "ranchi.municipal@janta.in", "district": "Ranchi", "category": "Municipal"},
        {"email": "bad@janta.in", "district": "Patna", "category": "Municipal"},
        {"email": "ranchi.municipal@janta.in", "district": "Ranchi", "category": "Water Supply"},
    ]

    def test_invalid_entries_are_dropped(self):
        parsed = parse_entries(self.ENTRIES)
        assert [p.district for p in parsed] == ["Ranchi", "Ranchi"]

    def test_dry_run_writes_nothing(self, services):
        assert apply_seed(services.public_admins, parse_entries(self.ENTRIES)) == 0
        assert services.public_admins.list_public_admins() == []

    def test_apply_skips_already_active_emails(self, services):
        written = apply_seed(services.public_admins, parse_entries(self.ENTRIES), apply=True)

        assert written == 1
        admins = services.public_admins.list_public_admins()
        assert [(a["district"], a["category"]) for a in admins] == [("Ranchi", "Municipal")]
