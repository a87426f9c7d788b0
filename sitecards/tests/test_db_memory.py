import sys
import unittest
from concurrent.futures import ThreadPoolExecutor

from sitecards.db import CardRecord, InMemoryCardStore


class InMemoryCardStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryCardStore()

    def test_starts_empty(self):
        self.assertEqual(self.store.list_all(), [])

    def test_create_appends_in_arrival_order(self):
        for card_id in ("b", "a", "c"):
            self.store.create(CardRecord(id=card_id, site_name="S", product_name="P"))
        self.assertEqual([c.id for c in self.store.list_all()], ["b", "a", "c"])
        # Repeated reads without mutation keep the same order.
        self.assertEqual([c.id for c in self.store.list_all()], ["b", "a", "c"])

    def test_create_stores_card_as_given(self):
        card = CardRecord(id="1", site_name="Site A", product_name="Widget", notes=None)
        stored = self.store.create(card)
        self.assertEqual(stored, card)
        self.assertEqual(self.store.list_all(), [card])

    def test_duplicate_ids_are_not_rejected(self):
        self.store.create(CardRecord(id="1", site_name="A", product_name="P"))
        self.store.create(CardRecord(id="1", site_name="B", product_name="P"))
        self.assertEqual(len(self.store.list_all()), 2)

    def test_update_replaces_whole_record_in_place(self):
        self.store.create(CardRecord(id="1", site_name="A", product_name="P", notes="old"))
        self.store.create(CardRecord(id="2", site_name="B", product_name="P"))

        result = self.store.update(
            "1", CardRecord(id="ignored", site_name="A2", product_name="P2", status="shipped")
        )

        self.assertEqual(result.id, "1")
        cards = self.store.list_all()
        self.assertEqual([c.id for c in cards], ["1", "2"])
        self.assertEqual(cards[0].site_name, "A2")
        self.assertEqual(cards[0].status, "shipped")
        # No merge with the previous notes.
        self.assertEqual(cards[0].notes, "")
        self.assertEqual(cards[1].site_name, "B")

    def test_update_missing_id_is_silent(self):
        self.store.create(CardRecord(id="1", site_name="A", product_name="P"))
        payload = CardRecord(id="9", site_name="Z", product_name="Z")
        result = self.store.update("9", payload)
        self.assertEqual(result, payload)
        self.assertEqual(len(self.store.list_all()), 1)
        self.assertEqual(self.store.list_all()[0].site_name, "A")

    def test_delete_removes_matching_and_tolerates_missing(self):
        self.store.create(CardRecord(id="1", site_name="A", product_name="P"))
        self.store.create(CardRecord(id="2", site_name="B", product_name="P"))
        self.assertTrue(self.store.delete("1"))
        self.assertEqual([c.id for c in self.store.list_all()], ["2"])
        self.assertTrue(self.store.delete("does-not-exist"))
        self.assertEqual(len(self.store.list_all()), 1)

    def test_reset(self):
        self.store.create(CardRecord(id="1", site_name="A", product_name="P"))
        self.store.reset()
        self.assertEqual(self.store.list_all(), [])


class InMemoryCardStoreConcurrencyTests(unittest.TestCase):
    def setUp(self):
        self._switch_interval = sys.getswitchinterval()
        sys.setswitchinterval(1e-6)

    def tearDown(self):
        sys.setswitchinterval(self._switch_interval)

    def test_concurrent_writers_do_not_lose_cards(self):
        store = InMemoryCardStore()
        workers = 200
        for i in range(workers):
            store.create(CardRecord(id=f"edit-{i}", site_name="old", product_name="P"))
            store.create(CardRecord(id=f"gone-{i}", site_name="old", product_name="P"))

        def churn(i):
            store.create(CardRecord(id=f"new-{i}", site_name="S", product_name="P"))
            store.update(f"edit-{i}", CardRecord(id=None, site_name="new", product_name="P"))
            store.delete(f"gone-{i}")

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(churn, range(workers)))

        cards = {c.id: c for c in store.list_all()}
        self.assertEqual(len(cards), 2 * workers)
        for i in range(workers):
            self.assertIn(f"new-{i}", cards)
            self.assertNotIn(f"gone-{i}", cards)
            self.assertEqual(cards[f"edit-{i}"].site_name, "new")


if __name__ == "__main__":
    unittest.main()
