from __future__ import annotations

import unittest

from wraffle.draw import EligibilityPool, RaffleItem, WinRecordStore


class WinRecordStoreTests(unittest.TestCase):
    def test_register_trims_and_keeps_first_seen_order(self) -> None:
        store = WinRecordStore()
        store.register_all(["  bob ", "alice", "bob"])
        self.assertEqual(store.names(), ["bob", "alice"])
        self.assertEqual(store.wins_for("bob"), 0)

    def test_register_rejects_blank_names(self) -> None:
        store = WinRecordStore()
        with self.assertRaises(ValueError):
            store.register("   ")
        with self.assertRaises(TypeError):
            store.register(42)  # type: ignore[arg-type]

    def test_record_win_is_monotonic_and_isolated(self) -> None:
        store = WinRecordStore()
        store.register_all(["x", "y"])
        self.assertEqual(store.record_win("x"), 1)
        self.assertEqual(store.record_win("x"), 2)
        self.assertEqual(store.snapshot(), {"x": 2, "y": 0})

    def test_register_does_not_reset_existing_record(self) -> None:
        store = WinRecordStore()
        store.register("x")
        store.record_win("x")
        record = store.register("x")
        self.assertEqual(record.wins, 1)

    def test_unknown_participant_raises_key_error(self) -> None:
        store = WinRecordStore()
        with self.assertRaises(KeyError):
            store.wins_for("ghost")
        with self.assertRaises(KeyError):
            store.record_win("ghost")

    def test_remove(self) -> None:
        store = WinRecordStore()
        store.register("x")
        self.assertTrue(store.remove("x"))
        self.assertFalse(store.remove("x"))
        self.assertNotIn("x", store)
        self.assertEqual(len(store), 0)


class EligibilityPoolTests(unittest.TestCase):
    def test_duplicates_collapse(self) -> None:
        pool = EligibilityPool(["b", "a", "b "])
        self.assertEqual(pool.names(), ["b", "a"])
        self.assertEqual(len(pool), 2)

    def test_discard(self) -> None:
        pool = EligibilityPool(["a", "b"])
        self.assertTrue(pool.discard("a"))
        self.assertFalse(pool.discard("a"))
        self.assertNotIn("a", pool)
        pool.discard("b")
        self.assertTrue(pool.is_empty())

    def test_eligible_filters_unregistered_names(self) -> None:
        store = WinRecordStore()
        store.register_all(["a", "c"])
        pool = EligibilityPool(["a", "b", "c"])
        self.assertEqual(pool.eligible(store), ["a", "c"])


class RaffleItemTests(unittest.TestCase):
    def test_build_trims_and_drops_blank_and_repeated_names(self) -> None:
        item = RaffleItem.build("Lamp", "15", [" x", "", "y ", "x", "   "])
        self.assertEqual(item.value, 15)
        self.assertEqual(item.participant_names, ("x", "y"))


if __name__ == "__main__":
    unittest.main()
