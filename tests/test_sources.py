import csv
import tempfile
import unittest
from pathlib import Path

from wraffle.draw import RaffleItem
from wraffle.sources import (
    NO_WINNER_LABEL,
    RaffleSinkError,
    RaffleSourceError,
    parse_item_rows,
    read_items_csv,
    result_rows,
    write_results_csv,
)


class ParseItemRowsTests(unittest.TestCase):
    def test_valid_rows(self):
        items = parse_item_rows([["Lamp", "20", " ann", "bo "], ["Mug", " 5 ", "ann"]])
        self.assertEqual(
            items,
            [
                RaffleItem("Lamp", 20, ("ann", "bo")),
                RaffleItem("Mug", 5, ("ann",)),
            ],
        )

    def test_malformed_rows_are_skipped_with_warning(self):
        rows = [
            ["TooShort", "3"],
            ["BadValue", "ten", "ann"],
            ["Good", "1", "ann"],
        ]
        with self.assertLogs("wraffle.sources", level="WARNING") as logs:
            items = parse_item_rows(rows)
        self.assertEqual([item.name for item in items], ["Good"])
        self.assertEqual(len(logs.output), 2)
        self.assertIn("row 1", logs.output[0])
        self.assertIn("row 2", logs.output[1])

    def test_only_plain_ascii_integers_are_item_values(self):
        rows = [
            ["Underscore", "1_000", "ann"],
            ["Arabic", "٥", "ann"],
            ["Float", "2.5", "ann"],
            ["Signed", "+5", "ann"],
            ["Negative", "-3", "ann"],
        ]
        with self.assertLogs("wraffle.sources", level="WARNING") as logs:
            items = parse_item_rows(rows)
        self.assertEqual(
            [(item.name, item.value) for item in items], [("Signed", 5), ("Negative", -3)]
        )
        self.assertEqual(len(logs.output), 3)

    def test_duplicate_item_names_keep_first_row(self):
        rows = [["Lamp", "1", "ann"], ["Lamp", "2", "bo"]]
        with self.assertLogs("wraffle.sources", level="WARNING") as logs:
            items = parse_item_rows(rows)
        self.assertEqual(items, [RaffleItem("Lamp", 1, ("ann",))])
        self.assertIn("duplicate item name", logs.output[0])

    def test_row_with_only_blank_participants_yields_empty_pool(self):
        items = parse_item_rows([["Ghost", "4", "", "  "]])
        self.assertEqual(items[0].participant_names, ())


class CsvFileTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_read_items_csv_allows_varying_field_counts(self):
        path = self.tmpdir / "raffle_data.csv"
        path.write_text("Lamp,20,ann,bo,cy\nMug,5,ann\nBroken\n", encoding="utf-8")
        items = read_items_csv(path)
        self.assertEqual([item.name for item in items], ["Lamp", "Mug"])
        self.assertEqual(items[0].participant_names, ("ann", "bo", "cy"))

    def test_missing_source_raises(self):
        with self.assertRaises(RaffleSourceError):
            read_items_csv(self.tmpdir / "missing.csv")

    def test_write_results_uses_no_winner_label(self):
        items = [RaffleItem("Mug", 5, ("ann",)), RaffleItem("Ghost", 7, ())]
        path = self.tmpdir / "raffle_results.csv"
        write_results_csv(path, items, {"Mug": "ann"})

        with open(path, newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))
        self.assertEqual(rows, [["Item", "Winner"], ["Mug", "ann"], ["Ghost", NO_WINNER_LABEL]])

    def test_unwritable_sink_raises(self):
        items = [RaffleItem("Mug", 5, ("ann",))]
        with self.assertRaises(RaffleSinkError):
            write_results_csv(self.tmpdir / "no-such-dir" / "out.csv", items, {})

    def test_result_rows(self):
        items = [RaffleItem("A", 1, ()), RaffleItem("B", 2, ("x",))]
        self.assertEqual(result_rows(items, {"B": "x"}), [["A", "No winner"], ["B", "x"]])


if __name__ == "__main__":
    unittest.main()
