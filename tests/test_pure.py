import os
import sys
import unittest
from decimal import Decimal

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from parfum_tui.api.models import Perfume  # noqa: E402
from parfum_tui.utils.pure import (  # noqa: E402
    CatalogFilter,
    brands_of,
    filter_perfumes,
    format_currency,
    format_date,
    generate_markdown_table,
    status_label,
)

CATALOG = [
    Perfume(1, "Amber Night", Decimal("150000"), 4, "Lumi", "warm woody amber", (), "2025-01-01T00:00:00"),
    Perfume(2, "Blue Rain", Decimal("90000"), 0, "Oase", "fresh aquatic", (), "2025-03-01T00:00:00"),
    Perfume(3, "Citrus Dawn", Decimal("120000"), 9, "Lumi", "bright citrus", (), "2025-02-01T00:00:00"),
    Perfume(4, "Dusk", Decimal("300000"), 2, None, "smoky oud", (), None),
]


def ids(perfumes):
    return [p.id for p in perfumes]


class FormattingTestCase(unittest.TestCase):
    def test_format_currency(self):
        self.assertEqual(format_currency(45000), "Rp45.000")
        self.assertEqual(format_currency(Decimal("1234567")), "Rp1.234.567")
        self.assertEqual(format_currency("300000.00"), "Rp300.000")
        self.assertEqual(format_currency(None), "Rp0")
        self.assertEqual(format_currency("n/a"), "Rp0")
        self.assertEqual(format_currency(Decimal("NaN")), "Rp0")
        self.assertEqual(format_currency("-Infinity"), "Rp0")

    def test_status_label(self):
        self.assertEqual(status_label("paid"), "Awaiting Verification")
        self.assertEqual(status_label("verified"), "Verified")
        self.assertEqual(status_label("something-new"), "Pending")

    def test_format_date(self):
        self.assertEqual(format_date("2025-01-05T10:30:00"), "05 Jan 2025 10:30")
        self.assertEqual(format_date(None), "-")
        self.assertEqual(format_date("yesterday"), "yesterday")

    def test_markdown_table(self):
        md = generate_markdown_table(["A", "B"], [[1, "x|y"]], ["l", "r"])
        self.assertEqual(md, "| A | B |\n| :--- | ---: |\n| 1 | x\\|y |")

        self.assertEqual(generate_markdown_table(["A"], []), "")

        headless = generate_markdown_table(None, [["k", "v"], ["a", "b"]], ["l", "l"])
        self.assertTrue(headless.startswith("| k | v |"))

        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [[1, 2]], ["l"])


class CatalogFilterTestCase(unittest.TestCase):
    def test_default_is_newest_first(self):
        self.assertEqual(ids(filter_perfumes(CATALOG, CatalogFilter())), [2, 3, 1, 4])

    def test_search_is_case_insensitive_over_fields(self):
        self.assertEqual(ids(filter_perfumes(CATALOG, CatalogFilter(search="AMBER"))), [1])
        self.assertEqual(ids(filter_perfumes(CATALOG, CatalogFilter(search="oase"))), [2])
        self.assertEqual(ids(filter_perfumes(CATALOG, CatalogFilter(search="oud"))), [4])
        self.assertEqual(filter_perfumes(CATALOG, CatalogFilter(search="vanilla")), [])

    def test_brand_and_price_range(self):
        flt = CatalogFilter(brand="Lumi", min_price="130000", sort="price-low")
        self.assertEqual(ids(filter_perfumes(CATALOG, flt)), [1])

        flt = CatalogFilter(max_price="120000", sort="price-low")
        self.assertEqual(ids(filter_perfumes(CATALOG, flt)), [2, 3])

    def test_bad_price_bounds_are_ignored(self):
        flt = CatalogFilter(min_price="cheap", max_price="", sort="name-az")
        self.assertEqual(ids(filter_perfumes(CATALOG, flt)), [1, 2, 3, 4])

    def test_non_finite_price_bounds_are_ignored(self):
        flt = CatalogFilter(min_price="NaN", max_price="Infinity", sort="name-az")
        self.assertEqual(ids(filter_perfumes(CATALOG, flt)), [1, 2, 3, 4])

    def test_sorting(self):
        def by(sort):
            return ids(filter_perfumes(CATALOG, CatalogFilter(sort=sort)))

        self.assertEqual(by("price-low"), [2, 3, 1, 4])
        self.assertEqual(by("price-high"), [4, 1, 3, 2])
        self.assertEqual(by("name-az"), [1, 2, 3, 4])
        self.assertEqual(by("name-za"), [4, 3, 2, 1])

    def test_active_count_and_brands(self):
        self.assertEqual(CatalogFilter().active_count, 0)
        self.assertEqual(CatalogFilter(search="a", brand="Lumi", sort="name-az").active_count, 2)
        self.assertEqual(brands_of(CATALOG), ["Lumi", "Oase"])

    def test_input_is_not_mutated(self):
        before = list(CATALOG)
        filter_perfumes(CATALOG, CatalogFilter(sort="price-high"))
        self.assertEqual(CATALOG, before)


if __name__ == "__main__":
    unittest.main()
