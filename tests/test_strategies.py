"""Tests for the tagged-field, all-field and by-headers export strategies."""

import os
import sys
import unittest
from dataclasses import dataclass, field
from typing import List

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.sample_records import BadlyTagged, Order, OrderLine, Record, Untagged, make_orders
from records_to_excel.config import ExportConfig, ExportMode
from records_to_excel.descriptor import describe_record
from records_to_excel.errors import (
    AxisOutOfIndexError,
    ExportModeNotExistError,
    FieldNotExistError,
    HeaderConfigError,
    NoXlsxTagFoundError,
    SubFieldNotExistError,
    SubSliceEmptyError,
    SubSliceNotExistError,
    SubSliceTypeError,
)
from records_to_excel.strategies import (
    AllFieldStrategy,
    ByHeadersStrategy,
    TaggedFieldStrategy,
    get_export_strategy,
    parse_xlsx_tag,
)


@dataclass
class Empty:
    pass


@dataclass
class OnlyLines:
    lines: List[OrderLine] = field(default_factory=list)


def _init(strategy, sample, **config_kwargs):
    config = ExportConfig(output_path="unused.xlsx", **config_kwargs)
    strategy.init(describe_record(sample), sample, config)
    return strategy


class TestParseXlsxTag(unittest.TestCase):
    def test_well_formed(self):
        self.assertEqual(parse_xlsx_tag("A-Name"), ("A", "Name"))

    def test_malformed(self):
        for tag in (None, "", "Name", "A-B-C"):
            self.assertIsNone(parse_xlsx_tag(tag))

    def test_split_on_dash_only(self):
        self.assertEqual(parse_xlsx_tag("AA-Total Score"), ("AA", "Total Score"))


class TestTaggedFieldStrategy(unittest.TestCase):
    def test_headers_in_declaration_order(self):
        s = _init(TaggedFieldStrategy(), Record())
        self.assertEqual(s.get_headers(), ["Name", "Age", "Score"])
        self.assertEqual(s.get_sub_headers(), [])

    def test_axis_from_tag(self):
        s = _init(TaggedFieldStrategy(), Record())
        self.assertEqual([s.get_col_axis(i) for i in range(3)], ["A", "B", "C"])

    def test_axis_out_of_index(self):
        s = _init(TaggedFieldStrategy(), Record())
        with self.assertRaises(AxisOutOfIndexError):
            s.get_col_axis(3)

    def test_field_lookup(self):
        s = _init(TaggedFieldStrategy(), Record())
        self.assertEqual(s.get_field_name_by_header("Score"), "score")
        with self.assertRaises(FieldNotExistError):
            s.get_field_name_by_header("ignore_field")

    def test_no_tags(self):
        with self.assertRaises(NoXlsxTagFoundError):
            _init(TaggedFieldStrategy(), Untagged())

    def test_malformed_tags_are_skipped(self):
        with self.assertRaises(NoXlsxTagFoundError):
            _init(TaggedFieldStrategy(), BadlyTagged())

    def test_nested_sequence(self):
        s = _init(TaggedFieldStrategy(), make_orders()[0], sub_slice_field_name="lines")
        self.assertEqual(s.get_headers(), ["Order", "Customer", "lines"])
        self.assertEqual(s.get_field_name_by_header("lines"), "lines")
        self.assertEqual(s.get_sub_headers(), ["SKU", "Qty"])
        self.assertEqual(s.get_sub_field_name_by_header("Qty"), "qty")
        # sub-columns use the axis slots after the top-level tags
        self.assertEqual(s.get_col_axis(2), "C")
        self.assertEqual(s.get_col_axis(3), "D")
        with self.assertRaises(SubFieldNotExistError):
            s.get_sub_field_name_by_header("note")

    def test_nested_sequence_errors(self):
        with self.assertRaises(SubSliceNotExistError):
            _init(TaggedFieldStrategy(), make_orders()[0], sub_slice_field_name="missing")
        with self.assertRaises(SubSliceTypeError):
            _init(TaggedFieldStrategy(), make_orders()[0], sub_slice_field_name="customer")
        with self.assertRaises(SubSliceEmptyError):
            _init(TaggedFieldStrategy(), Order(order_id=1), sub_slice_field_name="lines")


class TestAllFieldStrategy(unittest.TestCase):
    def test_all_fields(self):
        s = _init(AllFieldStrategy(), Record())
        self.assertEqual(s.get_headers(), ["name", "age", "ignore_field", "score"])
        self.assertEqual(s.get_field_name_by_header("age"), "age")
        self.assertEqual([s.get_col_axis(i) for i in range(4)], ["A", "B", "C", "D"])
        self.assertEqual(s.get_col_axis(26), "AA")

    def test_header_count_with_nested(self):
        sample = make_orders()[0]
        total = len(describe_record(sample))
        s = _init(AllFieldStrategy(), sample, sub_slice_field_name="lines")
        plain = [h for h in s.get_headers() if h != "lines"]
        self.assertEqual(len(plain), total - 1)
        self.assertEqual(s.get_headers()[-1], "lines")
        self.assertEqual(s.get_sub_headers(), ["sku", "qty", "note"])
        self.assertEqual(s.get_sub_field_name_by_header("note"), "note")

    def test_no_fields(self):
        with self.assertRaises(NoXlsxTagFoundError):
            _init(AllFieldStrategy(), Empty())

    def test_only_nested_field(self):
        with self.assertRaises(NoXlsxTagFoundError):
            _init(AllFieldStrategy(), OnlyLines(lines=[OrderLine()]),
                  sub_slice_field_name="lines")

    def test_nested_sequence_errors(self):
        with self.assertRaises(SubSliceNotExistError):
            _init(AllFieldStrategy(), Record(), sub_slice_field_name="lines")
        with self.assertRaises(SubSliceTypeError):
            _init(AllFieldStrategy(), Record(), sub_slice_field_name="name")
        with self.assertRaises(SubSliceEmptyError):
            _init(AllFieldStrategy(), Order(), sub_slice_field_name="lines")


class TestByHeadersStrategy(unittest.TestCase):
    def test_cardinality_mismatch(self):
        cases = [
            ([], {}),
            (["Name"], {}),
            (["Name"], {"Name": "name", "Age": "age"}),
            (["Name", "Name"], {"Name": "name"}),
        ]
        for headers, mapping in cases:
            with self.assertRaises(HeaderConfigError):
                _init(ByHeadersStrategy(), Record(), headers=headers, header_to_field=mapping)

    def test_field_declaration_order(self):
        s = _init(ByHeadersStrategy(), Record(), headers=["Score", "Name"],
                  header_to_field={"Score": "score", "Name": "name"})
        self.assertEqual(s.get_headers(), ["Name", "Score"])
        self.assertEqual(s.get_field_name_by_header("Score"), "score")
        self.assertEqual(s.get_col_axis(1), "B")

    def test_absent_fields_dropped(self):
        s = _init(ByHeadersStrategy(), Record(), headers=["Name", "Ghost"],
                  header_to_field={"Name": "name", "Ghost": "ghost"})
        self.assertEqual(s.get_headers(), ["Name"])

    def test_unknown_header_lookup(self):
        s = _init(ByHeadersStrategy(), Record(), headers=["Name"],
                  header_to_field={"Name": "name"})
        with self.assertRaises(FieldNotExistError):
            s.get_field_name_by_header("Age")

    def test_nested_with_sub_map(self):
        s = _init(ByHeadersStrategy(), make_orders()[0],
                  headers=["Customer"], header_to_field={"Customer": "customer"},
                  sub_slice_field_name="lines",
                  sub_header_to_field={"Quantity": "qty", "Item": "sku"})
        self.assertEqual(s.get_headers(), ["Customer", "lines"])
        self.assertEqual(s.get_sub_headers(), ["Item", "Quantity"])
        self.assertEqual(s.get_sub_field_name_by_header("Quantity"), "qty")
        with self.assertRaises(SubFieldNotExistError):
            s.get_sub_field_name_by_header("sku")

    def test_nested_without_sub_map(self):
        s = _init(ByHeadersStrategy(), make_orders()[0],
                  headers=["Customer"], header_to_field={"Customer": "customer"},
                  sub_slice_field_name="lines")
        self.assertEqual(s.get_sub_headers(), ["sku", "qty", "note"])
        self.assertEqual(s.get_sub_field_name_by_header("qty"), "qty")

    def test_config_map_not_mutated(self):
        mapping = {"Customer": "customer"}
        _init(ByHeadersStrategy(), make_orders()[0], headers=["Customer"],
              header_to_field=mapping, sub_slice_field_name="lines")
        self.assertEqual(mapping, {"Customer": "customer"})

    def test_nested_sequence_errors(self):
        kwargs = dict(headers=["Customer"], header_to_field={"Customer": "customer"})
        with self.assertRaises(SubSliceNotExistError):
            _init(ByHeadersStrategy(), make_orders()[0], sub_slice_field_name="x", **kwargs)
        with self.assertRaises(SubSliceTypeError):
            _init(ByHeadersStrategy(), make_orders()[0], sub_slice_field_name="order_id", **kwargs)
        with self.assertRaises(SubSliceEmptyError):
            _init(ByHeadersStrategy(), Order(), sub_slice_field_name="lines", **kwargs)


class TestGetExportStrategy(unittest.TestCase):
    def test_modes(self):
        self.assertIsInstance(get_export_strategy(ExportMode.TAGGED_FIELD), TaggedFieldStrategy)
        self.assertIsInstance(get_export_strategy(1), AllFieldStrategy)
        self.assertIsInstance(get_export_strategy("headers"), ByHeadersStrategy)

    def test_fresh_instance_per_call(self):
        self.assertIsNot(get_export_strategy(0), get_export_strategy(0))

    def test_unknown_mode(self):
        for mode in (3, -1, "sideways", None):
            with self.assertRaises(ExportModeNotExistError):
                get_export_strategy(mode)


if __name__ == "__main__":
    unittest.main()
