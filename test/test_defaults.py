import unittest
from collections import OrderedDict
from decimal import Decimal

from avrojsons.avroschema import DoubleSchema, Field, StringSchema
from avrojsons.defaults import OMIT_DEFAULT, convert_default_value, convert_field_default


class TestConvertDefaultValue(unittest.TestCase):

    def test_scalars_pass_through(self):
        self.assertIsNone(convert_default_value(None))
        self.assertEqual(convert_default_value("text"), "text")
        self.assertIs(convert_default_value(True), True)
        self.assertEqual(convert_default_value(42), 42)
        self.assertEqual(convert_default_value(2.5), 2.5)

    def test_decimal_is_sniffed(self):
        self.assertEqual(convert_default_value(Decimal("10")), 10)
        self.assertIsInstance(convert_default_value(Decimal("10")), int)
        self.assertEqual(convert_default_value(Decimal("1.25")), 1.25)
        self.assertIsInstance(convert_default_value(Decimal("1.25")), float)

    def test_bytes_become_code_point_strings(self):
        self.assertEqual(convert_default_value(b"\x00\xff"), "\u0000ÿ")

    def test_nested_structures(self):
        value = {"a": [1, {"b": None, "c": (True, "x")}], "d": {}}
        self.assertEqual(convert_default_value(value), {"a": [1, {"b": None, "c": [True, "x"]}], "d": {}})

    def test_key_order_is_kept(self):
        value = OrderedDict([("z", 1), ("a", 2), ("m", 3)])
        self.assertEqual(list(convert_default_value(value)), ["z", "a", "m"])

    def test_unknown_objects_become_strings(self):

        class Point:
            def __str__(self):
                return "Point(1, 2)"

        self.assertEqual(convert_default_value(Point()), "Point(1, 2)")

    def test_non_finite_numbers_are_rejected(self):
        for value in (float("nan"), float("inf"), Decimal("NaN"), Decimal("-Infinity")):
            with self.assertRaises(ValueError):
                convert_default_value(value)

    def test_non_string_keys_are_rejected(self):
        with self.assertRaises(TypeError):
            convert_default_value({1: "one"})


class TestConvertFieldDefault(unittest.TestCase):

    def test_converted_null_is_kept(self):
        self.assertIsNone(convert_field_default(Field("note", StringSchema(), default=None)))

    def test_failure_is_logged_and_omitted(self):
        with self.assertLogs("avrojsons.defaults", level="WARNING") as logs:
            result = convert_field_default(Field("ratio", DoubleSchema(), default=[float("inf")]))
        self.assertIs(result, OMIT_DEFAULT)
        self.assertIn("ratio", logs.output[0])


if __name__ == '__main__':
    unittest.main()
