import unittest

from avrojsons.avroschema import BytesSchema, FixedSchema, IntSchema, LogicalType, LongSchema, StringSchema
from avrojsons.logicaltypes import (INT_LOGICAL_FORMATS, LONG_LOGICAL_FORMATS, decimal_parameters,
                                    has_logical_type, logical_format)


class TestHasLogicalType(unittest.TestCase):

    def test_structured_annotation(self):
        node = IntSchema(logical_type=LogicalType("date"))
        self.assertTrue(has_logical_type(node, "date"))
        self.assertFalse(has_logical_type(node, "time-millis"))

    def test_no_annotation(self):
        self.assertFalse(has_logical_type(StringSchema(), "uuid"))

    def test_raw_property_counts_for_fixed_only(self):
        fixed = FixedSchema(name="Dur", size=12, props={"logicalType": "duration"})
        self.assertTrue(has_logical_type(fixed, "duration"))
        string = StringSchema(props={"logicalType": "uuid"})
        self.assertFalse(has_logical_type(string, "uuid"))

    def test_either_signal_is_enough(self):
        fixed = FixedSchema(name="D", size=8, logical_type=LogicalType("decimal", {"precision": 4}),
                            props={"logicalType": "duration"})
        self.assertTrue(has_logical_type(fixed, "decimal"))
        self.assertTrue(has_logical_type(fixed, "duration"))


class TestLogicalFormat(unittest.TestCase):

    def test_int_formats(self):
        self.assertEqual(logical_format(IntSchema(logical_type=LogicalType("date")), INT_LOGICAL_FORMATS), "date")
        self.assertEqual(logical_format(IntSchema(logical_type=LogicalType("time-millis")), INT_LOGICAL_FORMATS), "time")
        self.assertIsNone(logical_format(IntSchema(), INT_LOGICAL_FORMATS))

    def test_long_formats(self):
        for name in ("timestamp-millis", "timestamp-micros", "local-timestamp-millis", "local-timestamp-micros"):
            self.assertEqual(logical_format(LongSchema(logical_type=LogicalType(name)), LONG_LOGICAL_FORMATS), "date-time")
        self.assertEqual(logical_format(LongSchema(logical_type=LogicalType("time-micros")), LONG_LOGICAL_FORMATS), "time")
        self.assertIsNone(logical_format(LongSchema(logical_type=LogicalType("date")), LONG_LOGICAL_FORMATS))


class TestDecimalParameters(unittest.TestCase):

    def test_structured(self):
        node = BytesSchema(logical_type=LogicalType("decimal", {"precision": 10, "scale": 2}))
        self.assertEqual(decimal_parameters(node), {"precision": 10, "scale": 2})

    def test_raw_properties(self):
        node = FixedSchema(name="F", size=8, props={"logicalType": "decimal", "precision": 6})
        self.assertEqual(decimal_parameters(node), {"precision": 6})


if __name__ == '__main__':
    unittest.main()
