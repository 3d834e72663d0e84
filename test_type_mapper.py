#!/usr/bin/env python3
"""
Unit tests for the type mapper.
"""

import unittest

from odata_codegen_lib import ScalarKind, TypeDescriptor, TypeMapper, classify, zod_type_mapper
from odata_codegen_lib.type_mapper import (
    is_complex_type,
    navigation_target,
    unqualified_name,
    unwrap_collection,
)


class TestClassify(unittest.TestCase):

    def test_primitives(self):
        cases = {
            "Edm.Guid": ScalarKind.IDENTIFIER,
            "Edm.DateTime": ScalarKind.DATE_TIME,
            "Edm.DateTimeOffset": ScalarKind.DATE_TIME,
            "Edm.Date": ScalarKind.DATE_ONLY,
            "Edm.String": ScalarKind.TEXT,
            "Edm.Int32": ScalarKind.INTEGER,
            "Edm.Int64": ScalarKind.INTEGER,
            "Edm.Decimal": ScalarKind.NUMBER,
            "Edm.Double": ScalarKind.NUMBER,
            "Edm.Boolean": ScalarKind.BOOLEAN,
        }
        for descriptor, kind in cases.items():
            with self.subTest(descriptor=descriptor):
                self.assertEqual(classify(descriptor), TypeDescriptor(kind))

    def test_unmapped_primitives_are_unknown(self):
        for descriptor in ["Edm.Int16", "Edm.Byte", "Edm.TimeOfDay", "Edm.Binary", "Edm.Stream", ""]:
            with self.subTest(descriptor=descriptor):
                self.assertEqual(classify(descriptor).kind, ScalarKind.UNKNOWN)

    def test_substring_matching(self):
        self.assertEqual(classify("Custom.OrderGuid").kind, ScalarKind.IDENTIFIER)
        self.assertEqual(classify("Custom.PostingDate").kind, ScalarKind.DATE_ONLY)

    def test_collection(self):
        self.assertEqual(classify("Collection(Edm.String)"), TypeDescriptor(ScalarKind.TEXT, 1))
        self.assertTrue(classify("Collection(Edm.Int32)").is_collection)
        self.assertEqual(classify("Collection(Collection(Edm.Boolean))"), TypeDescriptor(ScalarKind.BOOLEAN, 2))
        self.assertEqual(classify("Collection(Edm.Byte)"), TypeDescriptor(ScalarKind.UNKNOWN, 1))

    def test_substring_rules_win_over_collection(self):
        # Guid/DateTime/Date are checked on the whole descriptor first
        self.assertEqual(classify("Collection(Edm.Guid)"), TypeDescriptor(ScalarKind.IDENTIFIER))
        self.assertEqual(classify("Collection(Edm.DateTimeOffset)"), TypeDescriptor(ScalarKind.DATE_TIME))


class TestZodTypeMapper(unittest.TestCase):

    def setUp(self):
        self.mapper = zod_type_mapper()

    def test_mapping_table(self):
        cases = {
            "Edm.Guid": ("Guid", "string"),
            "Edm.DateTimeOffset": ("DateTime", "string"),
            "Edm.Date": ("DateOnly", "string"),
            "Edm.String": ("z.string()", "string"),
            "Edm.Int32": ("z.number().int()", "number"),
            "Edm.Int64": ("z.number().int()", "number"),
            "Edm.Decimal": ("z.number()", "number"),
            "Edm.Double": ("z.number()", "number"),
            "Edm.Boolean": ("z.boolean()", "boolean"),
            "Edm.Binary": ("z.unknown()", "unknown"),
        }
        for descriptor, (schema, annotation) in cases.items():
            with self.subTest(descriptor=descriptor):
                mapped = self.mapper.map(descriptor)
                self.assertEqual(mapped.schema, schema)
                self.assertEqual(mapped.annotation, annotation)

    def test_collection_of_string(self):
        self.assertEqual(self.mapper.schema_for("Collection(Edm.String)"), "z.array(z.string())")
        self.assertEqual(self.mapper.annotation_for("Collection(Edm.String)"), "string[]")

    def test_nested_collection(self):
        mapped = self.mapper.map("Collection(Collection(Edm.Decimal))")
        self.assertEqual(mapped.schema, "z.array(z.array(z.number()))")
        self.assertEqual(mapped.annotation, "number[][]")

    def test_mapping_is_pure(self):
        descriptors = ["Edm.String", "Collection(Edm.Int32)", "Edm.Guid", "Whatever", "Edm.Date"]
        first = [self.mapper.map(d) for d in descriptors]
        second = [zod_type_mapper().map(d) for d in reversed(descriptors)]
        self.assertEqual(first, list(reversed(second)))

    def test_incomplete_tables_are_rejected(self):
        with self.assertRaises(ValueError):
            TypeMapper({ScalarKind.TEXT: "str"}, {ScalarKind.TEXT: "str"}, "list[{}]", "list[{}]")

    def test_alternative_backend_table(self):
        python_types = {kind: "Any" for kind in ScalarKind}
        python_types.update({ScalarKind.TEXT: "str", ScalarKind.INTEGER: "int"})
        mapper = TypeMapper(python_types, python_types, "List[{}]", "List[{}]")
        self.assertEqual(mapper.annotation_for("Collection(Edm.Int64)"), "List[int]")
        self.assertEqual(mapper.schema_for("Edm.Boolean"), "Any")


class TestDescriptorHelpers(unittest.TestCase):

    def test_unwrap_collection(self):
        self.assertEqual(unwrap_collection("Collection(Microsoft.NAV.item)"), "Microsoft.NAV.item")
        self.assertEqual(unwrap_collection("Microsoft.NAV.item"), "Microsoft.NAV.item")

    def test_navigation_target(self):
        self.assertEqual(navigation_target("Collection(Microsoft.NAV.salesOrderLine)"), "salesOrderLine")
        self.assertEqual(navigation_target("Microsoft.NAV.customer"), "customer")
        self.assertEqual(navigation_target("customer"), "customer")
        self.assertEqual(unqualified_name("A.B.C"), "C")

    def test_is_complex_type(self):
        prefixes = ("Microsoft.NAV",)
        self.assertTrue(is_complex_type("Microsoft.NAV.postalAddressType", prefixes))
        self.assertTrue(is_complex_type("Collection(Microsoft.NAV.dimensionValue)", prefixes))
        self.assertTrue(is_complex_type("Collection(Collection(Microsoft.NAV.dimensionValue))", prefixes))
        self.assertFalse(is_complex_type("Edm.String", prefixes))
        self.assertFalse(is_complex_type("Collection(Edm.String)", prefixes))
        self.assertFalse(is_complex_type("Microsoft.NAVISION.thing", prefixes))
        self.assertFalse(is_complex_type("Microsoft.NAV.x", ("",)))


if __name__ == '__main__':
    unittest.main()
