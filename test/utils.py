"""
Tests for the shared helpers.

This module verifies the semantic guarantees of the `Unset` sentinel and the
small helpers built around it:
- Singleton identity, falsy semantics and representation.
- Copying and deep copying preserve identity; the type is final.
- coalesce() only replaces the sentinel, never other falsy values.
- mirror() hands out copies of containers.
- suggest() proposes the closest known spelling.
"""
import copy
import unittest
from unittest import TestCase

from flagship.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        """
        copy() and deepcopy() preserve the identity of the singleton.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnion(self) -> None:
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertNotIsInstance("name", int | UnsetType)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    coalesce(), mirror() and suggest().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")

    def testMirrorCopiesContainers(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ("a", ["b"])

        holder = Holder()
        items = holder.items
        items[1].append("c")
        self.assertEqual(holder._items, ("a", ["b"]))
        self.assertEqual(items, ["a", ["b", "c"]])

    def testMirrorRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            mirror(42)

    def testSpecTypeMirrorsFields(self) -> None:
        class SampleSpec(metaclass=SpecType):
            __introspectable__ = ("name",)

            def __init__(self, name):
                self._name = name

        self.assertEqual(SampleSpec.__typename__, "sample-spec")
        self.assertEqual(SampleSpec("x").name, "x")
        self.assertEqual(repr(SampleSpec("x")), "sample-spec(name='x')")

    def testSuggest(self) -> None:
        self.assertEqual(suggest("--verbos", ["--verbose", "--version"]), "--verbose")
        self.assertIsNone(suggest("--zzz", ["--verbose"]))


if __name__ == '__main__':
    unittest.main()
