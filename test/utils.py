"""
Utility helpers unit tests.

Scope
- Unset sentinel and coalesce().
- rename() / mirror() helpers.
- pluralize() and bulletize() text helpers.
- mglob() module pattern expansion.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argbind.utils import Unset, UnsetType, bulletize, coalesce, mglob, mirror, pluralize, rename


class TestUnset(TestCase):
    """Unit tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionSupport(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", Unset | str)
        self.assertNotIsInstance(None, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")


class TestHelpers(TestCase):
    """Unit tests for rename() and mirror()."""

    def testRenameDecorator(self):
        @rename("named")
        def function():
            pass

        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testRenameRejections(self):
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("named")(1)

    def testMirrorReturnsImmutableCopies(self):
        class Box:
            items = mirror("items")
            tags = mirror("tags")

            def __init__(self):
                self._items = ["a", ["b"]]
                self._tags = {"x"}

        box = Box()
        self.assertEqual(box.items, ("a", ("b",)))
        self.assertEqual(box.tags, frozenset({"x"}))
        with self.assertRaises(AttributeError):
            box.items = ()


class TestText(TestCase):
    """Unit tests for pluralize() and bulletize()."""

    def testPluralize(self):
        expectations = {
            "option": "options",
            "unrecognized parameter": "unrecognized parameters",
            "missing parameter value": "missing parameter values",
            "alias": "aliases",
            "match": "matches",
            "entry": "entries",
            "key": "keys",
            "index": "indices",
            "Entry": "Entries",
            "VALUE": "VALUES",
        }
        for text, expected in expectations.items():
            self.assertEqual(pluralize(text), expected, msg=text)

    def testPluralizeKeepsTrailingWhitespace(self):
        self.assertEqual(pluralize("option "), "options ")
        self.assertEqual(pluralize(""), "")

    def testBulletize(self):
        self.assertEqual(bulletize("Unrecognized options provided:", ["--foo", "-x"]),
                         "Unrecognized options provided:\n- --foo\n- -x")
        self.assertEqual(bulletize("Nothing:", []), "Nothing:")
        self.assertEqual(bulletize("Numbers:", range(2)), "Numbers:\n- 0\n- 1")

    def testBulletizeRejectsNonStringHeader(self):
        with self.assertRaises(TypeError):
            bulletize(None, [])


class TestModuleGlob(TestCase):
    """Unit tests for mglob()."""

    def testConcreteNameReturnedAsIs(self):
        self.assertEqual(mglob("argbind.schemas"), ["argbind.schemas"])
        self.assertEqual(mglob("not.imported.at.all"), ["not.imported.at.all"])

    def testDirectChildren(self):
        self.assertEqual(mglob("argbind.*"), [
            "argbind.activators",
            "argbind.arguments",
            "argbind.binding",
            "argbind.commands",
            "argbind.faults",
            "argbind.invocation",
            "argbind.schemas",
            "argbind.utils",
        ])

    def testCharacterPatterns(self):
        self.assertEqual(mglob("argbind.[ab]*"), ["argbind.activators", "argbind.arguments", "argbind.binding"])
        self.assertEqual(mglob("argbind.?tils"), ["argbind.utils"])

    def testUnimportablePrefix(self):
        self.assertEqual(mglob("argbind_missing_package.*"), [])

    def testRejections(self):
        with self.assertRaises(TypeError):
            mglob(None)
        with self.assertRaises(ValueError):
            mglob("   ")
        with self.assertRaises(ValueError):
            mglob("*.commands")


if __name__ == "__main__":
    unittest.main()
