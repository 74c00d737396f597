"""
Command schema unit tests.

Scope
- resolve(): command recognition rules and declaration validation.
- Inheritance of descriptors across command base classes.
- Name matching, usage rendering, the stub schema.
- discover(): module glob expansion and definition order.

Conventions
- Test method names follow CamelCase per project convention.
- Command types with invalid declarations are created inside test methods so
  module discovery only ever sees valid ones.
"""
import unittest
from abc import abstractmethod
from unittest import TestCase

from argbind import Command, CommandSchema, Option, Parameter, command


@command("deploy")
class Deploy(Command):
    """
    Deploy a build to the given hosts.
    """
    hosts = Parameter(1, "HOST", nargs="*")
    target = Parameter(0)
    output = Option("--output", "-o", env="DEPLOY_OUTPUT")
    force = Option("--force", type=bool, default=False)

    def execute(self, console):
        pass


@command
class Default(Command):
    path = Parameter(0)

    def execute(self, console):
        pass


class Undecorated(Command):
    def execute(self, console):
        pass


@command("abstract")
class Abstract(Command):
    @abstractmethod
    def prepare(self):
        raise NotImplementedError

    def execute(self, console):
        pass


class Base(Command):
    verbose = Option("--verbose", "-v", type=bool, default=False)
    config = Option("--config")

    def execute(self, console):
        pass


@command("child")
class Child(Base):
    config = None
    name = Parameter(0)


Alias = Deploy


class TestResolve(TestCase):
    """Unit tests for CommandSchema.resolve."""

    def testResolveCommand(self):
        schema = CommandSchema.resolve(Deploy)
        self.assertIs(schema.type, Deploy)
        self.assertEqual(schema.name, "deploy")
        self.assertEqual(schema.descr, "Deploy a build to the given hosts.")
        self.assertFalse(schema.default)

    def testParametersSortedByOrder(self):
        schema = CommandSchema.resolve(Deploy)
        self.assertEqual(schema.parameters, (Deploy.target, Deploy.hosts))

    def testOptionsKeepDeclarationOrder(self):
        schema = CommandSchema.resolve(Deploy)
        self.assertEqual(schema.options, (Deploy.output, Deploy.force))

    def testResolveDefaultCommand(self):
        schema = CommandSchema.resolve(Default)
        self.assertIsNone(schema.name)
        self.assertTrue(schema.default)
        self.assertIsNone(schema.descr)

    def testNonCommandsResolveToNone(self):
        for candidate in (Command, Undecorated, Abstract, object, int, Deploy(), "deploy", None):
            self.assertIsNone(CommandSchema.resolve(candidate), msg=repr(candidate))

    def testDecoratedNonCommandResolvesToNone(self):
        @command("plain")
        class Plain:
            pass

        self.assertIsNone(CommandSchema.resolve(Plain))

    def testCommandMetadataIsNotInherited(self):
        class Derived(Deploy):
            pass

        self.assertIsNone(CommandSchema.resolve(Derived))

    def testInheritedDescriptors(self):
        schema = CommandSchema.resolve(Child)
        self.assertEqual(schema.options, (Base.verbose,))
        self.assertEqual(schema.parameters, (Child.name,))

    def testDuplicateOrderRejected(self):
        @command("broken")
        class Broken(Command):
            first = Parameter(0)
            second = Parameter(0)

            def execute(self, console):
                pass

        with self.assertRaises(TypeError):
            CommandSchema.resolve(Broken)

    def testSeveralSequencesRejected(self):
        @command("broken")
        class Broken(Command):
            first = Parameter(0, nargs="*")
            second = Parameter(1, nargs="*")

            def execute(self, console):
                pass

        with self.assertRaises(TypeError):
            CommandSchema.resolve(Broken)

    def testSequenceMustBeLast(self):
        @command("broken")
        class Broken(Command):
            first = Parameter(0, nargs="*")
            second = Parameter(1)

            def execute(self, console):
                pass

        with self.assertRaises(TypeError):
            CommandSchema.resolve(Broken)

    def testOrdersMayHaveGaps(self):
        @command("sparse")
        class Sparse(Command):
            first = Parameter(3)
            second = Parameter(10, nargs="*")

            def execute(self, console):
                pass

        self.assertEqual(CommandSchema.resolve(Sparse).parameters, (Sparse.first, Sparse.second))

    def testDuplicateOptionIdentifiersRejected(self):
        declarations = (
            (Option("--name"), Option("--name")),
            (Option("--first", "-n"), Option("--second", "-n")),
            (Option("--first", env="NAME"), Option("--second", env="NAME")),
        )
        for first, second in declarations:
            broken = command("broken")(type("Broken", (Command,), {
                "first": first,
                "second": second,
                "execute": lambda self, console: None,
            }))
            with self.assertRaises(TypeError):
                CommandSchema.resolve(broken)


class TestSchema(TestCase):
    """Unit tests for schema matching, rendering and the stub."""

    def testMatchesIgnoresCase(self):
        schema = CommandSchema.resolve(Deploy)
        self.assertTrue(schema.matches("deploy"))
        self.assertTrue(schema.matches("DEPLOY"))
        self.assertFalse(schema.matches("deplo"))
        self.assertFalse(schema.matches(None))

    def testDefaultMatchesOnlyNone(self):
        schema = CommandSchema.resolve(Default)
        self.assertTrue(schema.matches(None))
        self.assertFalse(schema.matches(""))
        self.assertFalse(schema.matches("default"))

    def testUsageRendering(self):
        self.assertEqual(
            str(CommandSchema.resolve(Deploy)),
            "deploy <target> <HOST...> --output|-o --force"
        )
        self.assertEqual(str(CommandSchema.resolve(Default)), "<path>")

    def testBlankNameBecomesDefault(self):
        schema = CommandSchema(Deploy, "   ")
        self.assertIsNone(schema.name)
        self.assertTrue(schema.default)

    def testStub(self):
        stub = CommandSchema.stub
        self.assertIsNone(stub.type)
        self.assertIsNone(stub.name)
        self.assertTrue(stub.default)
        self.assertEqual(stub.parameters, ())
        self.assertEqual(stub.options, ())
        self.assertEqual(str(stub), "")

    def testRepresentation(self):
        self.assertTrue(repr(CommandSchema.resolve(Deploy)).startswith("command-schema(type="))


class TestDiscover(TestCase):
    """Unit tests for CommandSchema.discover."""

    def testDiscoverThisModule(self):
        schemas = CommandSchema.discover(__name__)
        self.assertEqual([schema.type for schema in schemas], [Deploy, Default, Child])

    def testDiscoverReportsAliasedTypesOnce(self):
        schemas = CommandSchema.discover(__name__)
        self.assertEqual(sum(schema.type is Alias for schema in schemas), 1)

    def testDiscoverSkipsImportedTypes(self):
        schemas = CommandSchema.discover("argbind.*")
        self.assertEqual(schemas, [])

    def testDiscoverRejectsNonString(self):
        with self.assertRaises(TypeError):
            CommandSchema.discover(Deploy)

    def testDiscoverMissingModule(self):
        with self.assertRaises(TypeError):
            CommandSchema.discover("argbind_missing_module")


if __name__ == "__main__":
    unittest.main()
