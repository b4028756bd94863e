"""
Commands module behavioral tests (lifecycle, dispatch, faults, rendering).

Scope
- Validate command declaration: discovery, hooks, name validation.
- Validate the run lifecycle: setup, binding, entry point, cleanup, catch-all.
- Validate registry dispatch: listing, help, unknown commands, exit statuses.
- Validate rendered help and listing text (plain console, no colors).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Registry, command, invoke, Option, Positional, hooks).
- Non-shell registries raise CommandExit; shell registries print and return statuses.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from commandeer import (
    Command,
    Option,
    Positional,
    Registry,
    catchall,
    cleanup,
    command,
    invoke,
    main,
    option,
    setup,
)
from commandeer.faults import (
    CommandExit,
    FaultCode,
    InvalidValueError,
    MissingArgumentError,
    UnknownArgumentError,
    UnknownCommandError,
)


def plain(**options):
    return Registry(console=Console(file=io.StringIO(), width=120, color_system=None), colorful=False, **options)


def output(registry):
    return registry.console.file.getvalue()


class TestCommandDeclaration(TestCase):
    """Discovery and validation of command declarations."""

    def testClassNameLowercased(self):
        @command
        class Copy:
            @main
            def run(self): ...

        self.assertIsInstance(Copy, Command)
        self.assertEqual(Copy.name, "copy")

    def testFunctionNameDashed(self):
        @command
        def show_all(): ...

        self.assertEqual(show_all.name, "show-all")

    def testExplicitMetadata(self):
        @command(name="cp", descr="copy things", category="Files", experimental=True)
        class Copy:
            @main
            def run(self): ...

        self.assertEqual((Copy.name, Copy.descr, Copy.category), ("cp", "copy things", "Files"))
        self.assertTrue(Copy.experimental)
        self.assertFalse(Copy.hidden)

    def testDescriptorsDiscoveredInOrder(self):
        @command
        class Tool:
            b = Option("-b", type=bool)
            a = Option("-a", type=bool)
            source = Positional()

            @main
            def run(self): ...

        self.assertEqual([o.field for o in Tool.options], ["b", "a"])
        self.assertEqual([p.field for p in Tool.positionals], ["source"])

    def testInheritedDescriptorsDiscovered(self):
        class Base:
            verbose = Option("-v", type=bool)

            def exec(self): ...

        @command
        class Tool(Base):
            name = Option("--name")

        self.assertEqual([o.field for o in Tool.options], ["verbose", "name"])

    def testExecFallback(self):
        ran = []

        @command
        class Tool:
            def exec(self):
                ran.append(True)

        invoke(Tool, [], shell=False)
        self.assertEqual(ran, [True])

    def testMissingEntryRejected(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                verbose = Option("-v", type=bool)

    def testTwoEntriesRejected(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                @main
                def one(self): ...

                @main
                def two(self): ...

    def testDuplicateShortRejected(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                one = Option("-x")
                two = Option("-x")

                def exec(self): ...

    def testLongCollidingWithDerivedRejected(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                verbose = Option("-v", type=bool)
                loud = Option("--verbose", type=bool)

                def exec(self): ...

    def testShortCollidingWithDerivedRejected(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                n = Option("--number", type=int)
                size = Option("-n", type=int)

                def exec(self): ...

    def testShortCollidingWithLongRejected(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                level = Option("--x", type=int)
                extra = Option("-x")

                def exec(self): ...

    def testShortMatchingOwnDerivedAccepted(self):
        @command
        class Tool:
            n = Option("-n", type=int)

            def exec(self): ...

        self.assertEqual(Tool.options[0].keys, ("n",))

    def testListPositionalMustBeLast(self):
        with self.assertRaises(TypeError):
            @command
            class Tool:
                files = Positional(nargs="*")
                target = Positional()

                def exec(self): ...

    def testFunctionParameterNeedsSpec(self):
        with self.assertRaises(TypeError):
            @command
            def tool(name="x"): ...

    def testHookCombinationRejected(self):
        with self.assertRaises(TypeError):
            main(cleanup(lambda self: None))

    def testDirectCallForwardsToSource(self):
        @command
        def add(a=Positional(type=int), b=Positional(type=int)):
            return a + b

        self.assertEqual(add(1, 2), 3)


class TestCommandLifecycle(TestCase):
    """Execution order and outcomes of one command run."""

    def testClassCommandRuns(self):
        seen = {}
        registry = plain(shell=False)

        @registry.command
        class Copy:
            source = Positional("SRC", required=True)
            count = Option("-n", "--count", type=int, default="1")
            verbose = Option("-v", type=bool)

            @main
            def run(self):
                seen.update(source=self.source, count=self.count, verbose=self.verbose)

        self.assertEqual(registry.run(["copy", "-v", "--count", "3", "a.txt"]), 0)
        self.assertEqual(seen, {"source": "a.txt", "count": 3, "verbose": True})

    def testFunctionCommandRuns(self):
        seen = []

        @command
        def echo(
                words=Positional(nargs="*"),
                /,
                upper=Option("-u", type=bool),
        ):
            seen.append((words, upper))

        self.assertEqual(invoke(echo, "-u hello world", shell=False), 0)
        self.assertEqual(seen, [(["hello", "world"], True)])

    def testHooksRunInOrder(self):
        events = []
        registry = plain(shell=False)

        @registry.command
        class Tool:
            name = Option("--name")

            @setup
            def attach(self, registry):
                events.append(("setup", self.name, registry))

            @main
            def run(self):
                events.append(("main", self.name))

            @cleanup
            def close(self):
                events.append(("cleanup", self.name))

        registry.run(["tool", "--name", "x"])
        self.assertEqual(events, [("setup", None, registry), ("main", "x"), ("cleanup", "x")])

    def testCleanupSkippedWhenEntryFails(self):
        events = []

        @command
        class Tool:
            @main
            def run(self):
                raise RuntimeError("boom")

            @cleanup
            def close(self):
                events.append("cleanup")

        with self.assertRaises(RuntimeError):
            invoke(Tool, [], shell=False)
        self.assertEqual(events, [])

    def testFreshTargetPerRun(self):
        targets = []
        registry = plain(shell=False)

        @registry.command
        class Tool:
            def exec(self):
                targets.append(self)

        registry.run(["tool"])
        registry.run(["tool"])
        self.assertIsNot(targets[0], targets[1])

    def testCatchAllReceivesUnusedOccurrences(self):
        received = []
        registry = plain(shell=False)

        @registry.command
        class Tool:
            output = Option("-o", "--output")

            @catchall
            def extra(self, key, value):
                received.append((key, value))

            def exec(self): ...

        registry.run(["tool", "-o", "a", "--output", "b"])
        self.assertEqual(received, [("output", "b")])

    def testUnusedIgnoredByDefault(self):
        registry = plain(shell=False)

        @registry.command
        class Tool:
            output = Option("-o", "--output")

            def exec(self): ...

        with self.assertLogs("commandeer", level="INFO") as logs:
            self.assertEqual(registry.run(["tool", "-o", "a", "--output", "b"]), 0)
        self.assertTrue(any("output" in line for line in logs.output))

    def testStrictRejectsUnused(self):
        registry = plain(shell=False)

        @registry.command(strict=True)
        class Tool:
            output = Option("-o", "--output")

            def exec(self): ...

        with self.assertRaises(CommandExit) as context:
            registry.run(["tool", "-o", "a", "--output", "b"])
        fault, = context.exception.exceptions
        self.assertIsInstance(fault, UnknownArgumentError)
        self.assertEqual(fault.options["code"], FaultCode.UNROUTED_ARGUMENT)

    def testUnknownOptionRaisesCommandExit(self):
        @command
        def tool(threads=Option("--threads", type=int)): ...

        with self.assertRaises(CommandExit) as context:
            invoke(tool, "--threds 4", shell=False)
        self.assertIsInstance(context.exception.exceptions[0], UnknownArgumentError)

    def testMissingArgumentsGrouped(self):
        @command
        def tool(
                source=Positional(required=True),
                /,
                name=Option("--name", required=True),
        ): ...

        with self.assertRaises(CommandExit) as context:
            invoke(tool, [], shell=False)
        self.assertEqual(len(context.exception.exceptions), 2)
        self.assertTrue(all(isinstance(e, MissingArgumentError) for e in context.exception.exceptions))

    def testInvalidValueRaisesCommandExit(self):
        @command
        def tool(count=Option("-n", type=int)): ...

        with self.assertRaises(CommandExit) as context:
            invoke(tool, "-n many", shell=False)
        self.assertIsInstance(context.exception.exceptions[0], InvalidValueError)

    def testSetterOptionsOnCommand(self):
        seen = []

        @command
        class Tool:
            @option("-q", type=bool)
            def set_quiet(self):
                seen.append("quiet")

            @option("--level", type=int)
            def set_level(self, value):
                seen.append(value)

            def exec(self): ...

        invoke(Tool, "-q --level 0x10", shell=False)
        self.assertEqual(seen, ["quiet", 16])


class TestRegistry(TestCase):
    """Dispatch behavior and rendered output of a registry."""

    def setUp(self):
        self.registry = plain(prog="tool", header="tool suite", footer="see the manual")
        self.ran = ran = []

        @self.registry.command(descr="copy files", category="Files")
        class Copy:
            source = Positional("SRC", required=True)
            targets = Positional("DEST", nargs="*")
            count = Option("-n", "--count", type=int, default="1", descr="copies per target")
            name = Option("--name", required=True, descr="label")
            verbose = Option("-v", type=bool, descr="chatty")
            help = Option("-h", "--help", type=bool, helper=True, descr="show help")

            @main
            def run(self):
                ran.append(self.source)

        self.copy = Copy

        @self.registry.command(descr="try things", experimental=True)
        def probe():
            ran.append("probe")

        @self.registry.command(descr="old stuff", deprecated=True)
        def legacy(): ...

        @self.registry.command(hidden=True)
        def secret(): ...

    def testCommandsReadOnly(self):
        with self.assertRaises(TypeError):
            self.registry.commands["x"] = self.copy

    def testDuplicateNameRejected(self):
        with self.assertRaises(ValueError):
            @self.registry.command(name="probe")
            def other(): ...

    def testEmptyArgvPrintsListing(self):
        self.assertEqual(self.registry.run([]), 0)
        text = output(self.registry)
        self.assertIn("tool suite", text)
        self.assertIn("Available commands:", text)
        self.assertIn("[Files]", text)
        self.assertIn("[General]", text)
        self.assertIn("copy", text)
        self.assertIn("probe*", text)
        self.assertIn("* = experimental command", text)
        self.assertIn("see the manual", text)
        self.assertNotIn("legacy", text)
        self.assertNotIn("secret", text)

    def testHelpAlonePrintsListing(self):
        self.assertEqual(self.registry.run(["help"]), 0)
        self.assertIn("Available commands:", output(self.registry))

    def testHelpForCommand(self):
        self.assertEqual(self.registry.run(["help", "copy"]), 0)
        text = output(self.registry)
        self.assertIn("copy - copy files", text)
        self.assertIn("Usage: tool copy [options] SRC {DEST...}", text)
        self.assertIn("Required options:", text)
        self.assertIn("--name val", text)
        self.assertIn("-n --count N", text)
        self.assertIn("(default: 1)", text)

    def testHelpForUnknownCommand(self):
        self.assertEqual(self.registry.run(["help", "cpy"]), 1)
        text = output(self.registry)
        self.assertIn("unknown command: cpy", text)
        self.assertIn("Available commands:", text)

    def testUnknownCommand(self):
        self.assertEqual(self.registry.run(["nope"]), 1)
        self.assertIn("unknown command: nope", output(self.registry))

    def testUnknownCommandRaisesWhenNotShell(self):
        registry = plain(shell=False)
        with self.assertRaises(CommandExit) as context:
            registry.run(["cpy"])
        self.assertIsInstance(context.exception.exceptions[0], UnknownCommandError)

    def testHiddenAndDeprecatedStillRunnable(self):
        self.assertEqual(self.registry.run(["legacy"]), 0)
        self.assertEqual(self.registry.run(["secret"]), 0)

    def testSuccessfulRun(self):
        self.assertEqual(self.registry.run(["probe"]), 0)
        self.assertEqual(self.ran, ["probe"])

    def testHelperOptionPrintsHelp(self):
        self.assertEqual(self.registry.run(["copy", "-h"]), 1)
        self.assertIn("Usage: tool copy", output(self.registry))
        self.assertEqual(self.ran, [])

    def testFaultsPrintedWithHelp(self):
        self.assertEqual(self.registry.run(["copy", "src"]), 1)
        text = output(self.registry)
        self.assertIn("missing argument: --name", text)
        self.assertIn("Usage: tool copy", text)
        self.assertEqual(self.ran, [])

    def testEntryPointFaultPrintedWithHelp(self):
        events = []

        @self.registry.command
        class Guarded:
            name = Option("--name")

            @main
            def run(self):
                raise InvalidValueError("name %r is not allowed" % self.name, title="invalid value")

            @cleanup
            def close(self):
                events.append("cleanup")

        self.assertEqual(self.registry.run(["guarded", "--name", "x"]), 1)
        text = output(self.registry)
        self.assertIn("name 'x' is not allowed", text)
        self.assertIn("Usage: tool guarded", text)
        self.assertEqual(events, [])

    def testEntryPointFaultRaisesWhenNotShell(self):
        registry = plain(shell=False)

        @registry.command
        class Guarded:
            def exec(self):
                raise InvalidValueError("rejected")

        with self.assertRaises(CommandExit) as context:
            registry.run(["guarded"])
        self.assertIsInstance(context.exception.exceptions[0], InvalidValueError)

    def testExecuteByName(self):
        self.assertEqual(self.registry.execute("probe", []), 0)
        self.assertEqual(self.ran, ["probe"])

    def testVerboseLogsExecution(self):
        with self.assertLogs("commandeer", level="DEBUG") as logs:
            self.registry.run(["probe"])
        self.assertTrue(any("executing probe" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
