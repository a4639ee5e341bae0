"""
Tables module behavioral tests (option table builder).

Scope
- Validate long-table sizing and termination (N + 2B entries plus one sentinel).
- Validate boolean negation forms and their mapping back to the item.
- Validate the short spec string, the verbose '::' exception and the 256-slot index.
- Validate release on context exit and cleanup on allocation failure.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase
from unittest.mock import patch

from modopts import (
    Arity,
    ConfigItem,
    ItemType,
    OutOfMemoryError,
    Registry,
    SENTINEL,
    build,
    size,
)


def _registry():
    registry = Registry()
    registry.register("main", [
        ConfigItem("Main", ItemType.HINT),
        ConfigItem("verbose", ItemType.INTEGER, short="v"),
        ConfigItem("quiet", ItemType.BOOL, short="q"),
        ConfigItem("intf", ItemType.MODULE, short="I"),
        ConfigItem("config", ItemType.FILE),
    ])
    registry.register("video", [
        ConfigItem("Video", ItemType.HINT),
        ConfigItem("fullscreen", ItemType.BOOL),
        ConfigItem("width", ItemType.INTEGER, short="w"),
        ConfigItem("zoom", ItemType.FLOAT),
    ])
    return registry


class TestBuild(TestCase):
    """Behavioral tests for build() and OptionTables."""

    def setUp(self):
        self.registry = _registry()
        self.tables = build(self.registry)

    def tearDown(self):
        self.tables.release()

    def testSizeCountsBooleansThreeTimes(self):
        # 7 non-hint items, 2 booleans
        self.assertEqual(size(self.registry), 7 + 2 * 2)
        self.assertEqual(self.tables.size, 11)
        self.assertEqual(len(self.tables), 11)

    def testLongTableIsSentinelTerminated(self):
        longopts = self.tables.longopts
        self.assertEqual(len(longopts), 11 + 1)
        self.assertIs(longopts[-1], SENTINEL)
        self.assertFalse(longopts[-1].name)

    def testNoEntryNameIsEmpty(self):
        for option in self.tables.longopts[:-1]:
            with self.subTest(option=option):
                self.assertTrue(option.name)

    def testHintsAreSkipped(self):
        names = {option.name for option in self.tables.longopts[:-1]}
        self.assertNotIn("Main", names)
        self.assertNotIn("Video", names)

    def testBooleanHasThreeEntries(self):
        entries = [option for option in self.tables.longopts[:-1] if option.item and option.item.name == "fullscreen"]
        self.assertEqual([option.name for option in entries], ["fullscreen", "nofullscreen", "no-fullscreen"])
        self.assertEqual([option.synthetic for option in entries], [0, 1, 1])
        self.assertEqual([option.negated for option in entries], [False, True, True])
        self.assertTrue(all(option.arity is Arity.NONE for option in entries))

    def testValuedItemsRequireAnArgument(self):
        arities = {option.name: option.arity for option in self.tables.longopts[:-1]}
        self.assertIs(arities["width"], Arity.REQUIRED)
        self.assertIs(arities["config"], Arity.REQUIRED)
        self.assertIs(arities["zoom"], Arity.REQUIRED)
        self.assertIs(arities["quiet"], Arity.NONE)

    def testLongTableFollowsRegistryOrder(self):
        self.assertEqual([option.name for option in self.tables.longopts[:-1]], [
            "verbose", "quiet", "noquiet", "no-quiet", "intf", "config",
            "fullscreen", "nofullscreen", "no-fullscreen", "width", "zoom",
        ])

    def testShortSpec(self):
        self.assertEqual(self.tables.shortopts, "v::qI:w:")

    def testShortSpecFitsCapacity(self):
        self.assertLessEqual(len(self.tables.shortopts), 2 * self.tables.size + 1)

    def testShortIndex(self):
        self.assertEqual(len(self.tables.shortindex), 256)
        self.assertEqual(self.tables.short("w").name, "width")
        self.assertEqual(self.tables.short(ord("q")).name, "quiet")
        self.assertIsNone(self.tables.short("x"))
        self.assertEqual(sum(1 for slot in self.tables.shortindex if slot is not None), 4)

    def testCustomVerboseMarker(self):
        registry = Registry()
        registry.register("main", [
            ConfigItem("debug", ItemType.INTEGER, short="d"),
            ConfigItem("volume", ItemType.INTEGER, short="v"),
        ])
        with build(registry, verbose="d") as tables:
            self.assertEqual(tables.shortopts, "d::v:")

    def testVerboseMarkerOnNonIntegerIsPlain(self):
        registry = Registry()
        registry.register("main", [ConfigItem("video", ItemType.STRING, short="v")])
        with build(registry) as tables:
            self.assertEqual(tables.shortopts, "v:")

    def testEmptyRegistry(self):
        with build(Registry()) as tables:
            self.assertEqual(tables.longopts, [SENTINEL])
            self.assertEqual(tables.shortopts, "")


class TestRelease(TestCase):
    """Behavioral tests for releasing the tables."""

    def testContextExitReleases(self):
        with build(_registry()) as tables:
            longopts = tables.longopts
            self.assertFalse(tables.released)
        self.assertTrue(tables.released)
        self.assertEqual(longopts, [])
        with self.assertRaises(RuntimeError):
            tables.longopts

    def testExceptionInsideContextReleases(self):
        with self.assertRaises(KeyError):
            with build(_registry()) as tables:
                raise KeyError("boom")
        self.assertTrue(tables.released)

    def testReleaseIsIdempotent(self):
        tables = build(_registry())
        tables.release()
        tables.release()
        self.assertTrue(tables.released)


class TestAllocationFailure(TestCase):
    """Behavioral tests for out-of-memory handling while building."""

    def testLongTableFailure(self):
        with patch("modopts.tables._allocate", side_effect=MemoryError):
            with self.assertRaises(OutOfMemoryError) as context:
                build(_registry())
        self.assertEqual(context.exception.options["title"], "out of memory")

    def testShortSpecFailureReleasesLongTable(self):
        reserved = [SENTINEL] * 12
        with patch("modopts.tables._allocate", side_effect=[reserved, MemoryError()]):
            with self.assertRaises(OutOfMemoryError):
                build(_registry())
        self.assertEqual(reserved, [])


if __name__ == "__main__":
    unittest.main()
