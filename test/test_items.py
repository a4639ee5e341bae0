"""
Items module behavioral tests (ConfigItem construction, Registry merging and discovery).

Scope
- Validate ConfigItem metadata: names, short codes, redirects, per-type defaults.
- Validate read-only properties and copy.replace() stamping.
- Validate Registry ordering, counting, merge-time uniqueness and module discovery.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import importlib
import os
import shutil
import sys
import tempfile
import textwrap
import unittest
from unittest import TestCase

from modopts import ConfigItem, ItemType, Registry


class TestConfigItem(TestCase):
    """Behavioral tests for ConfigItem definitions."""

    def testNameIsTrimmed(self):
        item = ConfigItem("  width ", ItemType.INTEGER)
        self.assertEqual(item.name, "width")

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            ConfigItem("   ", ItemType.STRING)

    def testDashedNameRejected(self):
        with self.assertRaises(ValueError):
            ConfigItem("--width", ItemType.INTEGER)

    def testNameWithEqualsRejected(self):
        with self.assertRaises(ValueError):
            ConfigItem("width=3", ItemType.INTEGER)

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            ConfigItem(42, ItemType.INTEGER)

    def testUnknownTypeRejected(self):
        with self.assertRaises(TypeError):
            ConfigItem("width", 0x1234)

    def testPlainIntegerTypeAccepted(self):
        item = ConfigItem("width", 0x0040)
        self.assertIs(item.type, ItemType.INTEGER)

    def testShortMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            ConfigItem("width", ItemType.INTEGER, short="wd")

    def testShortCannotBeReserved(self):
        for short in "-:? ":
            with self.subTest(short=short), self.assertRaises(ValueError):
                ConfigItem("width", ItemType.INTEGER, short=short)

    def testShortBeyondEightBitsRejected(self):
        with self.assertRaises(ValueError):
            ConfigItem("width", ItemType.INTEGER, short="Δ")

    def testHintCannotHaveShort(self):
        with self.assertRaises(TypeError):
            ConfigItem("Video", ItemType.HINT, short="V")

    def testStrictRequiresCurrent(self):
        with self.assertRaises(TypeError):
            ConfigItem("old", ItemType.INTEGER, strict=True)

    def testSelfRedirectRejected(self):
        with self.assertRaises(ValueError):
            ConfigItem("old", ItemType.INTEGER, current="old")

    def testDefaultsPerType(self):
        self.assertEqual(ConfigItem("a", ItemType.INTEGER).default, 0)
        self.assertEqual(ConfigItem("b", ItemType.FLOAT).default, 0.0)
        self.assertIs(ConfigItem("c", ItemType.BOOL).default, False)
        self.assertEqual(ConfigItem("d", ItemType.KEY).default, 0)
        self.assertIsNone(ConfigItem("e", ItemType.STRING).default)

    def testExplicitDefaultKept(self):
        self.assertEqual(ConfigItem("zoom", ItemType.FLOAT, default=1.5).default, 1.5)

    def testDerivedFlags(self):
        flag = ConfigItem("fullscreen", ItemType.BOOL)
        hint = ConfigItem("Video", ItemType.HINT)
        self.assertTrue(flag.is_boolean)
        self.assertFalse(flag.is_hint)
        self.assertTrue(hint.is_hint)
        self.assertFalse(flag.deprecated)
        self.assertTrue(ConfigItem("old", ItemType.BOOL, current="fullscreen").deprecated)

    def testPropertiesAreReadOnly(self):
        item = ConfigItem("width", ItemType.INTEGER)
        with self.assertRaises(AttributeError):
            item.name = "height"  # type: ignore[misc]

    def testReplaceStampsModule(self):
        item = ConfigItem("width", ItemType.INTEGER, short="w", descr="video width")
        stamped = copy.replace(item, module="video")
        self.assertEqual(stamped.module, "video")
        self.assertEqual(stamped.short, "w")
        self.assertEqual(stamped.descr, "video width")
        self.assertIsNone(item.module)

    def testReprMentionsName(self):
        self.assertIn("name='width'", repr(ConfigItem("width", ItemType.INTEGER)))


class TestRegistry(TestCase):
    """Behavioral tests for Registry merging."""

    def setUp(self):
        self.registry = Registry()
        self.registry.register("main", [
            ConfigItem("Main", ItemType.HINT),
            ConfigItem("verbose", ItemType.INTEGER, short="v"),
            ConfigItem("quiet", ItemType.BOOL, short="q"),
        ])
        self.registry.register("video", [
            ConfigItem("fullscreen", ItemType.BOOL, short="f"),
            ConfigItem("width", ItemType.INTEGER),
        ])

    def testIterationFollowsRegistrationOrder(self):
        self.assertEqual(
            [item.name for item in self.registry],
            ["Main", "verbose", "quiet", "fullscreen", "width"],
        )

    def testItemsAreStampedWithTheirModule(self):
        self.assertEqual({item.module for item in self.registry.items("video")}, {"video"})

    def testCountsIgnoreHints(self):
        self.assertEqual(self.registry.counts(), (4, 2))
        self.assertEqual(len(self.registry), 5)

    def testContainsByName(self):
        self.assertIn("width", self.registry)
        self.assertNotIn("height", self.registry)

    def testModulesInOrder(self):
        self.assertEqual(self.registry.modules, ("main", "video"))

    def testDuplicateNameAcrossModulesRejected(self):
        with self.assertRaises(ValueError):
            self.registry.register("audio", [ConfigItem("width", ItemType.INTEGER)])

    def testDuplicateNameWithinModuleRejected(self):
        with self.assertRaises(ValueError):
            self.registry.register("audio", [
                ConfigItem("volume", ItemType.INTEGER),
                ConfigItem("volume", ItemType.FLOAT),
            ])

    def testDuplicateShortRejected(self):
        with self.assertRaises(ValueError):
            self.registry.register("audio", [ConfigItem("volume", ItemType.INTEGER, short="v")])

    def testFailedRegisterLeavesRegistryUnchanged(self):
        with self.assertRaises(ValueError):
            self.registry.register("audio", [
                ConfigItem("volume", ItemType.INTEGER, short="a"),
                ConfigItem("quiet", ItemType.BOOL),
            ])
        self.assertNotIn("volume", self.registry)
        self.assertEqual(self.registry.modules, ("main", "video"))
        self.registry.register("audio", [ConfigItem("volume", ItemType.INTEGER, short="a")])

    def testDuplicateModuleRejected(self):
        with self.assertRaises(ValueError):
            self.registry.register("main", [])

    def testNonItemsRejected(self):
        with self.assertRaises(TypeError):
            self.registry.register("audio", ["volume"])

    def testConstructFromMapping(self):
        registry = Registry({"main": [ConfigItem("width", ItemType.INTEGER)]})
        self.assertEqual(registry.modules, ("main",))


class TestRegistryInclude(TestCase):
    """Behavioral tests for glob-based module discovery."""

    package = "modopts_fixture_plugins"

    def setUp(self):
        self.root = tempfile.mkdtemp()
        base = os.path.join(self.root, self.package)
        os.mkdir(base)
        sources = {
            "__init__.py": "",
            "alpha.py": """
                from modopts import ConfigItem, ItemType

                __config__ = [ConfigItem("alpha-level", ItemType.INTEGER, short="a")]
            """,
            "beta.py": """
                from modopts import ConfigItem, ItemType

                __config__ = (
                    ConfigItem("beta-mode", ItemType.STRING),
                    ConfigItem("beta-fast", ItemType.BOOL),
                )
            """,
            "gamma.py": "VALUE = 1\n",
        }
        for name, source in sources.items():
            with open(os.path.join(base, name), "w", encoding="utf-8") as file:
                file.write(textwrap.dedent(source))
        sys.path.insert(0, self.root)
        importlib.invalidate_caches()

    def tearDown(self):
        sys.path.remove(self.root)
        for name in [name for name in sys.modules if name.split(".")[0] == self.package]:
            del sys.modules[name]
        shutil.rmtree(self.root)

    def testIncludeRegistersModulesWithConfig(self):
        registry = Registry()
        registered = registry.include(self.package + ".*")
        self.assertEqual(registered, [self.package + ".alpha", self.package + ".beta"])
        self.assertEqual([item.name for item in registry], ["alpha-level", "beta-mode", "beta-fast"])
        self.assertEqual(registry.items(self.package + ".beta")[0].module, self.package + ".beta")

    def testIncludeUnknownPackageFindsNothing(self):
        self.assertEqual(Registry().include("modopts_no_such_package.*"), [])


if __name__ == "__main__":
    unittest.main()
