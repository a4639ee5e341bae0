"""
Demonstration front end: python -m modopts [options] [files]

Loads the command line against a small sample registry and pretty-prints
the resulting configuration and the remaining positional arguments.
"""
import sys

from rich.pretty import pprint

from .cmdline import CommandLine, strip_platform_arguments
from .items import ConfigItem, ItemType, Registry
from .store import ConfigStore


def sample():
    registry = Registry()
    registry.register("main", [
        ConfigItem("Interface", ItemType.HINT, descr="interface settings"),
        ConfigItem("verbose", ItemType.INTEGER, short="v", descr="verbosity level"),
        ConfigItem("quiet", ItemType.BOOL, short="q", descr="be quiet"),
        ConfigItem("intf", ItemType.MODULE, short="I", descr="interface module"),
        ConfigItem("config", ItemType.FILE, descr="configuration file"),
        ConfigItem("key-quit", ItemType.KEY, default=0, descr="quit hot key"),
    ])
    registry.register("video", [
        ConfigItem("fullscreen", ItemType.BOOL, short="f", descr="fullscreen video output"),
        ConfigItem("zoom", ItemType.FLOAT, default=1.0, descr="zoom factor"),
        ConfigItem("width", ItemType.INTEGER, default=-1, descr="video width"),
        ConfigItem("filter", ItemType.MODULE_LIST, descr="video filters"),
        ConfigItem("vfilter", ItemType.MODULE_LIST, current="filter", descr="old name of --filter"),
        ConfigItem("grayscale", ItemType.BOOL, current="filter", strict=True, descr="removed"),
    ])
    return registry


def main(argv=None):
    registry = sample()
    store = ConfigStore(registry)
    cmdline = CommandLine(registry, store, name="modopts", colorful=True)
    if not cmdline.load(strip_platform_arguments(sys.argv if argv is None else ["modopts", *argv])):
        return 1
    pprint(dict(store.__rich_repr__()))
    pprint(cmdline.arguments)
    return 0


if __name__ == "__main__":
    sys.exit(main())
