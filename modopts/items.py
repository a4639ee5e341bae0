r"""
modopts configuration items and the module registry.

Overview
- ItemType: the kind of value an item holds (string-like, integer, float,
  key, boolean) or HINT for documentation-only markers.
- ConfigItem: one typed configuration entry contributed by a module
  (name, type, optional short code, optional deprecation redirect).
- Registry: ordered collection of items grouped by contributing module,
  with merge-time uniqueness checks and glob-based module discovery.

Metadata (sanitized on construction)
- name: long option name without dashes, e.g. "sub-filter"; must match
  r"[^\W_][\w.-]*" (no leading dash, no '=').
- short: Unset | single printable character (code point < 256) other than
  '-', ':' and '?'. Hints cannot declare one.
- current: Unset | str, name of the item replacing this deprecated one.
- strict: bool, the redirect is mandatory (option removed) rather than
  advisory. Requires current.
- default: value before any command line is applied; defaults per type.
- descr: Unset | str, help text (rendering is not done here).

Quick example:
    >>> verbose = ConfigItem("verbose", ItemType.INTEGER, short="v")
    >>> fullscreen = ConfigItem("fullscreen", ItemType.BOOL, short="f")
    >>> registry = Registry()
    >>> registry.register("main", [verbose, fullscreen])
"""
import copy
import functools
import importlib
import operator
import re
from collections.abc import Iterable
from enum import IntEnum

from .utils import *


class ItemType(IntEnum):
    """
    configuration item kinds.

    the eight string-like kinds store the raw argument text; INTEGER, FLOAT
    and KEY store converted numbers; BOOL takes no argument and gets the
    synthesized --no<name>/--no-<name> forms; HINT items only document and
    never become options.
    """
    STRING          = 0x0010
    PASSWORD        = 0x0011
    FILE            = 0x0020
    DIRECTORY       = 0x0070
    MODULE          = 0x0030
    MODULE_LIST     = 0x00A0
    MODULE_LIST_CAT = 0x00B0
    MODULE_CAT      = 0x0090
    INTEGER         = 0x0040
    FLOAT           = 0x0060
    KEY             = 0x0080
    BOOL            = 0x0050
    HINT            = 0x000F

    @property
    def is_hint(self):
        return self is ItemType.HINT

    @property
    def is_boolean(self):
        return self is ItemType.BOOL

    @property
    def is_textual(self):
        return self in _TEXTUAL

    @property
    def takes_argument(self):
        return self not in (ItemType.BOOL, ItemType.HINT)


_TEXTUAL = frozenset({
    ItemType.STRING,
    ItemType.PASSWORD,
    ItemType.FILE,
    ItemType.DIRECTORY,
    ItemType.MODULE,
    ItemType.MODULE_LIST,
    ItemType.MODULE_LIST_CAT,
    ItemType.MODULE_CAT,
})

_DEFAULTS = {
    ItemType.INTEGER: 0,
    ItemType.FLOAT: 0.0,
    ItemType.KEY: 0,
    ItemType.BOOL: False,
}


class IntrospectableType(type):
    """
    Metaclass exposing __introspectable__ names as read-only properties.

    Each name in __introspectable__ becomes a property mirroring "_{name}";
    __repr__ and __rich_repr__ list the same fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(cls, name, bases, namespace | {
            name: mirror(name) for name in namespace.get("__introspectable__", ())
        })

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__name__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize item metadata in place.

    Raises
    - TypeError: wrong types (name, type, short, current, descr), strict
      without current, short code on a hint.
    - ValueError: empty or malformed names and short codes, self-redirects.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__name__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__name__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W_][\w.-]*", name):
        raise ValueError(f"{cls.__name__} 'name' must be a valid long option name (got {name!r})")
    metadata["name"] = name

    try:
        metadata["type"] = type = ItemType(metadata["type"])
    except ValueError:
        raise TypeError(f"{cls.__name__} 'type' must be an item type") from None

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__name__} 'short' must be a single character")
    elif isinstance(short, str):
        if len(short) != 1 or ord(short) > 0xFF:
            raise ValueError(f"{cls.__name__} 'short' must be a single 8-bit character")
        elif short in "-:?" or not short.isprintable() or short.isspace():
            raise ValueError(f"{cls.__name__} 'short' {short!r} cannot be used as an option character")
        elif type.is_hint:
            raise TypeError(f"hint {cls.__name__} cannot declare a short option")
    metadata["short"] = coalesce(short)

    if not isinstance(current := metadata["current"], str | Unset):
        raise TypeError(f"{cls.__name__} 'current' must be a string")
    elif isinstance(current, str):
        if not (current := current.strip()):
            raise ValueError(f"{cls.__name__} 'current' cannot be empty")
        elif current == name:
            raise ValueError(f"{cls.__name__} {name!r} cannot redirect to itself")
    elif metadata["strict"]:
        raise TypeError(f"{cls.__name__} 'strict' requires a 'current' replacement")
    metadata["current"] = coalesce(current)

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__name__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr)

    metadata["default"] = coalesce(metadata["default"], _DEFAULTS.get(type))


class ConfigItem(metaclass=IntrospectableType):
    """
    One configuration entry contributed by a module.

    Items are immutable once built; the registry stamps the owning module
    name through copy.replace(item, module=...).

    Properties
    - name, type, short, current, strict, default, descr, module (see the
      module docstring for their constraints).
    - is_boolean / is_hint: derived from type.
    - deprecated: True when the item redirects to a replacement.
    """

    __introspectable__ = (
        "name",
        "type",
        "short",
        "current",
        "strict",
        "default",
        "descr",
        "module",
    )

    def __init__(
            self,
            name,
            type,
            /,
            *,
            short=Unset,
            default=Unset,
            descr=Unset,
            current=Unset,
            strict=False,
            module=Unset
    ):
        metadata = {
            "name": name,
            "type": type,
            "short": short,
            "current": current,
            "strict": bool(strict),
            "default": default,
            "descr": descr,
            "module": module,
        }
        _sanitize_metadata(ConfigItem, metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))

    @property
    def is_boolean(self):
        return self._type.is_boolean

    @property
    def is_hint(self):
        return self._type.is_hint

    @property
    def deprecated(self):
        return self._current is not None

    def __replace__(self, /, **overrides):
        fields = {name: getattr(self, name) for name in type(self).__introspectable__}
        # None means "not declared" for these; the constructor expects Unset.
        for name in ("short", "current", "descr", "module"):
            if fields[name] is None:
                fields[name] = Unset
        fields |= overrides
        return type(self)(fields.pop("name"), fields.pop("type"), **fields)


class Registry:
    """
    Ordered registry of configuration items, grouped by contributing module.

    Merge rules
    - item names are unique across the whole registry;
    - short codes are unique across the whole registry.
    A conflicting register() raises ValueError and leaves the registry
    unchanged.

    Iteration yields every item (hints included) in registration order.
    """

    def __init__(self, modules=()):
        self._modules = {}
        self._names = {}
        self._shorts = {}
        for module, items in dict(modules).items():
            self.register(module, items)

    @property
    def modules(self):
        return tuple(self._modules)

    def register(self, module, items, /):
        """
        add one module's items, in order; returns the stamped items.
        """
        if not isinstance(module, str) or not module.strip():
            raise TypeError("register() module name must be a non-empty string")
        if module in self._modules:
            raise ValueError(f"module {module!r} is already registered")
        if not isinstance(items, Iterable):
            raise TypeError("register() items must be an iterable of config items")

        names = {}
        shorts = {}
        stamped = []
        for item in items:
            if not isinstance(item, ConfigItem):
                raise TypeError("register() items must be config items")
            owner = self._names.get(item.name, names.get(item.name))
            if owner is not None:
                raise ValueError(f"config item {item.name!r} of module {module!r} is already declared by {owner!r}")
            names[item.name] = module
            if item.short is not None:
                clash = self._shorts.get(item.short) or shorts.get(item.short)
                if clash is not None:
                    raise ValueError(f"short option '-{item.short}' of {item.name!r} is already used by {clash.name!r}")
            stamped.append(item := copy.replace(item, module=module))
            if item.short is not None:
                shorts[item.short] = item

        self._modules[module] = tuple(stamped)
        self._names.update(names)
        self._shorts.update(shorts)
        return tuple(stamped)

    def include(self, pattern, /):
        """
        discover modules by dotted glob and register their __config__ items.

        every module matched by mglob(pattern) that defines a __config__
        sequence is imported and registered under its dotted name; modules
        without __config__ are skipped. returns the registered module names.
        """
        registered = []
        for name in mglob(pattern):
            module = importlib.import_module(name)
            if (items := getattr(module, "__config__", None)) is None:
                continue
            self.register(name, items)
            registered.append(name)
        return registered

    def items(self, module=Unset, /):
        if module is Unset:
            return tuple(item for items in self._modules.values() for item in items)
        return self._modules[module]

    def counts(self):
        """
        (options, booleans) over non-hint items.
        """
        options = booleans = 0
        for item in self:
            if item.is_hint:
                continue
            options += 1
            booleans += item.is_boolean
        return options, booleans

    def __iter__(self):
        for items in self._modules.values():
            yield from items

    def __len__(self):
        return sum(map(len, self._modules.values()))

    def __contains__(self, name):
        return name in self._names

    def __rich_repr__(self):
        for module, items in self._modules.items():
            yield module, items


__all__ = (
    "ItemType",
    "ConfigItem",
    "Registry",
)
