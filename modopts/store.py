"""
In-memory configuration store.

The store is seeded from a Registry with every non-hint item's default and
exposes the typed put operations the command-line dispatcher writes
through, plus the name lookup used to follow deprecation redirects.

Typed writes
- put_string: textual items (string, password, file, directory, module*);
  None is accepted and means "unset".
- put_int: integer and key items.
- put_float: float items (ints are widened).
- put_bool: boolean items.

Writing an unknown name raises KeyError; writing through the wrong put
raises TypeError. Nothing here synchronizes access: the command line is
applied by a single writer before anything reads the configuration.
"""
from .items import ItemType


class ConfigStore:
    def __init__(self, registry, /):
        self._items = {}
        self._values = {}
        self._dirty = set()
        for item in registry:
            if item.is_hint:
                continue
            self._items[item.name] = item
            self._values[item.name] = item.default

    @property
    def dirty(self):
        """
        names written since construction or the last full reset().
        """
        return frozenset(self._dirty)

    def find(self, name, /):
        """
        the item registered under `name`, or None.
        """
        return self._items.get(name)

    def get(self, name, /, default=None):
        return self._values.get(name, default)

    def _check(self, name, kinds, what):
        try:
            item = self._items[name]
        except KeyError:
            raise KeyError(f"unknown config item {name!r}") from None
        if item.type not in kinds:
            raise TypeError(f"config item {name!r} is a {item.type.name.lower()} item, not {what}")
        return item

    def put_string(self, name, value, /):
        self._check(name, _TEXTUAL, "a string item")
        if value is not None and not isinstance(value, str):
            raise TypeError(f"config item {name!r} expects a string value")
        self._set(name, value)

    def put_int(self, name, value, /):
        self._check(name, (ItemType.INTEGER, ItemType.KEY), "an integer item")
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"config item {name!r} expects an integer value")
        self._set(name, value)

    def put_float(self, name, value, /):
        self._check(name, (ItemType.FLOAT,), "a float item")
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError(f"config item {name!r} expects a float value")
        self._set(name, float(value))

    def put_bool(self, name, value, /):
        self._check(name, (ItemType.BOOL,), "a boolean item")
        self._set(name, bool(value))

    def _set(self, name, value):
        self._values[name] = value
        self._dirty.add(name)

    def reset(self, name=None, /):
        """
        restore one item (or every item) to its default.
        """
        if name is None:
            self._values = {name: item.default for name, item in self._items.items()}
            self._dirty.clear()
            return
        self._values[name] = self._check(name, ItemType, "an item").default
        self._dirty.discard(name)

    def __getitem__(self, name):
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"unknown config item {name!r}") from None

    def __contains__(self, name):
        return name in self._items

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __rich_repr__(self):
        yield from self._values.items()


_TEXTUAL = frozenset(kind for kind in ItemType if kind.is_textual)


__all__ = (
    "ConfigStore",
)
