"""
Option table builder.

Turns a Registry into the three structures a getopt_long-style scanner
needs, sized up front from one counting pass:

- longopts: list of LongOption, one per non-hint item plus the synthesized
  "no<name>" and "no-<name>" forms of every boolean, terminated by SENTINEL.
- shortopts: getopt spec string; each short code is followed by ':' when
  its item takes an argument, and by '::' for the verbose code (argument
  optional, counted).
- shortindex: 256 slots, one per 8-bit character, referencing the item
  owning that short code.

Sizes (N non-hint items, B booleans)
- long slots: N + 2B, plus the sentinel;
- short spec capacity: 2 * (N + 2B) + 1 characters.

The tables own every synthesized name; OptionTables is a context manager
and releases everything on exit, whatever the exit path.
"""
from enum import IntEnum
from typing import NamedTuple

from .faults import *
from .items import ItemType


class Arity(IntEnum):
    """
    argument requirement of a long option (getopt's has_arg).
    """
    NONE = 0
    REQUIRED = 1
    OPTIONAL = 2


class LongOption(NamedTuple):
    name: str | None
    arity: Arity
    synthetic: int
    item: object

    @property
    def negated(self):
        return bool(self.synthetic)


SENTINEL = LongOption(None, Arity.NONE, 0, None)


def _allocate(size, fill=None, /):
    return [fill] * size


class OptionTables:
    """
    The long table, short spec and short index built for one parse.

    Use as a context manager; leaving the block releases every structure:

        with build(registry) as tables:
            ...
    """

    def __init__(self, longopts, shortopts, shortindex, size):
        self._longopts = longopts
        self._shortopts = shortopts
        self._shortindex = shortindex
        self._size = size
        self._released = False

    @property
    def longopts(self):
        self._ensure()
        return self._longopts

    @property
    def shortopts(self):
        self._ensure()
        return self._shortopts

    @property
    def shortindex(self):
        self._ensure()
        return self._shortindex

    @property
    def size(self):
        return self._size

    @property
    def released(self):
        return self._released

    def _ensure(self):
        if self._released:
            raise RuntimeError("option tables were already released")

    def short(self, code, /):
        """
        item owning short `code` (a character or its ordinal), or None.
        """
        self._ensure()
        index = ord(code) if isinstance(code, str) else code
        return self._shortindex[index] if 0 <= index < len(self._shortindex) else None

    def release(self):
        """
        drop the long table (synthesized names included), the spec and the index.
        """
        if self._released:
            return
        self._longopts.clear()
        self._shortindex.clear()
        self._shortopts = ""
        self._released = True

    def __enter__(self):
        self._ensure()
        return self

    def __exit__(self, *exc_info):
        self.release()

    def __len__(self):
        return self._size


def is_verbose(item, verbose="v", /):
    """
    True when `item` is the cumulative verbosity counter: an integer item
    whose short code is the verbose marker.
    """
    return item.short == verbose and item.type is ItemType.INTEGER


def size(registry, /):
    """
    long-option slots needed for `registry` (sentinel excluded).
    """
    options, booleans = registry.counts()
    return options + 2 * booleans


def build(registry, /, *, verbose="v"):
    """
    build the option tables for `registry`.

    Raises OutOfMemoryError (FaultCode.OUT_OF_MEMORY) when a table cannot be
    reserved; anything reserved before the failure is released first.
    """
    count = size(registry)

    try:
        longopts = _allocate(count + 1, SENTINEL)
    except MemoryError:
        raise OutOfMemoryError(
            "cannot reserve %d long option slots" % (count + 1),
            title="out of memory",
            code=FaultCode.OUT_OF_MEMORY,
            hint="free some memory or load fewer modules",
            docs=getdoc(FaultCode.OUT_OF_MEMORY),
        ) from None

    try:
        shortopts = _allocate(2 * count + 1, "")
        shortindex = _allocate(256)
    except MemoryError:
        longopts.clear()
        raise OutOfMemoryError(
            "cannot reserve the short option tables (%d characters)" % (2 * count + 1),
            title="out of memory",
            code=FaultCode.OUT_OF_MEMORY,
            hint="free some memory or load fewer modules",
            docs=getdoc(FaultCode.OUT_OF_MEMORY),
        ) from None

    index = 0
    position = 0
    for item in registry:
        if item.is_hint:
            continue

        longopts[index] = LongOption(item.name, Arity.NONE if item.is_boolean else Arity.REQUIRED, 0, item)
        index += 1

        if item.is_boolean:
            longopts[index] = LongOption("no" + item.name, Arity.NONE, 1, item)
            longopts[index + 1] = LongOption("no-" + item.name, Arity.NONE, 1, item)
            index += 2

        if item.short is None:
            continue

        # last writer wins; the registry guarantees uniqueness
        shortindex[ord(item.short)] = item
        shortopts[position] = item.short
        position += 1
        if item.type.takes_argument:
            shortopts[position] = ":"
            position += 1
            if is_verbose(item, verbose):
                shortopts[position] = ":"
                position += 1

    longopts[index] = SENTINEL
    return OptionTables(longopts, "".join(shortopts[:position]), shortindex, count)


__all__ = (
    "Arity",
    "LongOption",
    "SENTINEL",
    "OptionTables",
    "is_verbose",
    "size",
    "build",
)
