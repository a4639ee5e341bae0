"""
Command-line loader: build option tables from the registry, scan argv and
write every recognized option into the configuration store.

What this module provides
- CommandLine: binds a Registry and a ConfigStore to runtime flags
  (program name, verbose marker, shell/fancy/colorful rendering) and loads
  argument vectors into the store with load().
- load(registry, store, argv, ...): one-shot functional form.
- strip_platform_arguments(argv): argv filter hosts apply before loading.

Quick start
    from modopts import ConfigItem, ItemType, Registry, ConfigStore, CommandLine

    registry = Registry()
    registry.register("main", [
        ConfigItem("verbose", ItemType.INTEGER, short="v"),
        ConfigItem("fullscreen", ItemType.BOOL, short="f"),
        ConfigItem("width", ItemType.INTEGER),
    ])
    store = ConfigStore(registry)
    if not CommandLine(registry, store).load(["prog", "-vv", "--no-fullscreen", "--width=0x280"]):
        raise SystemExit(1)

Dispatch rules
- string-like items store the raw text, integers go through a C-style
  auto-base conversion ("10", "0x1f", "017"), floats through a
  locale-neutral conversion, keys through modopts.keys.to_code(), and
  booleans store True for "--name" and False for "--noname"/"--no-name".
- the verbose short code ("-v" by default) accumulates: "-v" adds one,
  "-vvv" adds three, "-v2" adds two; the total is written once at the end.
- a deprecated item with an advisory redirect warns and writes the
  replacement; a strict redirect means the option was removed: the value
  is dropped, with a warning in tolerant mode and an error otherwise.

Failure handling
- strict mode (the default): an unknown option, a missing argument or a
  removed option stops the scan; load() returns False after printing the
  fault (shell mode) or raises it (shell=False).
- tolerant mode (ignore_errors=True): rejected options are skipped and the
  scan works on a private copy of argv, leaving the caller's list intact.
- the option tables and the private copy are released on every path.
"""
import os.path
import re
import sys

from . import keys
from .faults import *
from .items import ItemType
from .scanner import Scanner
from .tables import build, is_verbose
from .utils import *


def _strtol(text):
    """
    C strtol(text, NULL, 0): optional sign, then hex (0x), octal (0) or
    decimal digits; trailing garbage is ignored and no digits gives 0.
    """
    match = re.match(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|(0[0-7]*)|([1-9][0-9]*))", text)
    if not match:
        return 0
    sign, hexadecimal, octal, decimal = match.groups()
    if hexadecimal is not None:
        value = int(hexadecimal, 16)
    elif octal is not None:
        value = int(octal, 8)
    else:
        value = int(decimal)
    return -value if sign == "-" else value


def _atoi(text):
    match = re.match(r"\s*[+-]?[0-9]+", text)
    return int(match.group()) if match else 0


def _atof(text):
    """
    C atof() in the "C" locale: the longest leading decimal float, or 0.0.
    """
    match = re.match(r"\s*([+-]?(?:inf(?:inity)?|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))", text, re.IGNORECASE)
    return float(match.group(1)) if match else 0.0


def _snapshot(argv, /):
    return list(argv)


def strip_platform_arguments(argv, /, *, platform=sys.platform):
    """
    return a copy of argv without the process serial number argument
    ("-psn_0_12345") macOS Finder passes as argv[1] to bundled applications.
    """
    argv = list(argv)
    if platform == "darwin" and len(argv) > 1 and argv[1].startswith("-psn"):
        del argv[1]
    return argv


class CommandLine:
    """
    Command-line loader bound to one registry and one store.

    Parameters
    - registry: Registry supplying the configuration items.
    - store: ConfigStore receiving the parsed values.
    - name: program name used in diagnostics; defaults to __main__.__prog__
      or the basename of sys.argv[0].
    - verbose: short code of the cumulative verbosity counter.
    - shell: print faults to stderr and return False (True), or raise
      errors and emit warnings through the warnings module (False).
    - fancy / colorful: rich panel chrome and colors for printed faults.
    """

    def __init__(
            self,
            registry,
            store,
            /,
            *,
            name=Unset,
            verbose="v",
            shell=True,
            fancy=False,
            colorful=False
    ):
        if not isinstance(name, str | UnsetType):
            raise TypeError("CommandLine() 'name' must be a string")
        if not isinstance(verbose, str) or len(verbose) != 1:
            raise TypeError("CommandLine() 'verbose' must be a single character")
        self._registry = registry
        self._store = store
        self._name = coalesce(name, getattr(sys.modules["__main__"], "__prog__", None)
                              or os.path.basename(sys.argv[0]) or "modopts")
        self._verbose = verbose
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._optind = 0
        self._arguments = []

    @property
    def name(self):
        return self._name

    @property
    def verbose(self):
        return self._verbose

    @property
    def shell(self):
        return self._shell

    @property
    def store(self):
        return self._store

    @property
    def optind(self):
        """
        index of the first non-option argument in the last scanned vector.
        """
        return self._optind

    @property
    def arguments(self):
        """
        non-option arguments left by the last load(), in order.
        """
        return list(self._arguments)

    def trigger(self, fault, /, **options):
        trigger(fault, **options, prog=self._name, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def load(self, argv, /, *, ignore_errors=False):
        """
        scan `argv` (argv[0] is the program name) into the store.

        returns True on success and False on failure (shell mode); outside
        shell mode failures are raised as OptionException subclasses.
        in strict mode `argv` is permuted in place like getopt does.
        """
        if not isinstance(argv, list):
            raise TypeError("load() argv must be a list of strings")
        self._optind = 0
        self._arguments = []

        try:
            tables = build(self._registry, verbose=self._verbose)
        except OutOfMemoryError as exception:
            self.trigger(exception)
            return False

        try:
            # the scanner permutes its input; tolerant mode must not touch the caller's list
            vector = _snapshot(argv) if ignore_errors else argv
        except MemoryError:
            tables.release()
            self.trigger(OutOfMemoryError(
                "cannot copy %d arguments" % len(argv),
                title="out of memory",
                code=FaultCode.OUT_OF_MEMORY,
                hint="free some memory and try again",
                docs=getdoc(FaultCode.OUT_OF_MEMORY),
            ))
            return False

        try:
            with tables:
                return self._scan(tables, vector, ignore_errors)
        finally:
            if vector is not argv:
                vector.clear()

    def _scan(self, tables, vector, ignore_errors):
        scanner = Scanner(vector, tables.shortopts, tables.longopts)
        verbosity = Unset

        for match in scanner:
            if match.code == 0:
                option = tables.longopts[match.index]
                name = option.name
                if option.synthetic:
                    name = name[3:] if name[2] == "-" else name[2:]
                if not self._apply(name, match, option.negated, ignore_errors):
                    return False
                continue

            item = tables.short(match.code) if match.code != "?" else None
            if item is None:
                if ignore_errors:
                    continue
                self._reject(match)
                return False

            if is_verbose(item, self._verbose):
                verbosity = coalesce(verbosity, 0) + self._count(match.argument)
                continue

            if not self._put(item, match, False, ignore_errors):
                return False

        if verbosity is not Unset:
            self._store.put_int(tables.short(self._verbose).name, verbosity)

        self._optind = scanner.optind
        self._arguments = scanner.arguments
        return True

    def _apply(self, name, match, negated, ignore_errors):
        item = self._store.find(name)
        if item is None:
            if ignore_errors:
                return True
            self._reject(match._replace(error="unknown"))
            return False

        if item.deprecated:
            replacement = self._store.find(item.current)
            if item.strict or replacement is None:
                fault = RemovedOptionWarning if ignore_errors else RemovedOptionError
                self.trigger(fault(
                    "option --%s no longer exists" % item.name,
                    title="removed option",
                    code=FaultCode.REMOVED_OPTION_IGNORED if ignore_errors else FaultCode.REMOVED_OPTION,
                    hint="remove it from the command line; try '%s --help' for the current options" % self._name,
                    docs=getdoc(FaultCode.REMOVED_OPTION),
                    option=item.name,
                    item=item,
                ))
                return ignore_errors

            self.trigger(DeprecatedOptionWarning(
                "option --%s is deprecated" % item.name,
                title="deprecated option",
                code=FaultCode.DEPRECATED_OPTION,
                hint="use --%s instead" % replacement.name,
                docs=getdoc(FaultCode.DEPRECATED_OPTION),
                option=item.name,
                replacement=replacement.name,
                item=item,
            ))
            item = replacement

        return self._put(item, match, negated, ignore_errors)

    def _put(self, item, match, negated, ignore_errors):
        argument = match.argument
        if argument is None and item.type.takes_argument:
            # only reachable through a redirect from a boolean to a valued item
            if ignore_errors:
                return True
            self._reject(match._replace(error="missing"))
            return False

        store = self._store
        if item.type.is_textual:
            store.put_string(item.name, argument)
        else:
            match item.type:
                case ItemType.INTEGER:
                    store.put_int(item.name, _strtol(argument))
                case ItemType.FLOAT:
                    store.put_float(item.name, _atof(argument))
                case ItemType.KEY:
                    store.put_int(item.name, keys.to_code(argument))
                case ItemType.BOOL:
                    store.put_bool(item.name, not negated)
        return True

    def _count(self, argument):
        if argument is None:
            return 1
        if argument.startswith(self._verbose):
            return 1 + len(argument) - len(argument.lstrip(self._verbose))
        return _atoi(argument)

    def _reject(self, match):
        culprit = "-" + match.optopt if match.optopt else match.token
        match match.error:
            case "missing":
                code, title, message = (
                    FaultCode.MISSING_ARGUMENT, "missing argument",
                    "missing mandatory argument for option %r" % culprit,
                )
                fault = MissingArgumentError
            case "ambiguous":
                code, title, message = (
                    FaultCode.AMBIGUOUS_OPTION, "ambiguous option",
                    "option %r is ambiguous" % culprit,
                )
                fault = AmbiguousOptionError
            case "unexpected":
                code, title, message = (
                    FaultCode.UNEXPECTED_ARGUMENT, "unexpected argument",
                    "option %r does not take an argument" % culprit,
                )
                fault = UnexpectedArgumentError
            case _:
                code, title, message = (
                    FaultCode.UNKNOWN_OPTION, "unknown option",
                    "unknown option or missing mandatory argument %r" % culprit,
                )
                fault = UnknownOptionError

        self.trigger(fault(
            message,
            title=title,
            code=code,
            hint="try '%s --help' for more information" % self._name,
            docs=getdoc(code),
            token=match.token,
            optopt=match.optopt,
        ))


def load(registry, store, argv, /, *, ignore_errors=False, **options):
    """
    one-shot form of CommandLine(registry, store, **options).load(argv, ...).
    """
    return CommandLine(registry, store, **options).load(argv, ignore_errors=ignore_errors)


__all__ = (
    "CommandLine",
    "load",
    "strip_platform_arguments",
)
