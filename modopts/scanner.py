"""
getopt_long-compatible option scanner with an explicit cursor.

Scanner walks an argument vector left to right and yields one Match per
recognized (or rejected) option. All scanner state lives on the instance:
a new Scanner, or reset(), always starts again from argv[1].

Behavior (GNU getopt_long, permuting mode)
- argv[0] is the program name and is never scanned.
- Non-option arguments ("file", "-") are skipped and, as scanning goes,
  moved after the options in place; their relative order is preserved.
  When iteration ends, `optind` indexes the first of them.
- "--" ends option scanning; everything after it is a non-option.
- Long options: "--name", "--name=value", "--name value"; an unambiguous
  prefix of a name is accepted, an exact match always wins.
- Unlike GNU getopt_long, a prefix shared by several names is always
  rejected as ambiguous, even when the candidates take the same argument.
- Short options: bundling ("-abc"), "-c value", "-cvalue". A short option
  declared with "::" only takes an argument attached to it ("-v2").

Matches
- code == 0: long option, `index` points into the long table.
- code == <char>: short option.
- code == "?": rejected option; `error` says why ("unknown", "ambiguous",
  "missing", "unexpected"), `optopt` holds the short character (empty for
  long options) and `token` the raw argument text.
"""
from typing import NamedTuple

from .tables import Arity


class Match(NamedTuple):
    code: int | str
    index: int
    argument: str | None
    optopt: str
    token: str
    error: str | None = None


def parse_shortopts(spec, /):
    """
    map each character of a getopt spec string to its Arity.
    """
    shorts = {}
    position = 0
    while position < len(spec):
        char = spec[position]
        position += 1
        colons = 0
        while position < len(spec) and spec[position] == ":" and colons < 2:
            colons += 1
            position += 1
        shorts[char] = Arity(colons)
    return shorts


def _is_nonoption(token):
    return token == "-" or not token.startswith("-")


class Scanner:
    def __init__(self, argv, shortopts, longopts):
        if not isinstance(argv, list):
            raise TypeError("Scanner() argv must be a list")
        self._argv = argv
        self._shorts = parse_shortopts(shortopts)
        self._longs = []
        for option in longopts:
            if not option.name:
                break
            self._longs.append(option)
        self.reset()

    def reset(self):
        """
        rewind to argv[1] and forget any partially scanned token.
        """
        self.optind = 1
        self._nextchar = ""
        self._token = ""
        self._first = 1
        self._last = 1

    @property
    def argv(self):
        return self._argv

    @property
    def arguments(self):
        """
        the non-option arguments, once iteration has ended.
        """
        return self._argv[self.optind:]

    def _exchange(self):
        # swap [first, last) (skipped non-options) with [last, optind) (options)
        argv = self._argv
        argv[self._first:self.optind] = argv[self._last:self.optind] + argv[self._first:self._last]
        self._first += self.optind - self._last
        self._last = self.optind

    def __iter__(self):
        return self

    def __next__(self):
        if not self._nextchar:
            argv = self._argv
            count = len(argv)

            self._last = min(self._last, self.optind)
            self._first = min(self._first, self.optind)

            if self._first != self._last and self._last != self.optind:
                self._exchange()
            elif self._last != self.optind:
                self._first = self.optind

            while self.optind < count and _is_nonoption(argv[self.optind]):
                self.optind += 1
            self._last = self.optind

            if self.optind != count and argv[self.optind] == "--":
                self.optind += 1
                if self._first != self._last and self._last != self.optind:
                    self._exchange()
                elif self._first == self._last:
                    self._first = self.optind
                self._last = count
                self.optind = count

            if self.optind == count:
                if self._first != self._last:
                    self.optind = self._first
                raise StopIteration

            self._token = argv[self.optind]
            if self._token.startswith("--"):
                return self._long(self._token[2:])
            self._nextchar = self._token[1:]

        return self._short()

    def _long(self, body):
        token = self._token
        name, equals, value = body.partition("=")
        self.optind += 1

        index = next((index for index, option in enumerate(self._longs) if option.name == name), -1)
        if index < 0 and name:
            candidates = [index for index, option in enumerate(self._longs) if option.name.startswith(name)]
            if len(candidates) > 1:
                return Match("?", -1, None, "", token, "ambiguous")
            if candidates:
                index, = candidates
        if index < 0:
            return Match("?", -1, None, "", token, "unknown")

        option = self._longs[index]
        if equals:
            if option.arity is Arity.NONE:
                return Match("?", index, None, "", token, "unexpected")
            return Match(0, index, value, "", token)
        if option.arity is Arity.REQUIRED:
            if self.optind >= len(self._argv):
                return Match("?", index, None, "", token, "missing")
            self.optind += 1
            return Match(0, index, self._argv[self.optind - 1], "", token)
        return Match(0, index, None, "", token)

    def _short(self):
        token = self._token
        char, self._nextchar = self._nextchar[0], self._nextchar[1:]
        if not self._nextchar:
            self.optind += 1

        arity = self._shorts.get(char)
        if arity is None:
            return Match("?", -1, None, char, token, "unknown")
        if arity is Arity.NONE:
            return Match(char, -1, None, char, token)

        if self._nextchar:
            argument, self._nextchar = self._nextchar, ""
            self.optind += 1
            return Match(char, -1, argument, char, token)
        if arity is Arity.OPTIONAL:
            return Match(char, -1, None, char, token)
        if self.optind >= len(self._argv):
            return Match("?", -1, None, char, token, "missing")
        self.optind += 1
        return Match(char, -1, self._argv[self.optind - 1], char, token)


__all__ = (
    "Match",
    "Scanner",
    "parse_shortopts",
)
