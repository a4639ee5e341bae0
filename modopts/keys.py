"""
Key name table for KEY configuration items.

A key value is written on the command line as an optional chain of
modifiers followed by a key name, separated by '-':

    Ctrl-Shift-Left    Alt-F4    Command-q    space    Unset

Codes
- modifiers occupy the high byte (ALT, SHIFT, CTRL, META, COMMAND);
- special keys occupy the third byte (LEFT = 0x00010000 ...);
- printable keys use their code point;
- UNSET (0) stands for "no key" and is what unknown names translate to.

Modifier and key names are matched case-insensitively; a single printable
character is matched exactly so "a" and "A" stay distinct.
"""
import string
from types import MappingProxyType

UNSET           = 0x00000000

MODIFIER        = 0xFF000000
ALT             = 0x01000000
SHIFT           = 0x02000000
CTRL            = 0x04000000
META            = 0x08000000
COMMAND         = 0x10000000

SPECIAL         = 0x00FF0000

MODIFIERS = MappingProxyType({
    "alt": ALT,
    "shift": SHIFT,
    "ctrl": CTRL,
    "meta": META,
    "command": COMMAND,
})

_SPECIALS = (
    "Left", "Right", "Up", "Down", "Space", "Enter",
    "F1", "F2", "F3", "F4", "F5", "F6", "F7", "F8", "F9", "F10", "F11", "F12",
    "Home", "End", "Menu", "Esc", "Page Up", "Page Down", "Tab", "Backspace",
    "Mouse Wheel Up", "Mouse Wheel Down", "Mouse Wheel Left", "Mouse Wheel Right",
    "Insert", "Delete",
)

SPECIALS = MappingProxyType({
    name: (index + 1) << 16 for index, name in enumerate(_SPECIALS)
})

# Display name -> code for every known key, specials first.
KEYS = MappingProxyType({"Unset": UNSET} | dict(SPECIALS) | {
    char: ord(char) for char in string.ascii_lowercase + string.digits + string.punctuation
    if char != "-"
})

_FOLDED = {name.lower(): code for name, code in KEYS.items() if len(name) > 1}


def _lookup(name):
    if len(name) == 1:
        if name == "-" or not name.isprintable() or name.isspace():
            return UNSET
        return ord(name)
    return _FOLDED.get(name.lower(), UNSET)


def to_code(text, /):
    """
    translate a key description ("Ctrl-Alt-Left") into its integer code.

    Every '-'-separated segment before the last is tested against the
    modifier names by prefix; the last segment is the key. A trailing '-'
    names the minus key itself ("Ctrl--"). Unknown keys translate to UNSET,
    modifiers included.
    """
    if not isinstance(text, str):
        raise TypeError("to_code() argument must be a string")

    code = UNSET
    head, separator, key = text.rpartition("-")
    if separator and not key:
        head, key = head[:-1] if head.endswith("-") else head, "-"
    elif not separator:
        head = ""

    for segment in filter(None, head.split("-")):
        for name, bit in MODIFIERS.items():
            if segment.lower().startswith(name):
                code |= bit

    if key == "-":
        return code | ord("-")
    if not (base := _lookup(key)):
        return UNSET
    return code | base


def to_string(code, /):
    """
    render a key code back into its canonical description ("Ctrl-Left").
    """
    if not isinstance(code, int):
        raise TypeError("to_string() argument must be an integer")
    if not code:
        return "Unset"

    parts = [name.title() for name, bit in MODIFIERS.items() if code & bit]
    base = code & ~MODIFIER
    if base & SPECIAL:
        name = next((name for name, value in SPECIALS.items() if value == base), None)
    else:
        name = chr(base) if 0 < base < 0x110000 and chr(base).isprintable() else None
    if name is None:
        return "Unset"
    return "-".join(parts + [name])


__all__ = (
    "UNSET",
    "MODIFIER",
    "ALT",
    "SHIFT",
    "CTRL",
    "META",
    "COMMAND",
    "SPECIAL",
    "MODIFIERS",
    "SPECIALS",
    "KEYS",
    "to_code",
    "to_string",
)
