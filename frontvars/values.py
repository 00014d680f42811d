import re
import json
import math
import functools
import unicodedata
from typing import Any, Callable, Iterable, Literal, TypeGuard

# Field values as found in a frontmatter record. Integers and floats are both
# "numbers" here; lists may be nested and mixed, and are flattened on demand.
type Scalar = str | int | float
type Value = Scalar | list[Value]

type Direction = Literal['asc', 'desc']

# The final numeric run of a text, i.e. one that is not followed by any digit.
NUMBER_SUFFIX = re.compile(r'(-?\d+(?:\.\d+)?)(?!.*\d)', re.ASCII)


def is_string(v: Any) -> TypeGuard[str]:
    return isinstance(v, str)


# `bool` is an `int` subclass, but never a number to us.
def is_number(v: Any) -> TypeGuard[int | float]:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def is_list(v: Any) -> TypeGuard[list]:
    return isinstance(v, list)


def _number_to_text(v: int | float) -> str:
    if isinstance(v, int):
        return str(v)
    if math.isnan(v):
        return 'NaN'
    if math.isinf(v):
        return 'Infinity' if v > 0 else '-Infinity'
    if v.is_integer():
        return str(int(v))
    return repr(v)


def to_text(v: Any) -> str:
    '''
    Textual form of a value, as it would be spliced into an expression or shown
    to the user: integral floats lose their `.0`, lists become compact JSON.
    '''
    if isinstance(v, str):
        return v
    if isinstance(v, bool):
        return 'true' if v else 'false'
    if is_number(v):
        return _number_to_text(v)
    if v is None:
        return 'null'
    if isinstance(v, (list, tuple)):
        return '[' + ','.join(_to_json(x) for x in v) + ']'
    return json.dumps(v, ensure_ascii=False, separators=(',', ':'), default=str)


def _to_json(v: Any) -> str:
    if isinstance(v, str):
        return json.dumps(v, ensure_ascii=False)
    return to_text(v)


def to_number(text: str) -> int | float | None:
    s = text.strip()
    # Python accepts digit separators and non-ASCII digits, which are plain
    # text here.
    if not s or not s.isascii() or '_' in s:
        return None
    try:
        return int(s)
    except ValueError:
        pass
    try:
        val = float(s)
    except ValueError:
        return None
    return val if math.isfinite(val) else None


def _walk(values: Iterable[Any]) -> Iterable[Any]:
    for v in values:
        if isinstance(v, (list, tuple)):
            yield from _walk(v)
        elif v is not None:
            yield v


def flatten(*values: Any) -> Any:
    items = list(_walk(values))
    return items[0] if len(items) == 1 else items


def numberify(val: Any) -> Any:
    if m := NUMBER_SUFFIX.search(to_text(val)):
        return float(m[1])
    return val


def _char_class(c: str) -> int:
    match unicodedata.category(c)[0]:
        case 'N':
            return 1
        case 'L' | 'M':
            return 2
        case _:
            # Spaces, punctuation, symbols and controls.
            return 0


def collation_key(s: str) -> tuple:
    # Letters compare by base letter case-insensitively first, then by accent,
    # then lowercase before uppercase.
    chars = [unicodedata.normalize('NFD', c) for c in s]
    primary = tuple((_char_class(d[0]), d[0].casefold()) for d in chars)
    secondary = tuple(d[1:] for d in chars)
    tertiary = tuple(c.isupper() for c in s)
    return primary, secondary, tertiary, s


def _collate(a: str, b: str) -> int:
    ka, kb = collation_key(a), collation_key(b)
    return (ka > kb) - (ka < kb)


def _ascending(a: Any, b: Any) -> int:
    if is_string(a) and is_string(b):
        return _collate(a, b)
    if is_number(a) and is_number(b):
        return (a > b) - (a < b)
    return _collate(to_text(a), to_text(b))


def compare(a: Any, b: Any, direction: Direction = 'desc') -> int:
    if is_string(a):
        a = numberify(a)
    if is_string(b):
        b = numberify(b)
    return _ascending(b, a) if direction == 'desc' else _ascending(a, b)


def sort_key(direction: Direction) -> Callable[[Any], Any]:
    return functools.cmp_to_key(functools.partial(compare, direction=direction))


ASC = sort_key('asc')
DESC = sort_key('desc')
