import math
from typing import Any, Callable

from .util import trace
from .values import Value, ASC, DESC, flatten, to_number, to_text


# Every function first flattens its arguments, then dispatches on the shape of
# the result. Anything unexpected takes the fallback branch unchanged.


def first(*args) -> Value | None:
    match val := flatten(args):
        case list():
            return val[0] if val else None
        case str():
            return val[:1]
        case bool():
            return val
        case int() | float():
            return to_text(val)[:1]
        case _:
            return val


def last(*args) -> Value | None:
    match val := flatten(args):
        case list():
            return val[-1] if val else None
        case str():
            return val[-1:]
        case bool():
            return val
        case int() | float():
            return to_text(val)[-1:]
        case _:
            return val


# For numbers, `upper` and `lower` are the nearest integers above and below.
def upper(*args) -> Value:
    match val := flatten(args):
        case list():
            return [upper(v) for v in val]
        case str():
            return val.upper()
        case bool():
            return val
        case int() | float():
            return math.ceil(val) if math.isfinite(val) else val
        case _:
            return val


def lower(*args) -> Value:
    match val := flatten(args):
        case list():
            return [lower(v) for v in val]
        case str():
            return val.lower()
        case bool():
            return val
        case int() | float():
            return math.floor(val) if math.isfinite(val) else val
        case _:
            return val


# A number is sorted by the characters of its decimal text, sign and point
# included, then read back: `1975` -> `9751`, `7.5` -> `.57` -> `0.57`.
def _sort_digits(val: int | float, key) -> Value:
    s = ''.join(sorted(to_text(val), key=key))
    if (num := to_number(s)) is None:
        trace('sort digits: %r -> %r is not a number', val, s)
        return s
    return num


def highest(*args) -> Value:
    match val := flatten(args):
        case list():
            return sorted(val, key=DESC)
        case str():
            return ''.join(sorted(val, key=DESC))
        case bool():
            return val
        case int() | float():
            return _sort_digits(val, DESC)
        case _:
            return val


def lowest(*args) -> Value:
    match val := flatten(args):
        case list():
            return sorted(val, key=ASC)
        case str():
            return ''.join(sorted(val, key=ASC))
        case bool():
            return val
        case int() | float():
            return _sort_digits(val, ASC)
        case _:
            return val


def size(*args) -> int:
    match val := flatten(args):
        case list() | str():
            return len(val)
        case _:
            # Numbers count the characters of their decimal text.
            return len(to_text(val))


def join(*args) -> Value:
    match val := flatten(args):
        case list():
            return ', '.join(to_text(v) for v in val)
        case _:
            return val


FUNCS: dict[str, Callable[..., Any]] = {
    'first': first,
    'last': last,
    'upper': upper,
    'lower': lower,
    'highest': highest,
    'lowest': lowest,
    'size': size,
    'join': join,
}


def names() -> list[str]:
    return sorted(FUNCS)
