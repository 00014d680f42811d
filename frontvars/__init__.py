from typing import Any, Mapping

from .engine import MAX_DEPTH, evaluate, parse_expr
from .funcs import FUNCS, names
from .render import Bold, Break, Fragment, Link, Mode, Text, render, render_tree
from .template import Placeholder, parse_placeholder
from .util import log, trace
from .values import Scalar, Value, compare, flatten, numberify, to_text


class Engine:
    '''
    Evaluates and renders expressions against one frontmatter record.

    A record that is not available yet (`None`) behaves as an empty one.
    The record is only read, never modified.
    '''

    def __init__(self, record: Mapping[str, Any] | None = None):
        self.record: Mapping[str, Any] = {} if record is None else record

    def evaluate(self, expr: str) -> Value | None:
        return evaluate(expr, self.record)

    def render(
        self,
        expr: str,
        prefix: bool = False,
        *,
        mode: Mode = 'string',
        spread: bool = False,
    ) -> str | Fragment:
        val = self.evaluate(expr)
        return render(val, expr.strip(), prefix, mode=mode, spread=spread)

    def render_placeholder(self, text: str, *, mode: Mode = 'string') -> str | Fragment:
        if (p := parse_placeholder(text)) is None:
            raise ValueError(f'not a placeholder: {text!r}')
        trace('Rendering placeholder: %s', p)
        return self.render(p.expression, p.prefix, mode=mode, spread=p.spread)

    # Flatten view of the record. For external use only.
    def __getitem__(self, key: str) -> Any:
        return self.record[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.record.get(key, default)


def render_placeholder(
    text: str, record: Mapping[str, Any] | None = None, *, mode: Mode = 'string'
) -> str | Fragment:
    return Engine(record).render_placeholder(text, mode=mode)


__all__ = [
    'Bold',
    'Break',
    'Engine',
    'FUNCS',
    'Fragment',
    'Link',
    'MAX_DEPTH',
    'Mode',
    'Placeholder',
    'Scalar',
    'Text',
    'Value',
    'compare',
    'evaluate',
    'flatten',
    'log',
    'names',
    'numberify',
    'parse_expr',
    'parse_placeholder',
    'render',
    'render_placeholder',
    'render_tree',
    'to_text',
]
