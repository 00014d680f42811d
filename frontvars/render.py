import re
from html import escape as html_escape
from dataclasses import dataclass, field
from typing import Any, Iterator, Literal

from .util import trace
from .values import is_list, to_text

type Mode = Literal['string', 'tree']

# [[target]] or [[target|display]]
LINK = re.compile(r'\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')
CALL = re.compile(r'([a-zA-Z_][a-zA-Z0-9_]*)\(([^()]*)\)')
LABEL_SEP = re.compile(r'[^a-zA-Z0-9_\-.]+')
NUMERIC_LABEL = re.compile(r'\d+(?:\.\d+)?')
JOIN_CALL = re.compile(r'\s*join\s*\(', re.IGNORECASE)

LIST_SEP = '<br />'
SPREAD_SEP = ', '


def escape(s: str) -> str:
    # Apostrophes as `&#39;`, not `&#x27;`.
    return html_escape(s).replace('&#x27;', '&#39;')


@dataclass(frozen=True)
class Text:
    text: str

    def html(self) -> str:
        return escape(self.text)


@dataclass(frozen=True)
class Bold:
    text: str

    def html(self) -> str:
        return f'<b>{escape(self.text)}</b>'


@dataclass(frozen=True)
class Link:
    target: str
    display: str

    def html(self) -> str:
        href = escape(self.target)
        return (
            f'<a class="internal-link" data-href="{href}" href="{href}">'
            f'{escape(self.display)}</a>'
        )


@dataclass(frozen=True)
class Break:
    def html(self) -> str:
        return LIST_SEP


type Node = Text | Bold | Link | Break


@dataclass
class Fragment:
    children: list[Node] = field(default_factory=list)

    def append(self, node: Node):
        self.children.append(node)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def html(self) -> str:
        return ''.join(node.html() for node in self.children)


def capitalise(s: str) -> str:
    return s[:1].upper() + s[1:]


def extract(expr: str) -> str | None:
    '''Returns the first field-like name in `expr`, looking through calls.'''
    cleaned = expr
    while m := CALL.search(cleaned):
        cleaned = cleaned.replace(m[0], m[2], 1)

    for part in LABEL_SEP.split(cleaned):
        if part and not NUMERIC_LABEL.fullmatch(part):
            return part
    return None


def label(expr: str | None) -> str:
    name = (expr and extract(expr)) or expr or ''
    return capitalise(name) + ': '


def link(val: Any) -> Text | Link:
    text = to_text(val)
    if isinstance(val, str) and (m := LINK.fullmatch(text.strip())):
        target = m[1].strip()
        display = m[2].strip() if m[2] else target
        return Link(target, display)
    return Text(text)


def render_tree(
    value: Any,
    key: str | None = None,
    prefix: bool = False,
    *,
    spread: bool = False,
) -> Fragment:
    frag = Fragment()
    # Unresolved: render nothing at all.
    if value is None:
        return frag

    if prefix:
        frag.append(Bold(label(key)))
        if is_list(value):
            frag.append(Break())

    if not is_list(value):
        frag.append(link(value))
    elif key is not None and JOIN_CALL.match(key):
        frag.append(Text(', '.join(to_text(x) for x in value)))
    else:
        for idx, item in enumerate(value):
            if idx:
                frag.append(Text(SPREAD_SEP) if spread else Break())
            frag.append(link(item))

    trace('render: %r -> %s', value, frag)
    return frag


def render(
    value: Any,
    key: str | None = None,
    prefix: bool = False,
    *,
    mode: Mode = 'string',
    spread: bool = False,
) -> str | Fragment:
    '''
    Renders an evaluated value for display.

    `key` is the expression the value came from, used to derive the label
    (`prefix`) and to tell whether a list was already joined. In `'string'`
    mode the result is HTML; in `'tree'` mode it is the equivalent `Fragment`.
    '''
    frag = render_tree(value, key, prefix, spread=spread)
    match mode:
        case 'string':
            return frag.html()
        case 'tree':
            return frag
        case _:
            raise ValueError(f'bad render mode: {mode!r}')
