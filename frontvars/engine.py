import os
import re
import functools
from contextlib import contextmanager
from typing import Any, Mapping, Type, TypeVar, cast, override

from lark import Lark, Token, Tree
from lark.visitors import Interpreter
from lark.exceptions import LarkError

from .funcs import FUNCS
from .util import is_tracing, log, shorten, trace
from .values import Value, is_list, is_number, is_string, to_number, to_text

# Nesting limit of calls and groups.
MAX_DEPTH = 32

# Operands that evaluate to such strings take part in arithmetic as numbers.
NUMERIC = re.compile(r'-?\d+(?:\.\d+)?', re.ASCII)

parser = Lark.open(
    os.path.join(os.path.dirname(__file__), 'expr.lark'),
    parser='lalr',
)


# Trees are never modified after parsing, so they can be shared by evaluations.
@functools.lru_cache
def parse_expr(text: str) -> Tree:
    return parser.parse(text)


T = TypeVar('T', bound=Tree | Token)


def narrow(x: Tree | Token, target_type: Type[T]) -> T:
    assert isinstance(x, target_type), x
    return cast(T, x)


# Stop evaluating the entire expression.
class Abort(Exception):
    pass


def _is_blank(x: Tree | Token) -> bool:
    return isinstance(x, Token) and x.isspace()


def _coerce(val: Any) -> Any:
    if is_string(val) and NUMERIC.fullmatch(val):
        return to_number(val)
    return val


def combine(values: list[Any], ops: list[str]) -> Value | None:
    '''
    Folds operands left to right. The first matching rule decides for the whole
    chain:

    1. any unresolved (`None`) operand makes the result unresolved;
    2. any list promotes all operands to lists: `+` concatenates, `-` removes
       every element equal to one of the subtrahend's;
    3. numbers add and subtract;
    4. strings concatenate, and `-` removes the first occurrence of the
       subtrahend;
    5. anything else is concatenated as text.
    '''
    if any(v is None for v in values):
        return None

    acc = values[0]
    rest = zip(ops, values[1:])

    if any(is_list(v) for v in values):
        acc = list(acc) if is_list(acc) else [acc]
        for op, val in rest:
            items = val if is_list(val) else [val]
            if op == '+':
                acc.extend(items)
            else:
                acc = [x for x in acc if x not in items]
        return acc

    if all(is_number(v) for v in values):
        for op, val in rest:
            acc = acc + val if op == '+' else acc - val
        return acc

    if all(is_string(v) for v in values):
        for op, val in rest:
            acc = acc + val if op == '+' else acc.replace(val, '', 1)
        return acc

    return ''.join(to_text(v) for v in values)


class Evaluator(Interpreter):
    def __init__(self, text: str, record: Mapping[str, Any]):
        super().__init__()
        self._text = text
        self._record = record
        self._depth = 0

    # Override lark visitor to raise on unhandled nodes.
    @override
    def __getattr__(self, name: str):
        raise NotImplementedError(name)

    # A literal is a field name, a number, or just itself.
    def resolve(self, text: str) -> Value | None:
        s = text.strip()
        if s in self._record:
            return self._record[s]
        if (num := to_number(s)) is not None:
            return num
        return s

    @contextmanager
    def _push(self):
        if self._depth >= MAX_DEPTH:
            log.warning('Expression too deep: %s', shorten(self._text))
            raise Abort()
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def _is_known_call(self, tree: Tree) -> bool:
        name = narrow(tree.children[0], Token)[:-1]
        return name in FUNCS

    # a + b - c ...
    def chain(self, tree: Tree) -> Value | None:
        chs = tree.children
        if len(chs) == 1:
            return self.visit(narrow(chs[0], Tree))

        values = [_coerce(self.visit(narrow(ch, Tree))) for ch in chs[::2]]
        ops = [str(narrow(op, Token)) for op in chs[1::2]]
        val = combine(values, ops)
        trace('chain: %r %s -> %r', values, ops, val)
        return val

    def operand(self, tree: Tree) -> Value | None:
        atoms = list(tree.children)
        while atoms and _is_blank(atoms[0]):
            atoms.pop(0)
        while atoms and _is_blank(atoms[-1]):
            atoms.pop()

        # A lone call or group keeps the type of its value.
        if len(atoms) == 1 and isinstance(atom := atoms[0], Tree):
            if atom.data == 'group' or self._is_known_call(atom):
                return self.visit(atom)

        return self.resolve(''.join(self.splice(atom) for atom in atoms))

    # Text form of a piece of an operand. An unknown call keeps its name,
    # parentheses, commas and operators, but the calls and groups in its
    # arguments are still evaluated.
    def splice(self, x: Tree | Token) -> str:
        if isinstance(x, Token):
            return str(x)
        match x.data:
            case 'chain' | 'operand':
                return ''.join(self.splice(ch) for ch in x.children)
            case 'call' if not self._is_known_call(x):
                with self._push():
                    args = ''.join(self.splice(ch) for ch in x.children[1:])
                text = f'{x.children[0]}{args})'
                trace('Unknown function: %s', text)
                return text
            case _:
                return to_text(self.visit(x))

    # name(arg, ...)
    def call(self, tree: Tree) -> Value | None:
        name = narrow(tree.children[0], Token)[:-1]
        func = FUNCS[name]
        with self._push():
            args = [self.visit(ch) for ch in tree.children[1:] if isinstance(ch, Tree)]
        val = func(*args)
        trace('call: %s%r -> %r', name, tuple(args), val)
        return val

    # (chain)
    def group(self, tree: Tree) -> Value | None:
        with self._push():
            return self.visit(narrow(tree.children[0], Tree))


def evaluate(expression: str, record: Mapping[str, Any] | None = None) -> Value | None:
    '''
    Evaluates `expression` against the fields of `record`.

    Malformed expressions are never an error: whatever cannot be parsed or
    called is returned as its own text. `None` means the expression referred
    to an unset field inside a `+`/`-` chain, and should render as nothing.
    '''
    if record is None:
        record = {}
    text = expression.strip()

    # Field names may well contain `-`, and numbers may be negative.
    if text in record:
        return record[text]
    if (num := to_number(text)) is not None:
        return num

    try:
        tree = parse_expr(text)
    except LarkError as e:
        log.debug('parse: %s: %s: %s', shorten(text), type(e).__name__, e)
        return text

    if is_tracing:
        trace('Parsed tree (%s): %s', len(text), tree.pretty())

    try:
        val = Evaluator(text, record).visit(tree)
    except Abort:
        return text

    trace('evaluate: %s -> %r', text, val)
    return val
