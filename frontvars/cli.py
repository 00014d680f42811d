import sys
import json
import argparse
from typing import Any

from . import Engine, Fragment
from .template import parse_placeholder
from .values import to_number


def try_to_value(s: str) -> Any:
    if (num := to_number(s)) is not None:
        return num
    if s.startswith('['):
        try:
            return json.loads(s)
        except ValueError:
            pass
    return s


def load_record(path: str | None) -> dict[str, Any]:
    if path is None:
        return {}
    if path == '-':
        record = json.load(sys.stdin)
    else:
        with open(path, encoding='utf-8') as fp:
            record = json.load(fp)
    if not isinstance(record, dict):
        raise SystemExit(f'{path}: expected a JSON object')
    return record


def parse_field(arg: str) -> tuple[str, Any]:
    key, sep, val = arg.partition('=')
    if not sep:
        raise SystemExit(f'bad field (expected KEY=VALUE): {arg}')
    return key.strip(), try_to_value(val)


def dump_tree(frag: Fragment):
    for node in frag:
        print(' ', repr(node))


def main():
    parser = argparse.ArgumentParser(
        description='Evaluate a frontmatter expression and render it as HTML.'
    )
    parser.add_argument('expr', help='an expression, or a full {{ ... }} placeholder')
    parser.add_argument('fields', nargs='*', help='KEY=VALUE record fields')
    parser.add_argument('-r', '--record', help='JSON object file with fields, or -')
    parser.add_argument('-t', '--tree', action='store_true', help='Print the node tree')
    parser.add_argument('-P', '--prefix', action='store_true', help='Show the label')
    parser.add_argument(
        '-s', '--spread', action='store_true', help='Separate list items by commas'
    )
    parser.add_argument(
        '-d', '--dump-value', action='store_true', help='Dump the evaluated value'
    )
    args = parser.parse_args()

    record = load_record(args.record)
    record.update(parse_field(arg) for arg in args.fields)
    engine = Engine(record)

    expr, prefix, spread = args.expr, args.prefix, args.spread
    if (p := parse_placeholder(expr)) is not None:
        expr = p.expression
        prefix = prefix or p.prefix
        spread = spread or p.spread

    if args.dump_value:
        print('Value:', repr(engine.evaluate(expr)), file=sys.stderr)

    if args.tree:
        dump_tree(engine.render(expr, prefix, mode='tree', spread=spread))
    else:
        print(engine.render(expr, prefix, spread=spread))


if __name__ == '__main__':
    main()
