import math
import unittest

from frontvars import funcs
from frontvars.funcs import FUNCS, first, highest, join, last, lower, lowest, size, upper
from frontvars.values import (
    compare,
    flatten,
    is_list,
    is_number,
    is_string,
    numberify,
    to_number,
    to_text,
)


class TestValues(unittest.TestCase):
    def test_predicates(self):
        self.assertTrue(is_string('x'))
        self.assertFalse(is_string(1))
        self.assertTrue(is_number(1))
        self.assertTrue(is_number(1.5))
        self.assertFalse(is_number(True))
        self.assertFalse(is_number('1'))
        self.assertTrue(is_list([]))
        self.assertFalse(is_list('ab'))

    def test_flatten(self):
        self.assertEqual(flatten(['a', ['b', [1, None]]], 'c'), ['a', 'b', 1, 'c'])
        self.assertEqual(flatten(['a']), 'a')
        self.assertEqual(flatten([[5]]), 5)
        self.assertEqual(flatten(None, [None]), [])
        self.assertEqual(flatten(), [])

    def test_to_text(self):
        self.assertEqual(to_text(7.5), '7.5')
        self.assertEqual(to_text(12.0), '12')
        self.assertEqual(to_text(-3), '-3')
        self.assertEqual(to_text(True), 'true')
        self.assertEqual(to_text(None), 'null')
        self.assertEqual(to_text(['a', 1, 2.0]), '["a",1,2]')
        self.assertEqual(to_text(math.inf), 'Infinity')
        self.assertEqual(to_text({'a': 1}), '{"a":1}')

    def test_to_number(self):
        self.assertEqual(to_number('1975'), 1975)
        self.assertIsInstance(to_number('1975'), int)
        self.assertEqual(to_number('-2.5'), -2.5)
        self.assertEqual(to_number('.57'), 0.57)
        self.assertEqual(to_number('75.'), 75)
        for s in ('', ' ', 'abc', '1_000', 'nan', 'inf', '-Infinity', '5-', '١٢', '１'):
            self.assertIsNone(to_number(s), s)

    def test_numberify(self):
        self.assertEqual(numberify('v12'), 12)
        self.assertEqual(numberify('12 apples, 3.5 pears'), 3.5)
        self.assertEqual(numberify('x -4'), -4)
        self.assertEqual(numberify('Alice'), 'Alice')
        self.assertEqual(numberify(''), '')

    def test_compare(self):
        self.assertLess(compare(20, 10, 'desc'), 0)
        self.assertGreater(compare(20, 10, 'asc'), 0)
        self.assertEqual(compare(3, 3), 0)
        # Strings with numbers sort by their final number.
        self.assertLess(compare('item 2', 'item 10', 'asc'), 0)
        self.assertLess(compare('a', 'B', 'asc'), 0)
        self.assertLess(compare('a', 'A', 'asc'), 0)
        self.assertLess(compare('.', '5', 'asc'), 0)
        # Accents only break ties between the same base letter.
        self.assertLess(compare('é', 'f', 'asc'), 0)
        self.assertLess(compare('e', 'é', 'asc'), 0)
        self.assertLess(compare('E', 'é', 'asc'), 0)
        for a, b in (('x', 'y'), (1, 'b'), ('B', 'a'), (2.5, 2)):
            self.assertEqual(compare(a, b, 'asc'), -compare(a, b, 'desc'), (a, b))


class TestFuncs(unittest.TestCase):
    def test_registry(self):
        self.assertEqual(
            funcs.names(),
            ['first', 'highest', 'join', 'last', 'lower', 'lowest', 'size', 'upper'],
        )
        for name, func in FUNCS.items():
            for val in ('abc', 7.5, -12, ['a', 2, ['b']], [], True, None, {'k': 'v'}):
                func(val)
                func(val, val)

    def test_first_last(self):
        self.assertEqual(first(['a', 'b'], ['c']), 'a')
        self.assertEqual(last(['a', 'b'], ['c']), 'c')
        self.assertEqual(first('Oscar'), 'O')
        self.assertEqual(last('Oscar'), 'r')
        self.assertEqual(first(1975), '1')
        self.assertEqual(last(7.5), '5')
        self.assertEqual(first(''), '')
        self.assertIsNone(first([]))
        self.assertIsNone(last([None]))
        self.assertIs(first(True), True)

    def test_upper_lower(self):
        self.assertEqual(upper('Oscar'), 'OSCAR')
        self.assertEqual(lower('Oscar'), 'oscar')
        self.assertEqual(upper(7.5), 8)
        self.assertEqual(lower(7.5), 7)
        self.assertEqual(upper(-7.5), -7)
        self.assertEqual(lower(-7.5), -8)
        self.assertEqual(upper(3), 3)
        self.assertEqual(upper(['a', 1.2], 'b'), ['A', 2, 'B'])
        self.assertEqual(lower(['A', 1.8]), ['a', 1])
        self.assertEqual(upper(math.inf), math.inf)

    def test_highest_lowest(self):
        self.assertEqual(highest('Oscar'), 'srOca')
        self.assertEqual(lowest('Oscar'), 'acOrs')
        self.assertEqual(lowest('zéf'), 'éfz')
        self.assertEqual(highest('Émile'), 'mliÉe')
        self.assertEqual(highest([10, 20, 15]), [20, 15, 10])
        self.assertEqual(lowest([10, 20, 15], 5, 25), [5, 10, 15, 20, 25])
        self.assertEqual(highest(1975), 9751)
        self.assertEqual(lowest(1975), 1579)
        self.assertEqual(highest(7.5), 75)
        self.assertEqual(lowest(7.5), 0.57)
        self.assertEqual(highest(-12), '21-')
        self.assertEqual(
            highest(['item 2', 'item 10', 'item 1']), ['item 10', 'item 2', 'item 1']
        )

    def test_inverse(self):
        for seq in (
            [3, 1, 2],
            ['pear', 'Apple', 'fig', 'apple'],
            ['b', 1, 'a', 2.5],
        ):
            self.assertEqual(highest(seq), list(reversed(lowest(seq))), seq)
        self.assertEqual(highest('Wilde'), lowest('Wilde')[::-1])
        self.assertEqual(highest(1975), int(str(lowest(1975))[::-1]))

    def test_stable(self):
        # Equal keys keep their original order, both ways.
        self.assertEqual(lowest(['v1', 'w1', 'v0']), ['v0', 'v1', 'w1'])
        self.assertEqual(highest(['v1', 'w1', 'v0']), ['v1', 'w1', 'v0'])

    def test_size(self):
        self.assertEqual(size(['a', 'b'], ['c']), 3)
        self.assertEqual(size('Oscar'), 5)
        self.assertEqual(size(1975), 4)
        self.assertEqual(size(7.5), 3)
        self.assertEqual(size(True), 4)
        self.assertEqual(size({'a': 1}), 7)
        self.assertEqual(size(), 0)

    def test_join(self):
        self.assertEqual(join(['Alice', 'Bob'], ['Carol']), 'Alice, Bob, Carol')
        self.assertEqual(join([5, 2.0]), '5, 2')
        self.assertEqual(join('Oscar'), 'Oscar')
        self.assertEqual(join(7.5), 7.5)


if __name__ == '__main__':
    unittest.main()
