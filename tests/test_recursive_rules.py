from __future__ import annotations
import unittest

from tracepeg import GrammarBase, IncompleteParse, NestingTooDeep, Parser, TracepegError


class GroupFactory:
    def group(self, open_, inner, close):
        return [inner]

    def leaf(self, token):
        return token.text


class GroupGrammar(GrammarBase):
    """expr <- group / leaf ; group <- "(" expr ")" """

    def expr(self):
        return self.b.nonterminal().is_(self.b.first_of(self.group(), self.leaf()))

    def group(self):
        return self.b.nonterminal().is_(
            self.f.group(self.b.token("("), self.expr(), self.b.token(")")))

    def leaf(self):
        return self.b.nonterminal().is_(self.f.leaf(self.b.pattern("[a-z]+")))


class NestFactory:
    def nest(self, open_, children, close):
        return children


class NestGrammar(GrammarBase):
    def nest(self):
        return self.b.nonterminal().is_(
            self.f.nest(self.b.token("("), self.b.zero_or_more(self.nest()), self.b.token(")")))


class SumFactory:
    def add(self, left, plus, right):
        return ("+", left, right)

    def number(self, token):
        return int(token.text)


class LeftRecursiveGrammar(GrammarBase):
    def sum_(self):
        return self.b.nonterminal().is_(
            self.b.first_of(
                self.f.add(self.sum_(), self.b.token("+"), self.number()),
                self.number(),
            ))

    def number(self):
        return self.b.nonterminal().is_(self.f.number(self.b.pattern("[0-9]+")))


class MutualRecursionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = Parser(GroupGrammar, GroupFactory())

    def test_leaf(self) -> None:
        self.assertEqual(self.parser.parse("a"), "a")

    def test_nested_groups(self) -> None:
        self.assertEqual(self.parser.parse("((a))"), [["a"]])

    def test_whitespace_between_groups(self) -> None:
        self.assertEqual(self.parser.parse(" ( ( abc ) ) "), [["abc"]])

    def test_unbalanced_group_is_incomplete(self) -> None:
        with self.assertRaises(TracepegError):
            self.parser.parse("((a)")


class SelfRecursionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = Parser(NestGrammar, NestFactory())

    def test_empty(self) -> None:
        self.assertEqual(self.parser.parse("()"), [])

    def test_siblings_and_depth(self) -> None:
        self.assertEqual(self.parser.parse("(()(()))"), [[], [[]]])


class LeftRecursionTests(unittest.TestCase):
    def test_left_recursive_alternative_never_matches(self) -> None:
        parser = Parser(LeftRecursiveGrammar, SumFactory())
        self.assertEqual(parser.parse("7"), 7)
        with self.assertRaises(IncompleteParse) as ctx:
            parser.parse("1+2")
        self.assertEqual((ctx.exception.consumed, ctx.exception.total), (1, 3))


class DeepNestingTests(unittest.TestCase):
    def test_recursion_limit_is_reported_as_tracepeg_error(self) -> None:
        parser = Parser(GroupGrammar, GroupFactory())
        depth = 5000
        with self.assertRaises(NestingTooDeep) as ctx:
            parser.parse("(" * depth + "a" + ")" * depth)
        self.assertIsInstance(ctx.exception, TracepegError)
        self.assertIsInstance(ctx.exception.__cause__, RecursionError)

    def test_parser_is_usable_after_too_deep_input(self) -> None:
        parser = Parser(GroupGrammar, GroupFactory())
        with self.assertRaises(NestingTooDeep):
            parser.parse("(" * 5000 + "a" + ")" * 5000)
        self.assertEqual(parser.parse("(a)"), ["a"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
