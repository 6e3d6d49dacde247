from __future__ import annotations
import unittest

from tracepeg import BootstrapFailed, GrammarBase, GrammarError, Parser, RuleKey, SyntaxToken
from tracepeg.grammar import (
    FactoryRecorder, GrammarRecorder, SyntheticRuleKey, UserRuleKey,
    OPTIONAL, TOKEN, PATTERN, ZERO_OR_MORE, public_methods,
)
from tracepeg.peg import Choice, Ref, Repeat, Seq


class NoActions:
    pass


class PairFactory:
    def pair(self, left, right):
        return ("pair", left, right)

    def number(self, token):
        return int(token.text)


class PairGrammar(GrammarBase):
    def pair(self):
        return self.b.nonterminal().is_(self.f.pair(self.number(), self.number()))

    def number(self):
        return self.b.nonterminal().is_(self.f.number(self.b.pattern("[0-9]+")))


def _record(grammar_class, factory):
    recorder = GrammarRecorder()
    stand_in = FactoryRecorder(recorder).create(factory)
    return recorder, recorder.record(grammar_class, stand_in)


class PublicMethodsTests(unittest.TestCase):
    def test_definition_order_with_overrides(self) -> None:
        class Base(GrammarBase):
            def a(self):
                pass

            def b_rule(self):
                pass

            def _helper(self):
                pass

        class Derived(Base):
            def c(self):
                pass

            def a(self):
                pass

        names = [name for name, _ in public_methods(Derived)]
        self.assertEqual(names, ["a", "b_rule", "c"])
        self.assertIs(dict(public_methods(Derived))["a"], Derived.__dict__["a"])


class BootstrapTests(unittest.TestCase):
    def test_every_method_has_exactly_one_rule_with_a_body(self) -> None:
        recorder, model = _record(PairGrammar, PairFactory())
        for _, fn in public_methods(PairGrammar):
            key = model.rule_key_for_method(fn)
            self.assertIsInstance(key, UserRuleKey)
            self.assertIsNone(model.action_rules.get(fn))
            self.assertTrue(recorder.registry.has_rule(key))
        for _, fn in public_methods(PairFactory, stop=None):
            key = model.action_rules.get(fn)
            self.assertIsNotNone(key)
            self.assertTrue(recorder.registry.has_rule(key))

    def test_recorder_state_is_clean_after_bootstrap(self) -> None:
        recorder, _ = _record(PairGrammar, PairFactory())
        self.assertEqual(recorder.stack_size, 0)
        self.assertIsNone(recorder.building_method)
        self.assertIsNone(recorder.building_rule_key)

    def test_nested_call_is_recorded_as_reference(self) -> None:
        recorder, model = _record(PairGrammar, PairFactory())
        action = model.action_rules.get(PairFactory.pair)
        body = recorder.registry.grammar.rules[action].expr
        self.assertIsInstance(body, Seq)
        self.assertEqual([it.method for it in body.items], [PairGrammar.number, PairGrammar.number])

    def test_user_rule_body_invokes_its_action(self) -> None:
        recorder, model = _record(PairGrammar, PairFactory())
        body = recorder.registry.grammar.rules[model.rule_key_for_method(PairGrammar.pair)].expr
        self.assertIsInstance(body, Ref)
        self.assertIs(body.key, model.action_rules.get(PairFactory.pair))

    def test_parse_dispatches_to_factory(self) -> None:
        parser = Parser(PairGrammar, PairFactory())
        self.assertEqual(parser.parse("12 34"), ("pair", 12, 34))
        self.assertEqual(parser.parse("  7\n8\n"), ("pair", 7, 8))

    def test_caller_supplied_rule_key(self) -> None:
        start = RuleKey("start")

        class Grammar(GrammarBase):
            def start_rule(self):
                return self.b.nonterminal(start).is_(self.b.token("go"))

        parser = Parser(Grammar, NoActions(), root_rule=start)
        self.assertIs(parser.model.rule_key_for_method(Grammar.start_rule), start)
        tok = parser.parse(" go ")
        self.assertIsInstance(tok, SyntaxToken)
        self.assertEqual((tok.text, tok.start, tok.end), ("go", 1, 3))

    def test_root_rule_by_method_name(self) -> None:
        parser = Parser(PairGrammar, PairFactory(), root_rule="number")
        self.assertEqual(parser.parse("5"), 5)

    def test_private_helpers_are_inlined(self) -> None:
        class Grammar(GrammarBase):
            def greeting(self):
                return self.b.nonterminal().is_(self._hello_or_hi())

            def _hello_or_hi(self):
                return self.b.first_of(self.b.token("hello"), self.b.token("hi"))

        parser = Parser(Grammar, NoActions())
        self.assertEqual(len(parser.model.user_rules), 1)
        self.assertEqual(parser.parse("hi").text, "hi")

    def test_equal_tokens_at_two_sites_are_distinct_rules(self) -> None:
        class Grammar(GrammarBase):
            def xs(self):
                return self.b.nonterminal().is_(self.b.first_of(self.b.token("x"), self.b.token("x")))

        _, model = _record(Grammar, NoActions())
        keys = [k for k, kind in model.synthetic_kinds.items() if kind == TOKEN]
        self.assertEqual(len(keys), 2)
        self.assertIsNot(keys[0], keys[1])
        self.assertNotEqual(keys[0], keys[1])

    def test_synthetic_rules_are_tagged(self) -> None:
        class Grammar(GrammarBase):
            def line(self):
                return self.b.nonterminal().is_(
                    self.b.zero_or_more(self.b.optional(self.b.pattern("[a-z]+"))))

        recorder, model = _record(Grammar, NoActions())
        kinds = sorted(model.synthetic_kinds.values())
        self.assertEqual(kinds, sorted([ZERO_OR_MORE, OPTIONAL, PATTERN]))
        for key, kind in model.synthetic_kinds.items():
            self.assertIsInstance(key, SyntheticRuleKey)
            self.assertEqual(key.operator, kind)
            body = recorder.registry.grammar.rules[key].expr
            if kind == PATTERN:
                self.assertIsInstance(body, Seq)
                self.assertEqual(len(body.items), 3)
            else:
                self.assertIsInstance(body, Repeat)

    def test_first_of_keeps_source_order(self) -> None:
        class Grammar(GrammarBase):
            def keyword(self):
                return self.b.nonterminal().is_(
                    self.b.first_of(self.b.token("a"), self.b.token("b"), self.b.token("c")))

        recorder, model = _record(Grammar, NoActions())
        body = recorder.registry.grammar.rules[model.rule_key_for_method(Grammar.keyword)].expr
        self.assertIsInstance(body, Choice)
        texts = [recorder.registry.grammar.rules[alt.key].expr.items[1].text for alt in body.alts]
        self.assertEqual(texts, ["a", "b", "c"])


class BootstrapErrorTests(unittest.TestCase):
    def test_two_expressions_at_is(self) -> None:
        class Grammar(GrammarBase):
            def bad(self):
                self.b.token("a")
                return self.b.nonterminal().is_(self.b.token("b"))

        with self.assertRaises(BootstrapFailed) as ctx:
            Parser(Grammar, NoActions())
        self.assertEqual(ctx.exception.method, "bad")
        self.assertIsInstance(ctx.exception.cause, GrammarError)
        self.assertIn("stack size: 2", str(ctx.exception))

    def test_body_without_is(self) -> None:
        class Grammar(GrammarBase):
            def lazy(self):
                self.b.nonterminal()

        with self.assertRaises(BootstrapFailed) as ctx:
            Parser(Grammar, NoActions())
        self.assertEqual(ctx.exception.method, "lazy")

    def test_nonterminal_twice(self) -> None:
        class Grammar(GrammarBase):
            def twice(self):
                self.b.nonterminal()
                return self.b.nonterminal().is_(self.b.token("a"))

        with self.assertRaises(BootstrapFailed) as ctx:
            Parser(Grammar, NoActions())
        self.assertIsInstance(ctx.exception.cause, GrammarError)

    def test_user_exception_is_wrapped(self) -> None:
        class Grammar(GrammarBase):
            def broken(self):
                raise ValueError("boom")

        with self.assertRaises(BootstrapFailed) as ctx:
            Parser(Grammar, NoActions())
        self.assertIsInstance(ctx.exception.__cause__, ValueError)
        self.assertIn("broken", str(ctx.exception))

    def test_first_of_with_missing_operands(self) -> None:
        class Grammar(GrammarBase):
            def short(self):
                return self.b.nonterminal().is_(self.b.first_of(self.b.token("a"), "b"))

        with self.assertRaises(BootstrapFailed) as ctx:
            Parser(Grammar, NoActions())
        self.assertIsInstance(ctx.exception.cause, GrammarError)

    def test_malformed_pattern_names_the_rule(self) -> None:
        class Grammar(GrammarBase):
            def word(self):
                return self.b.nonterminal().is_(self.b.pattern("[a-z"))

        with self.assertRaises(BootstrapFailed) as ctx:
            Parser(Grammar, NoActions())
        self.assertEqual(ctx.exception.method, "word")
        self.assertIsInstance(ctx.exception.cause, GrammarError)
        self.assertIn("invalid pattern", str(ctx.exception))

    def test_nonterminal_outside_rule(self) -> None:
        with self.assertRaises(GrammarError):
            GrammarRecorder().nonterminal()

    def test_unknown_root(self) -> None:
        with self.assertRaises(GrammarError):
            Parser(PairGrammar, PairFactory(), root_rule="missing")

    def test_grammar_without_rules(self) -> None:
        class Empty(GrammarBase):
            pass

        with self.assertRaises(GrammarError):
            Parser(Empty, NoActions())


if __name__ == "__main__":
    unittest.main(verbosity=2)
