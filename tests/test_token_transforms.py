"""
test_token_transforms.py
Unit tests for the token transform pipeline and its transforms.
"""
import unittest
from rust_lexer import lex
from token_model import Delimiter, Group, Ident, Punct, render
from token_transform_pipeline import run_token_transform_pipeline
from token_transforms.append_type_alias_terminator_transform import AppendTypeAliasTerminatorTransform, is_type_alias
from token_transforms.collapse_transparent_groups_transform import CollapseTransparentGroupsTransform
from token_transforms.hoist_inner_attributes_transform import HoistInnerAttributesTransform
from tests.test_utils import normalize

class DummyTransform:
    def __init__(self, tag):
        self.tag = tag
    def transform(self, tokens):
        return tokens + [Ident(self.tag)]

class TestTokenTransformPipeline(unittest.TestCase):
    def test_pipeline_applies_all_transforms_in_order(self):
        result = run_token_transform_pipeline([Ident("x")], [DummyTransform("a"), DummyTransform("b")])
        self.assertEqual([str(tt) for tt in result], ["x", "a", "b"])

    def test_empty_pipeline_returns_input(self):
        tokens = [Ident("x")]
        self.assertIs(run_token_transform_pipeline(tokens, []), tokens)

class TestAppendTypeAliasTerminator(unittest.TestCase):
    def test_appends_missing_semicolon(self):
        result = AppendTypeAliasTerminatorTransform().transform(lex("pub type A = struct { x: u8 }"))
        self.assertEqual(result[-1], Punct(';'))

    def test_keeps_existing_semicolon(self):
        tokens = lex("type A = u8;")
        self.assertEqual(len(AppendTypeAliasTerminatorTransform().transform(tokens)), len(tokens))

    def test_struct_with_type_field_is_not_an_alias(self):
        tokens = lex("struct A { b: type = u8 }")
        self.assertFalse(is_type_alias(tokens))
        self.assertIs(AppendTypeAliasTerminatorTransform().transform(tokens), tokens)

    def test_attributes_before_keyword(self):
        self.assertTrue(is_type_alias(lex("#[doc = \"x\"] type A = u8")))

class TestHoistInnerAttributes(unittest.TestCase):
    def test_inner_attributes_move_in_front(self):
        tokens = lex("struct A { #![derive(Debug)] #![repr(C)] a: i32 }")
        result = HoistInnerAttributesTransform().transform(tokens)
        self.assertEqual(render(result), normalize("#[derive(Debug)] #[repr(C)] struct A { a: i32 }"))

    def test_attributes_after_first_field_stay(self):
        tokens = lex("struct A { a: i32, #![x] }")
        self.assertEqual(render(HoistInnerAttributesTransform().transform(tokens)), render(tokens))

    def test_other_groups_are_untouched(self):
        tokens = lex("struct A(#![x] u8);")
        self.assertEqual(render(HoistInnerAttributesTransform().transform(tokens)), render(tokens))

class TestCollapseTransparentGroups(unittest.TestCase):
    def test_nested_transparent_groups_are_spliced(self):
        tokens = [Group(Delimiter.NONE, [Ident("a"), Group(Delimiter.BRACE, [Group(Delimiter.NONE, [Ident("b")])])])]
        result = CollapseTransparentGroupsTransform().transform(tokens)
        self.assertEqual(result, [Ident("a"), Group(Delimiter.BRACE, [Ident("b")])])

    def test_empty_transparent_group_disappears(self):
        result = CollapseTransparentGroupsTransform().transform([Ident("a"), Group(Delimiter.NONE, [])])
        self.assertEqual(result, [Ident("a")])

if __name__ == "__main__":
    unittest.main()
