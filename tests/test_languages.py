"""Tests for the Rust line patterns and the type resolver."""

import re

import pytest

from implmunch_mcp.parser import RUST_SPEC, base_type_name, block_search_pattern, declaration_window, resolve_type


@pytest.mark.parametrize("line", [
    "impl Point {",
    "    impl Point {",
    "impl<T> Point<T> {",
    "impl fmt::Display for Point {",
    "impl<T: Into<f64>> From<T> for Point {",
    "unsafe impl Send for Point {}",
    "impl geo::Point {",
    "impl<T> Point<T>",
])
def test_block_pattern_matches_impl_headers(line):
    """The block search pattern matches inherent and trait impl headers."""
    assert re.search(block_search_pattern("Point"), line)


@pytest.mark.parametrize("line", [
    "impl PointList {",
    "impl Point for Other {",
    "// impl Point {",
    "/// impl Point {",
    "let impl_point = 1;",
    "struct Point {",
])
def test_block_pattern_rejects_other_lines(line):
    """Other types, comments and non-impl lines do not match."""
    assert not re.search(block_search_pattern("Point"), line)


def test_block_pattern_uses_bare_name():
    """Generic arguments and paths are dropped before the pattern is built."""
    pattern = block_search_pattern("geo::Point<T>")
    assert "geo::Point<T>" not in pattern
    assert re.search(pattern, "impl<T> Point<T> {")


def test_base_type_name():
    """Type expressions reduce to their bare identifier."""
    assert base_type_name("Point") == "Point"
    assert base_type_name("Bar<Baz>") == "Bar"
    assert base_type_name("crate::geo::Point<T>") == "Point"
    assert base_type_name("&mut Point") == "Point"


@pytest.mark.parametrize("line", [
    "fn add(self) {",
    "pub fn add(self) {",
    "pub(crate) fn add(self) {",
    "pub const fn add(self) {",
    "pub async fn add(self) {",
    "pub unsafe fn add(self) {",
    "pub const unsafe fn add(self) {",
    "    pub extern \"C\" fn add(self) {",
])
def test_method_line_strips_qualifiers(line):
    """Visibility and qualifier keywords are consumed before the name."""
    match = RUST_SPEC.method_line.match(line)
    assert match is not None
    assert match.group("rest").startswith("add(")


def test_method_line_ignores_comments():
    """A doc line mentioning fn is not a method."""
    assert RUST_SPEC.method_line.match("/// Calls fn foo internally") is None


def test_resolve_type_alias():
    """A type alias resolves one hop to the aliased concrete type."""
    binding = resolve_type(["pub type Foo = Bar<Baz>;"], "Foo")
    assert binding.name == "Bar"
    assert binding.declared_name == "Foo"
    assert binding.kind == "alias"


def test_resolve_type_alias_with_path():
    """Path-qualified alias targets resolve to their last segment."""
    binding = resolve_type(["pub type Result<T> = std::result::Result<T, Error>;"], "Result")
    assert binding.name == "Result"
    assert binding.kind == "alias"


def test_resolve_type_declaration():
    """A struct declaration resolves to its own name, skipping attributes."""
    window = ["#[derive(Debug)]", "pub struct Point {", "    x: i32,"]
    binding = resolve_type(window, "Point")
    assert binding.name == "Point"
    assert binding.kind == "declaration"


@pytest.mark.parametrize("line,name", [
    ("pub(crate) enum Shape {", "Shape"),
    ("union Bits {", "Bits"),
    ("pub trait Draw {", "Draw"),
    ("pub unsafe trait Zeroable {", "Zeroable"),
])
def test_resolve_type_other_kinds(line, name):
    """Enums, unions and traits are direct declarations too."""
    assert resolve_type([line], name).name == name


def test_resolve_type_skips_comments():
    """Comment lines mentioning struct do not decide the binding."""
    window = ["/// A struct that holds things.", "pub struct Holder {"]
    assert resolve_type(window, "Holder").name == "Holder"


def test_resolve_type_falls_back_to_symbol():
    """Without a matching declaration the symbol text is used."""
    binding = resolve_type(["fn main() {", "}"], "Widget")
    assert binding.name == "Widget"
    assert binding.kind == "fallback"


def test_declaration_window():
    """The window starts at the 1-indexed definition line and is bounded."""
    source = "\n".join(f"line{i}" for i in range(1, 31))
    window = declaration_window(source, 5, size=10)
    assert window[0] == "line5"
    assert len(window) == 10
