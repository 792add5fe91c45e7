"""
Tree builder tests for tinysexp
"""

import pytest
from parsing import SexpParser, SexpTreeBuilder, SexpTokenizer, Token, TokenKind
from error_handling import DiagnosticLog, ErrorKind, SexpParseError
from values import SInt, SList, SName, print_form


class TestTreeShape:
  """Nesting of the source becomes nesting of lists"""

  def test_demo_expression(self, parser):
    root = parser.parse_string("(+ 2 (+ 30 10))").root
    assert root == SList([
        SList([SName("+"), SInt(2), SList([SName("+"), SInt(30), SInt(10)])])
    ])

  def test_siblings_keep_source_order(self, parser):
    root = parser.parse_string("a 1 (b) 2").root
    assert root == SList([SName("a"), SInt(1), SList([SName("b")]), SInt(2)])

  def test_whitespace_is_insignificant(self, parser):
    compact = parser.parse_string("(+ 1(+ 2 3))").root
    spaced = parser.parse_string("  (+\n1\t( +  2 3 )  )\n").root
    assert compact == spaced

  def test_empty_source_gives_empty_root(self, parser):
    result = parser.parse_string("")
    assert result.root == SList()
    assert result.ok

  def test_large_integer(self, parser):
    root = parser.parse_string("123456789012345678901234567890").root
    assert root.items == [SInt(123456789012345678901234567890)]

  def test_deep_nesting_is_built_iteratively(self, parser):
    depth = 5000
    root = parser.parse_string("(" * depth + "7" + ")" * depth).root
    node = root
    for _ in range(depth + 1):
      assert len(node.items) == 1
      node = node.items[0]
    assert node == SInt(7)


class TestRoundTrip:
  """Print-form of the parsed forms reads back to the same tree"""

  @pytest.mark.parametrize("source", [
      "(+ 2 (+ 30 10))",
      "  ( a   (b  (c 1)) 22 )  x ",
      "(() (()) 0)",
      "foo12 (+)",
  ])
  def test_reparse(self, parser, source):
    root = parser.parse_string(source).root
    printed = " ".join(print_form(child) for child in root.items)
    assert parser.parse_string(printed).root == root


class TestBracketBalance:
  """Unbalanced input is reported but still produces a tree"""

  def test_missing_close(self, parser):
    result = parser.parse_string("(+ 1 2")
    assert not result.ok
    assert [d['kind'] for d in result.diagnostics] == [ErrorKind.UNCLOSED_LIST]
    assert result.diagnostics[0]['span'].start_col == 1
    assert result.root == SList([SList([SName("+"), SInt(1), SInt(2)])])

  def test_each_unclosed_list_is_reported(self, parser):
    result = parser.parse_string("((a (b")
    assert [d['kind'] for d in result.diagnostics] == [ErrorKind.UNCLOSED_LIST] * 3

  def test_extra_close(self, parser):
    result = parser.parse_string("(+ 1 2))")
    assert [d['kind'] for d in result.diagnostics] == [ErrorKind.UNEXPECTED_CLOSE]
    assert result.diagnostics[0]['span'].start_col == 8
    assert result.root == SList([SList([SName("+"), SInt(1), SInt(2)])])

  def test_extra_close_keeps_root_open(self, parser):
    result = parser.parse_string(") a (b)")
    assert result.root == SList([SName("a"), SList([SName("b")])])
    assert len(result.diagnostics) == 1

  def test_diagnostic_has_source_context(self, parser):
    result = parser.parse_string("(+ 1 2))")
    assert "^" in result.diagnostics[0]['context']

  def test_strict_mode_raises_on_extra_close(self):
    parser = SexpParser(strict=True)
    with pytest.raises(SexpParseError) as info:
      parser.parse_string("(a))")
    assert info.value.kind is ErrorKind.UNEXPECTED_CLOSE

  def test_strict_mode_raises_on_missing_close(self):
    parser = SexpParser(strict=True)
    with pytest.raises(SexpParseError) as info:
      parser.parse_string("(a")
    assert info.value.kind is ErrorKind.UNCLOSED_LIST

  def test_echo_prints_diagnostics(self, capsys):
    SexpParser(echo=True).parse_string("(+ 1 2")
    assert "=ERR= Unbalanced brackets" in capsys.readouterr().out


class TestIntegerConversion:
  """Number tokens that are not integers become 0"""

  def test_bad_integer_becomes_zero(self):
    log = DiagnosticLog()
    builder = SexpTreeBuilder(log)
    root = builder.build([Token(TokenKind.NUMBER, "x1")])
    assert root == SList([SInt(0)])
    assert log.kinds() == [ErrorKind.BAD_INTEGER]

  def test_bad_integer_strict(self):
    builder = SexpTreeBuilder(strict=True)
    with pytest.raises(SexpParseError):
      builder.build([Token(TokenKind.NUMBER, "")])

  def test_builder_accepts_tokenizer_output(self):
    tokens = SexpTokenizer().tokenize("(x 5)")
    root = SexpTreeBuilder().build(tokens)
    assert root == SList([SList([SName("x"), SInt(5)])])
