"""
Command line tests for tinysexp
"""

import pytest
from main import DEMO_SOURCE, create_arg_parser, main


class TestCommandLine:
  def test_demo_run(self, capsys):
    main([])
    out = capsys.readouterr().out
    assert out.startswith(f"Source:\n{DEMO_SOURCE}\n")
    assert "READ: ((+ 2 (+ 30 10)))" in out
    assert out.rstrip().endswith("EVAL: 42")

  def test_tokens_listing(self, capsys):
    main(["--tokens", "(+ 1)"])
    out = capsys.readouterr().out
    assert "Tokens:\nToken(start bracket)\nToken(name, +)\nToken(whitespace)\nToken(number, 1)\nToken(end bracket)\n" in out

  def test_tree_listing(self, capsys):
    main(["--tree", "(a)"])
    assert "List[1]\n  List[1]\n    Name(a)\n" in capsys.readouterr().out

  def test_unknown_name_sentinel(self, capsys):
    main(["(foo 1 2)"])
    out = capsys.readouterr().out
    assert "=ERR= Unknown name 'foo'" in out
    assert "EVAL: ERR" in out

  def test_unbalanced_input_completes(self, capsys):
    main(["(+ 1 2"])
    out = capsys.readouterr().out
    assert "=ERR= Unbalanced brackets" in out
    assert "EVAL: 3" in out

  def test_strict_mode_exits_with_error(self, capsys):
    with pytest.raises(SystemExit) as info:
      main(["--strict", "(+ 1 2))"])
    assert info.value.code == 1
    assert "Error: =ERR= Unbalanced brackets" in capsys.readouterr().out

  def test_version(self, capsys):
    with pytest.raises(SystemExit):
      create_arg_parser().parse_args(["--version"])
    assert "tinysexp" in capsys.readouterr().out
