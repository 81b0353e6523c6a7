# mypy: allow-untyped-defs

import io
import json
import os
import sys

import pytest  # type: ignore
import yaml

from gtp.__main__ import main
from gtp.build import build_grammar_from_file


@pytest.fixture
def arith(data_dir):
    return os.path.join(data_dir, "arith.gram")


def test_json_output(capsys, arith):
    main([arith, "1 + 2", "--ignore-all", "--bubble"])
    assert json.loads(capsys.readouterr().out) == {
        "type": "SUM",
        "children": [
            {"type": "num", "raw": "1"},
            {"type": "plus", "raw": "+"},
            {"type": "num", "raw": "2"},
        ],
    }


def test_json_output_without_bubble(capsys, arith):
    main([arith, "7"])
    assert json.loads(capsys.readouterr().out) == {
        "type": "START",
        "children": [
            {
                "type": "SUM",
                "children": [
                    {
                        "type": "PRODUCT",
                        "children": [{"type": "NUMBER", "children": [{"type": "num", "raw": "7"}]}],
                    }
                ],
            }
        ],
    }


def test_pprint_output(capsys, arith):
    main([arith, "1", "--bubble", "-o", "pprint"])
    assert capsys.readouterr().out == "{'raw': '1', 'type': 'num'}\n"


def test_yaml_output(capsys, arith):
    main([arith, "1", "--bubble", "-o", "yaml"])
    assert capsys.readouterr().out == "type: num\nraw: '1'\n"


def test_yml_output(capsys, arith):
    main([arith, "1+2", "--bubble", "-o", "yml"])
    assert yaml.safe_load(capsys.readouterr().out) == {
        "type": "SUM",
        "children": [
            {"type": "num", "raw": "1"},
            {"type": "plus", "raw": "+"},
            {"type": "num", "raw": "2"},
        ],
    }


def test_tree_output(capsys, arith):
    main([arith, "-1", "--bubble", "-o", "tree"])
    assert capsys.readouterr().out == "└──NUMBER\n   ├──minus '-'\n   └──num '1'\n"


def test_no_input_prints_grammar(capsys, arith):
    main([arith])
    assert capsys.readouterr().out == str(build_grammar_from_file(arith)) + "\n"


def test_quiet(capsys, arith):
    main([arith, "1", "-q"])
    assert capsys.readouterr().out == ""


def test_input_file(capsys, arith, tmp_path):
    source = tmp_path / "sum.txt"
    source.write_text("1+\n2\n")
    main([arith, "-i", str(source), "--ignore-newline", "--bubble"])
    assert json.loads(capsys.readouterr().out)["type"] == "SUM"


def test_stdin(capsys, arith, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("3*4"))
    main([arith, "--stdin", "--bubble"])
    assert json.loads(capsys.readouterr().out)["type"] == "PRODUCT"


def test_input_given_twice(capsys, arith):
    with pytest.raises(SystemExit) as excinfo:
        main([arith, "1", "--stdin"])
    assert excinfo.value.code == 2


def test_parse_error(capsys, arith):
    with pytest.raises(SystemExit) as excinfo:
        main([arith, "1+"])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert 'File "<input>", line 1' in err
    assert "NoAlternativeMatches: unexpected end of input, expected PRODUCT" in err


def test_unrecognized_input(capsys, arith):
    with pytest.raises(SystemExit) as excinfo:
        main([arith, "1 + 2"])
    assert excinfo.value.code == 1
    assert "UnrecognizedInput: unrecognized input ' + 2'" in capsys.readouterr().err


def test_bad_grammar_syntax(capsys, tmp_path):
    grammar = tmp_path / "bad.gram"
    grammar.write_text("START -> (a\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(grammar), "a"])
    assert excinfo.value.code == 1
    assert "bad.gram" in capsys.readouterr().err


def test_bad_grammar(capsys, tmp_path):
    grammar = tmp_path / "bad.gram"
    grammar.write_text("START -> (a B)\n>a -> 'a'\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(grammar), "a"])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err == f"ERROR: {grammar}: Rule START refers to undefined rule B\n"


def test_verbose(capsys, arith):
    main([arith, "1+2", "-q", "-v"])
    out = capsys.readouterr().out
    assert "Total time:" in out
    assert "  token array :          3" in out
    assert "parse_rule" not in out


def test_verbose_parser(capsys, arith):
    main([arith, "1", "-q", "-vv"])
    out = capsys.readouterr().out
    assert out.startswith("parse_rule('START') .... (looking at 1.0: num:'1')\n")


def test_verbose_tokenizer(capsys, arith):
    main([arith, "1", "-q", "-vvv"])
    out = capsys.readouterr().out
    assert "* (Bof)" in out
    assert "parse_rule" not in out
