"""Command-line interface tests."""

import pytest

from dpp.cli import build_parser, main

GOOD = "let g: int = 1;\nfn f(x: int) -> int { x + g; }\n"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    # relative paths keep diagnostic lines short enough not to wrap
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DPP_MINIMAL_UI", "1")
    (tmp_path / "good.dpp").write_text(GOOD, encoding="utf-8")
    (tmp_path / "bad.dpp").write_text("fn main() -> int { print(z); }\n", encoding="utf-8")
    return tmp_path


def test_parser_defaults():
    args = build_parser().parse_args(["prog.dpp"])
    assert args.emit == "asm"
    assert args.opt_level == 0
    assert args.output is None


def test_writes_assembly(workdir, capsys):
    assert main(["good.dpp", "-o", "out/good.asm"]) == 0
    text = (workdir / "out" / "good.asm").read_text(encoding="utf-8")
    assert text.startswith("    push 1\n    pop rax\n    mov [g], rax\nf:\n")
    assert text.endswith("    ret\n")
    assert "[OK] asm written to:" in capsys.readouterr().out


def test_writes_ir(workdir):
    assert main(["good.dpp", "--emit", "ir", "-o", "good.ir"]) == 0
    lines = (workdir / "good.ir").read_text(encoding="utf-8").splitlines()
    assert lines == [
        "push 1", "store g", "function f:", "param x", "load x", "load g", "+ +", "end_function",
    ]


def test_writes_symbols(workdir):
    assert main(["good.dpp", "--emit", "symbols", "-o", "good.sym"]) == 0
    assert (workdir / "good.sym").read_text(encoding="utf-8") == "f: fn(int) -> int\ng: int\n"


def test_writes_tokens(workdir):
    assert main(["good.dpp", "--emit", "tokens", "-o", "good.tok"]) == 0
    lines = (workdir / "good.tok").read_text(encoding="utf-8").splitlines()
    assert lines[0] == "1:1 Keyword(let)"
    assert lines[-1].endswith("Separator(EOF)")


def test_opt_level_folds(workdir):
    (workdir / "fold.dpp").write_text("let k: int = 6 * 7;", encoding="utf-8")
    assert main(["fold.dpp", "-O", "1", "--emit", "ir", "-o", "fold.ir"]) == 0
    assert (workdir / "fold.ir").read_text(encoding="utf-8") == "push 42\nstore k\n"


@pytest.mark.parametrize("emit", ["asm", "ir", "ast", "tokens", "symbols"])
def test_renders_to_terminal(workdir, capsys, emit):
    assert main(["good.dpp", "--emit", emit]) == 0
    assert capsys.readouterr().out.strip()


def test_missing_input(workdir, capsys):
    assert main(["nope.dpp"]) == 2
    assert "File not found" in capsys.readouterr().err


def test_unreadable_keyword_file(workdir, capsys):
    assert main(["good.dpp", "--keywords", "missing.txt"]) == 2
    assert "Cannot read keyword file" in capsys.readouterr().err


def test_keyword_file_is_used(workdir):
    (workdir / "kw.txt").write_text("fn\nlet\ng\n", encoding="utf-8")
    assert main(["good.dpp", "--keywords", "kw.txt", "-o", "out.asm"]) == 1


def test_compile_error_reports_diagnostic(workdir, capsys):
    assert main(["bad.dpp", "-o", "bad.asm"]) == 1
    err = capsys.readouterr().err
    assert "bad.dpp:1:26: error: Undefined variable: z" in err
    assert "note: raised during the semantic stage" in err
    assert not (workdir / "bad.asm").exists()


def test_warnings_printed_and_promoted(workdir, capsys):
    (workdir / "dup.dpp").write_text("let x: int;\nlet x: bool;\n", encoding="utf-8")
    assert main(["dup.dpp", "-o", "dup.asm"]) == 0
    assert "[WARN] dup.dpp:2:5: 'x' redeclared" in capsys.readouterr().err
    assert main(["dup.dpp", "--warnings-as-errors", "-o", "dup.asm"]) == 1


def test_writes_ast_outline(workdir):
    assert main(["good.dpp", "--emit", "ast", "-o", "good.ast"]) == 0
    lines = (workdir / "good.ast").read_text(encoding="utf-8").splitlines()
    assert lines == [
        "ProgramNode",
        "  VarDeclarationNode name='g'",
        "    TypeNode name='int'",
        "    LiteralNode value='1'",
        "  FunctionDeclarationNode name='f'",
        "    VarDeclarationNode name='x'",
        "      TypeNode name='int'",
        "    TypeNode name='int'",
        "    BlockNode",
        "      ExpressionStatementNode",
        "        BinaryOpNode operator='+'",
        "          IdentifierNode name='x'",
        "          IdentifierNode name='g'",
    ]


@pytest.mark.parametrize("emit", ["asm", "ast"])
def test_long_expression(workdir, emit):
    (workdir / "long.dpp").write_text("let k: int = " + " + ".join(["1"] * 1500) + ";",
                                      encoding="utf-8")
    assert main(["long.dpp", "--emit", emit, "-o", "long.out"]) == 0
    assert (workdir / "long.out").read_text(encoding="utf-8").strip()


def test_deeply_nested_input_is_a_diagnostic(workdir, capsys):
    (workdir / "deep.dpp").write_text("let k: int = " + "(" * 2000 + "1" + ")" * 2000 + ";",
                                      encoding="utf-8")
    assert main(["deep.dpp"]) == 1
    assert "Expression nested too deeply" in capsys.readouterr().err


def test_input_not_utf8(workdir, capsys):
    (workdir / "latin.dpp").write_bytes(b"let x: int; // caf\xe9\n")
    assert main(["latin.dpp"]) == 2
    assert "Cannot read latin.dpp" in capsys.readouterr().err


def test_input_is_directory(workdir, capsys):
    (workdir / "srcdir").mkdir()
    assert main(["srcdir"]) == 2
    assert "Cannot read srcdir" in capsys.readouterr().err
