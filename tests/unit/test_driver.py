from pathlib import Path
from src.hackvm.ast import Segment, StackDirection, StackOp
from src.hackvm.config import TranslatorConfig
from src.hackvm.driver import (
    collect_sources, default_output, main, translate_sources, translate_text,
)
from src.hackvm.translator import VMTranslator
from hackcpu import HackCPU

SYS = """
function Sys.init 0
    push constant 4
    call Main.double 1
    pop static 0
label HALT
    goto HALT
"""

MAIN = """
function Main.double 0
    push argument 0
    push argument 0
    add
    pop static 0       // Main.0
    push static 0
    return
"""

def test_translate_text_uses_file_stem_as_static_prefix():
    lines, diags = translate_text("push static 3\n", filename="dir/Foo.vm")
    assert not diags
    assert lines[0] == "@Foo.3 // push static 3"

def test_translate_text_collects_parse_and_translate_diagnostics():
    tr = VMTranslator()
    lines, diags = translate_text("push pointer 0\nbogus\nadd\n", filename="X.vm", translator=tr)
    assert len(diags) == 1 and diags[0].line == 2
    assert lines[0].endswith("// push pointer 0")

def test_directory_session_bootstraps_and_runs(tmp_path):
    (tmp_path / "Sys.vm").write_text(SYS, encoding="utf-8")
    (tmp_path / "Main.vm").write_text(MAIN, encoding="utf-8")
    paths = collect_sources(tmp_path)
    assert [p.name for p in paths] == ["Main.vm", "Sys.vm"]

    result = translate_sources(paths)
    assert result.bootstrapped
    assert not result.diagnostics
    assert result.lines[-2:] == ["AM=M+1", "M=D"]

    cpu = HackCPU(result.lines)
    cpu.run(until_label="HALT")
    assert cpu.peek(cpu.symbols["Main.0"]) == 8
    assert cpu.peek(cpu.symbols["Sys.0"]) == 8
    assert cpu.peek(0) == 261

def test_single_file_without_sys_has_no_bootstrap(tmp_path):
    src = tmp_path / "Simple.vm"
    src.write_text("push constant 1\npush constant 2\nadd\n", encoding="utf-8")
    result = translate_sources([src], TranslatorConfig(emit_comments=False))
    assert not result.bootstrapped
    assert result.lines[:2] == ["@1", "AD=A"]
    assert [d.severity for d in result.diagnostics] == ["nota"]
    assert "--bootstrap" in result.diagnostics[0].hint

def test_default_output(tmp_path):
    assert default_output(tmp_path / "A.vm") == tmp_path / "A.asm"
    assert default_output(tmp_path) == tmp_path / f"{tmp_path.name}.asm"

def test_cli_writes_asm(tmp_path, capsys):
    src = tmp_path / "Prog.vm"
    src.write_text("push constant 5\nneg\n", encoding="utf-8")
    assert main([str(src), "--no-comments"]) == 0
    text = (tmp_path / "Prog.asm").read_text(encoding="utf-8")
    assert text.splitlines()[:2] == ["@5", "AD=A"]
    assert "OK:" in capsys.readouterr().out

def test_cli_reports_errors(tmp_path, capsys):
    src = tmp_path / "Bad.vm"
    src.write_text("pop constant 1\n", encoding="utf-8")
    out = tmp_path / "out.asm"
    assert main([str(src), "-o", str(out)]) == 1
    assert not out.exists()
    assert "Bad.vm:1: ERROR" in capsys.readouterr().err

def test_cli_missing_input(tmp_path):
    assert main([str(tmp_path / "nope.vm")]) == 2

def test_cli_bootstrap_flag(tmp_path):
    src = tmp_path / "One.vm"
    src.write_text("function Sys.init 0\nlabel L\ngoto L\n", encoding="utf-8")
    out = tmp_path / "one.asm"
    assert main([str(src), "-o", str(out), "--bootstrap", "--stack-base", "300"]) == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[16:18] == ["@300", "D=A"]
    assert "(Sys.init$ret.1)" in lines

def test_writers(tmp_path):
    from src.hackvm.writers import to_text, write_asm
    assert to_text(["@1", "D=A"]) == "@1\nD=A\n"
    p = tmp_path / "x.asm"
    write_asm(["(END)"], str(p))
    assert p.read_text(encoding="utf-8") == "(END)\n"

def test_cli_rejects_non_utf8_input(tmp_path, capsys):
    src = tmp_path / "Raw.vm"
    src.write_bytes(b"push constant 1\n\xff\n")
    out = tmp_path / "raw.asm"
    assert main([str(src), "-o", str(out)]) == 2
    assert not out.exists()
    assert "no pude leer" in capsys.readouterr().err

def test_translate_sources_keeps_caller_order(tmp_path):
    (tmp_path / "B.vm").write_text("push constant 2\n", encoding="utf-8")
    (tmp_path / "A.vm").write_text("push constant 1\n", encoding="utf-8")
    result = translate_sources([tmp_path / "B.vm", tmp_path / "A.vm"])
    assert result.lines.index("@2 // push constant 2") < result.lines.index("@1 // push constant 1")

def test_translate_text_without_filename_clears_previous_file():
    tr = VMTranslator()
    translate_text("push constant 1\n", filename="First.vm", translator=tr)
    translate_text("push constant 2\n", translator=tr)
    assert tr.filename is None
    tr.translate(StackOp(StackDirection.PUSH, Segment.POINTER, 5))
    assert tr.diagnostics[-1].file is None
    assert tr.static_prefix == "First"
