from __future__ import annotations
import argparse, sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from .config import TranslatorConfig
from .diagnostics import Diagnostic, has_errors, note
from .parser import parse
from .translator import VMTranslator
from .writers import write_asm

ENTRY_FILE = "Sys.vm"

@dataclass(frozen=True)
class TranslationResult:
    lines: List[str]
    diagnostics: List[Diagnostic]
    bootstrapped: bool

def translate_text(text: str, *, filename: str | None = None,
                   translator: VMTranslator | None = None) -> Tuple[List[str], List[Diagnostic]]:
    """Parsea y traduce una unidad. El prefijo de estáticos es el nombre del archivo sin extensión.
    Devuelve (lineas, diagnostics) de esta unidad; no llama a finish()."""
    tr = translator or VMTranslator()
    # sin nombre, los diagnósticos no deben heredar el archivo anterior
    tr.filename = filename
    if filename is not None:
        tr.static_prefix = Path(filename).stem
    nodes, diags = parse(text, filename=filename)
    already = len(tr.diagnostics)
    lines: List[str] = []
    for ins in nodes:
        lines.extend(tr.translate(ins))
    return lines, list(diags) + tr.diagnostics[already:]

def collect_sources(path: Path) -> List[Path]:
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.suffix == ".vm" and p.is_file())
    return [path]

def default_output(path: Path) -> Path:
    if path.is_dir():
        return path / f"{path.resolve().name}.asm"
    return path.with_suffix(".asm")

def translate_sources(paths: Sequence[Path], config: TranslatorConfig | None = None) -> TranslationResult:
    """Una sesión completa: bootstrap opcional, cada archivo en orden y cierre."""
    cfg = config or TranslatorConfig()
    tr = VMTranslator(config=cfg)
    boot = cfg.bootstrap
    if boot is None:
        boot = any(p.name == ENTRY_FILE for p in paths)

    lines: List[str] = tr.bootstrap(call_init=True) if boot else []
    diags: List[Diagnostic] = []
    if cfg.bootstrap is None and not boot:
        diags.append(note(f"sin {ENTRY_FILE}; no se genera arranque",
                          hint="use --bootstrap para llamar a Sys.init"))
    for p in paths:
        text = p.read_text(encoding="utf-8")
        out, d = translate_text(text, filename=str(p), translator=tr)
        lines.extend(out)
        diags.extend(d)
    lines = tr.finish(lines)
    return TranslationResult(lines=lines, diagnostics=diags, bootstrapped=boot)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="hackvm", description="Hack VM to assembly translator")
    ap.add_argument("source", help="archivo .vm o directorio con archivos .vm")
    ap.add_argument("-o", "--output", help="archivo .asm de salida (por defecto junto a la entrada)")
    boot = ap.add_mutually_exclusive_group()
    boot.add_argument("--bootstrap", dest="bootstrap", action="store_const", const=True,
                      help="emitir arranque y llamar a Sys.init")
    boot.add_argument("--no-bootstrap", dest="bootstrap", action="store_const", const=False,
                      help="no emitir arranque")
    ap.add_argument("--stack-base", type=int, default=256, help="dirección inicial de SP/LCL/ARG")
    ap.add_argument("--no-comments", action="store_true", help="no anotar el comando VM original")
    args = ap.parse_args(argv)

    src = Path(args.source)
    if not src.exists():
        print(f"ERROR: no existe {src}", file=sys.stderr)
        return 2
    paths = collect_sources(src)
    if not paths:
        print(f"ERROR: no hay archivos .vm en {src}", file=sys.stderr)
        return 2

    cfg = TranslatorConfig(
        bootstrap=args.bootstrap,
        stack_base=args.stack_base,
        emit_comments=not args.no_comments,
    )
    try:
        result = translate_sources(paths, cfg)
    except (OSError, UnicodeDecodeError) as ex:
        print(f"ERROR: no pude leer la entrada: {ex}", file=sys.stderr)
        return 2

    for d in result.diagnostics:
        print(d, file=sys.stderr)
    if has_errors(result.diagnostics):
        return 1

    out_path = Path(args.output) if args.output else default_output(src)
    try:
        write_asm(result.lines, str(out_path))
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(paths)} archivo(s) → {out_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
