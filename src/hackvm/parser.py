# src/hackvm/parser.py
from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from .lexer import clean_command, split_words
from .ast import (
    Arithmetic, ArithOp, Call, Compare, CompareOp, Function, Goto, IfGoto,
    Instruction, LabelDef, Return, Segment, StackDirection, StackOp, Unary, UnaryOp,
)
from .segments import parse_segment
from .utils import MAX_CONSTANT, is_symbol, is_unsigned_nbit
from .diagnostics import error, Diagnostic

ARITHMETIC: Dict[str, ArithOp] = {
    "add": ArithOp.ADD,
    "sub": ArithOp.SUB,
    "and": ArithOp.AND,
    "or": ArithOp.OR,
}

COMPARISONS: Dict[str, CompareOp] = {
    "eq": CompareOp.EQ,
    "gt": CompareOp.GT,
    "lt": CompareOp.LT,
}

UNARY: Dict[str, UnaryOp] = {
    "neg": UnaryOp.NEG,
    "not": UnaryOp.NOT,
}

# comando -> número de operandos
ARITY: Dict[str, int] = {
    **{k: 0 for k in (*ARITHMETIC, *COMPARISONS, *UNARY)},
    "push": 2, "pop": 2,
    "label": 1, "goto": 1, "if-goto": 1,
    "function": 2, "call": 2,
    "return": 0,
}

# índices válidos de los segmentos de tamaño fijo
FIXED_SEGMENT_SIZE: Dict[Segment, int] = {
    Segment.POINTER: 2,
    Segment.TEMP: 8,
}

class VMSyntaxError(ValueError):
    pass

def _parse_count(token: str, what: str) -> int:
    # isdigit() acepta dígitos Unicode como "²" que int() rechaza
    if not (token.isascii() and token.isdigit()):
        raise VMSyntaxError(f"{what} inválido: '{token}' (se esperaba entero no negativo)")
    return int(token)

def _parse_symbol(token: str, what: str) -> str:
    if not is_symbol(token):
        raise VMSyntaxError(f"{what} inválido: '{token}'")
    return token

def _parse_stack_op(cmd: str, seg_tok: str, idx_tok: str, src: str, line: int) -> StackOp:
    try:
        segment = parse_segment(seg_tok)
    except ValueError as ex:
        raise VMSyntaxError(str(ex)) from ex
    index = _parse_count(idx_tok, "Índice")
    direction = StackDirection(cmd)
    if direction is StackDirection.POP and segment is Segment.CONSTANT:
        raise VMSyntaxError("No se puede hacer pop sobre constant")
    if segment is Segment.CONSTANT and not is_unsigned_nbit(index, 15):
        raise VMSyntaxError(f"Constante fuera de rango (máx {MAX_CONSTANT}): {index}")
    size = FIXED_SEGMENT_SIZE.get(segment)
    if size is not None and index >= size:
        raise VMSyntaxError(f"Índice fuera de rango para {segment.value}: {index} (0..{size - 1})")
    return StackOp(direction, segment, index, source=src, line=line)

def parse_line(core: str, lineno: int) -> Instruction:
    """Convierte un comando VM ya limpio en su descriptor o lanza VMSyntaxError."""
    words = split_words(core)
    cmd = words[0].lower()
    args = words[1:]
    if cmd not in ARITY:
        raise VMSyntaxError(f"Comando desconocido: '{words[0]}'")
    if len(args) != ARITY[cmd]:
        raise VMSyntaxError(f"'{cmd}' requiere {ARITY[cmd]} operando(s), recibió {len(args)}")

    if cmd in ARITHMETIC:
        return Arithmetic(ARITHMETIC[cmd], source=core, line=lineno)
    if cmd in COMPARISONS:
        return Compare(COMPARISONS[cmd], source=core, line=lineno)
    if cmd in UNARY:
        return Unary(UNARY[cmd], source=core, line=lineno)
    if cmd in ("push", "pop"):
        return _parse_stack_op(cmd, args[0], args[1], core, lineno)
    if cmd == "label":
        return LabelDef(_parse_symbol(args[0], "Etiqueta"), source=core, line=lineno)
    if cmd == "goto":
        return Goto(_parse_symbol(args[0], "Etiqueta"), source=core, line=lineno)
    if cmd == "if-goto":
        return IfGoto(_parse_symbol(args[0], "Etiqueta"), source=core, line=lineno)
    if cmd == "function":
        name = _parse_symbol(args[0], "Nombre de función")
        return Function(name, _parse_count(args[1], "Número de locales"), source=core, line=lineno)
    if cmd == "call":
        name = _parse_symbol(args[0], "Nombre de función")
        return Call(name, _parse_count(args[1], "Número de argumentos"), source=core, line=lineno)
    return Return(source=core, line=lineno)

def parse(text: str, *, filename: Optional[str] = None) -> Tuple[List[Instruction], List[Diagnostic]]:
    """
    Devuelve (instructions, diagnostics).

    Reglas:
      - Comentarios: '//' hasta fin de línea; líneas vacías se ignoran.
      - Un comando por línea; 'source' guarda el comando normalizado.
      - Una línea con error no produce descriptor; se sigue con la siguiente.
    """
    nodes: List[Instruction] = []
    diags: List[Diagnostic] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        core = clean_command(raw)
        if not core:
            continue
        try:
            nodes.append(parse_line(core, lineno))
        except VMSyntaxError as ex:
            diags.append(error(str(ex), line=lineno, file=filename, source=core))

    return nodes, diags
