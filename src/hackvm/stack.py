'''
primitivas de pila y bajada de operaciones aritméticas, unarias y de comparación
'''

from __future__ import annotations
from typing import Dict, List, Tuple

from .ast import ArithOp, CompareOp, Segment, UnaryOp
from .segments import read_segment, select_segment

# ---------- Primitivas ----------

def pop_d() -> List[str]:
    """SP--, D = RAM[SP]"""
    return ["@SP", "AM=M-1", "D=M"]

def push_d() -> List[str]:
    """RAM[SP] = D, SP++"""
    return ["@SP", "A=M", "M=D", "@SP", "M=M+1"]

def push_segment(segment: Segment, index: int, static_prefix: str) -> List[str]:
    return read_segment(segment, index, static_prefix) + push_d()

def pop_segment(segment: Segment, index: int, static_prefix: str) -> List[str]:
    """Saca el tope a R14, calcula la dirección destino en R13 y copia."""
    out = pop_d() + ["@R14", "M=D"]
    out += select_segment(segment, index, static_prefix)
    out += [
        "D=A",
        "@R13",
        "M=D",
        "@R14",
        "D=M",
        "@R13",
        "A=M",
        "M=D",
    ]
    return out

# ---------- Aritmética ----------

def _pop_operands() -> List[str]:
    # derecho -> R15, izquierdo -> D
    return pop_d() + ["@R15", "M=D"] + pop_d() + ["@R15"]

def binary(op: ArithOp) -> List[str]:
    """D = izquierdo <op> derecho; efecto neto en SP: -1."""
    return _pop_operands() + [f"D=D{op.value}M"] + push_d()

def unary(op: UnaryOp) -> List[str]:
    """Opera en sitio sobre el tope; efecto neto en SP: 0."""
    return ["@SP", "AM=M-1", f"M={op.value}M", "@SP", "M=M+1"]

# (salto si verdadero, salto si falso) sobre D = izquierdo - derecho
COMPARISON_JUMPS: Dict[CompareOp, Tuple[str, str]] = {
    CompareOp.EQ: ("D;JEQ", "D;JNE"),
    CompareOp.GT: ("D;JGT", "D;JLE"),
    CompareOp.LT: ("D;JLT", "D;JGE"),
}

def comparison_labels(index: int) -> Tuple[str, str, str]:
    return f"PUSH_TRUE_{index}", f"PUSH_FALSE_{index}", f"JUMP_BACK_{index}"

def comparison(op: CompareOp, index: int) -> List[str]:
    """Empuja -1 (verdadero) o 0 (falso); 'index' hace únicas las etiquetas."""
    positive, negative = COMPARISON_JUMPS[op]
    true_lbl, false_lbl, back_lbl = comparison_labels(index)
    return _pop_operands() + [
        "D=D-M",
        f"@{true_lbl}",
        positive,
        f"@{false_lbl}",
        negative,
        f"({true_lbl})",
        "@SP",
        "A=M",
        "M=-1",
        "@SP",
        "M=M+1",
        f"@{back_lbl}",
        "0;JMP",
        f"({false_lbl})",
        "@SP",
        "A=M",
        "M=0",
        "@SP",
        "M=M+1",
        f"({back_lbl})",
    ]
