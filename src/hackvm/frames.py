'''
flujo de control y protocolo de marcos de llamada (call / function / return / bootstrap)
'''

from __future__ import annotations
from typing import List, Sequence, Tuple

from .stack import pop_d, push_d

# Orden en que call guarda los registros de enlace; return los restaura al revés.
FRAME_REGISTERS: Tuple[str, ...] = ("LCL", "ARG", "THIS", "THAT")

# Dirección de retorno + registros de enlace
FRAME_SIZE = len(FRAME_REGISTERS) + 1

# Líneas '@X' que el bootstrap emite antes de inicializar los punteros
PLACEHOLDER_REGISTERS: Tuple[str, ...] = (
    "SP", "LCL", "ARG", "THIS", "THAT",
    "R5", "R6", "R7", "R8", "R9", "R10",
    "R11", "R12", "R13", "R14", "R15",
)

# ---------- Flujo de control ----------

def label(name: str) -> List[str]:
    return [f"({name})"]

def goto(name: str) -> List[str]:
    return [f"@{name}", "0;JMP"]

def if_goto(name: str) -> List[str]:
    """Saca el tope; salta si es distinto de cero."""
    return pop_d() + [f"@{name}", "D;JNE"]

# ---------- Marcos ----------

def return_symbol(callee: str, ordinal: int) -> str:
    return f"{callee}$ret.{ordinal}"

def save_frame() -> List[str]:
    out: List[str] = []
    for reg in FRAME_REGISTERS:
        out += [f"@{reg}", "D=M", "@SP", "A=M", "M=D", "@SP", "MD=M+1"]
    return out

def call(callee: str, n_args: int, ret_symbol: str) -> List[str]:
    """Empuja retorno y marco, recoloca ARG = SP - n - 5 y salta al llamado."""
    out = [f"@{ret_symbol}", "D=A"] + push_d()
    out += save_frame()
    out += [
        f"@{FRAME_SIZE + n_args}",
        "D=A",
        "@SP",
        "D=M-D",
        "@ARG",
        "M=D",
    ]
    out += goto(callee)
    out += label(ret_symbol)
    return out

def function(name: str, n_locals: int) -> List[str]:
    out = label(name) + ["@SP", "D=M", "@LCL", "M=D"]
    for i in range(n_locals):
        out += [f"@{i}", "D=A", "@LCL", "A=M+D", "M=0"]
    out += [f"@{n_locals}", "D=A", "@LCL", "D=M+D", "@SP", "M=D"]
    return out

def restore_frame() -> List[str]:
    """Secuencia de return.

    R13 = dirección de retorno (LCL - 5), R15 = ARG del llamado (nuevo tope),
    R14 = cursor que recorre el marco hacia atrás restaurando THAT..LCL.
    """
    out = [
        f"@{FRAME_SIZE}",
        "D=A",
        "@LCL",
        "AD=M-D",
        "D=M",
        "@R13",
        "M=D",
        "@ARG",
        "D=M",
        "@R15",
        "M=D",
        "@SP",
        "A=M-1",
        "D=M",
        "@ARG",
        "A=M",
        "M=D",
        "@LCL",
        "D=M",
        "@R14",
        "M=D",
    ]
    for reg in reversed(FRAME_REGISTERS):
        out += ["@R14", "AM=M-1", "D=M", f"@{reg}", "M=D"]
    out += [
        "@R15",
        "D=M",
        "@SP",
        "M=D+1",
        "@R13",
        "A=M",
        "0;JMP",
    ]
    return out

# ---------- Arranque y cierre ----------

def init_pointers(bases: Sequence[Tuple[str, int]]) -> List[str]:
    out = [f"@{reg}" for reg in PLACEHOLDER_REGISTERS]
    for reg, value in bases:
        out += [f"@{value}", "D=A", f"@{reg}", "M=D"]
    return out

def halt_loop() -> List[str]:
    return ["@END", "0;JMP", "(END)", "@END", "0;JMP"]
