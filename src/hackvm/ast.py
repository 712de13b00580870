'''
dataclases de instrucciones VM (unión etiquetada) y enumeraciones
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

# ---- Enumeraciones ----

class Segment(Enum):
    """Segmentos lógicos de memoria de la máquina de pila."""
    LOCAL = "local"
    ARGUMENT = "argument"
    THIS = "this"
    THAT = "that"
    CONSTANT = "constant"
    STATIC = "static"
    POINTER = "pointer"
    TEMP = "temp"

class StackDirection(Enum):
    PUSH = "push"
    POP = "pop"

class ArithOp(Enum):
    """Operadores binarios; el valor es el símbolo de la ALU."""
    ADD = "+"
    SUB = "-"
    AND = "&"
    OR = "|"

class UnaryOp(Enum):
    NEG = "-"
    NOT = "!"

class CompareOp(Enum):
    EQ = "eq"
    GT = "gt"
    LT = "lt"

# ---- Variantes de instrucción ----
# Cada variante lleva solo su propia carga útil, más 'source' (comando
# original, para el comentario de salida) y 'line' (para diagnósticos).

@dataclass(frozen=True)
class Arithmetic:
    """add / sub / and / or"""
    op: ArithOp
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class Compare:
    """eq / gt / lt"""
    op: CompareOp
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class Unary:
    """neg / not"""
    op: UnaryOp
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class StackOp:
    """push/pop <segmento> <índice>"""
    direction: StackDirection
    segment: Segment
    index: int
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class Goto:
    label: str
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class IfGoto:
    label: str
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class LabelDef:
    name: str
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class Function:
    """Definición de función: nombre y número de variables locales."""
    name: str
    n_locals: int
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class Call:
    """Firma de llamada: nombre del llamado y número de argumentos."""
    name: str
    n_args: int
    source: Optional[str] = None
    line: Optional[int] = None

@dataclass(frozen=True)
class Return:
    source: Optional[str] = None
    line: Optional[int] = None

Instruction = Union[
    Arithmetic, Compare, Unary, StackOp,
    Goto, IfGoto, LabelDef, Function, Call, Return,
]
