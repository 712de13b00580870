'''
resolución de direcciones por segmento (LCL/ARG/THIS/THAT, temp, pointer, static, constant)
'''

from __future__ import annotations
from typing import Dict, List

from .ast import Segment

# Registros base de los segmentos indirectos
BASE_REGISTERS: Dict[Segment, str] = {
    Segment.LOCAL: "LCL",
    Segment.ARGUMENT: "ARG",
    Segment.THIS: "THIS",
    Segment.THAT: "THAT",
}

# Segmentos cuya dirección se conoce sin leer un puntero en RAM
DIRECT_SEGMENTS = frozenset({Segment.TEMP, Segment.POINTER, Segment.STATIC})

# temp ocupa RAM[5..12]
TEMP_BASE = 5

_BY_NAME: Dict[str, Segment] = {s.value: s for s in Segment}

def parse_segment(name: str) -> Segment:
    """Devuelve el Segment para la palabra clave VM o lanza ValueError."""
    key = name.strip().lower()
    if key not in _BY_NAME:
        raise ValueError(f"Segmento inválido: {name}")
    return _BY_NAME[key]

def segment_symbol(segment: Segment, index: int, static_prefix: str) -> str:
    """Primera instrucción A para direccionar segment[index]."""
    if segment in BASE_REGISTERS:
        return f"@{BASE_REGISTERS[segment]}"
    if segment is Segment.POINTER:
        # pointer 1 -> THAT; cualquier otro índice cae en THIS
        return "@THAT" if index == 1 else "@THIS"
    if segment is Segment.TEMP:
        return f"@{TEMP_BASE + index}"
    if segment is Segment.STATIC:
        return f"@{static_prefix}.{index}"
    return f"@{index}"  # constant

def select_segment(segment: Segment, index: int, static_prefix: str) -> List[str]:
    """Deja A apuntando a la celda; para constant deja el literal en D (y en A)."""
    out = [segment_symbol(segment, index, static_prefix)]
    if segment in DIRECT_SEGMENTS:
        return out
    if segment is Segment.CONSTANT:
        out.append("AD=A")
        return out
    out.extend(["D=M", f"@{index}", "A=D+A"])
    return out

def read_segment(segment: Segment, index: int, static_prefix: str) -> List[str]:
    """Como select_segment, pero termina con el valor de la celda en D."""
    out = select_segment(segment, index, static_prefix)
    if segment is not Segment.CONSTANT:
        out.append("D=M")
    return out
