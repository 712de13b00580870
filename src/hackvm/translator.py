"""Generación de código Hack a partir de instrucciones VM.

Un VMTranslator representa una sesión: guarda el contador de etiquetas de
comparación, el índice de retorno por función llamada, las rutinas
compartidas ya emitidas y el prefijo de los estáticos. Nunca se reinicia
a mitad de sesión.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .ast import (
    Arithmetic,
    ArithOp,
    Call,
    Compare,
    CompareOp,
    Function,
    Goto,
    IfGoto,
    Instruction,
    LabelDef,
    Return,
    Segment,
    StackDirection,
    StackOp,
    Unary,
    UnaryOp,
)
from .config import TranslatorConfig
from .diagnostics import Diagnostic, error, warning
from . import frames, stack

STACK_PUSH_LABEL = "STACK_PUSH"
WRITE_TRUE_LABEL = "WRITE_TRUE"
ENTRY_FUNCTION = "Sys.init"

_OPERATOR_TYPES = {Arithmetic: ArithOp, Compare: CompareOp, Unary: UnaryOp}

def _is_count(value) -> bool:
    # bool es subclase de int; no cuenta como índice
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0

def _is_name(value) -> bool:
    return isinstance(value, str) and bool(value)


@dataclass
class SharedRoutine:
    """Bloque de código que se emite una sola vez.

    La primera llamada a emit() devuelve el cuerpo en ese punto exacto de la
    salida; las siguientes devuelven solo un salto a la etiqueta.
    """

    label: str
    body: List[str]
    emitted: bool = False

    def emit(self) -> List[str]:
        if self.emitted:
            return [f"@{self.label}", "0;JMP"]
        self.emitted = True
        return [f"({self.label})"] + list(self.body)


class VMTranslator:
    """Traduce instrucciones VM, una a una y en orden, a líneas Hack."""

    def __init__(self, static_prefix: str = "", config: Optional[TranslatorConfig] = None):
        self.config = config or TranslatorConfig()
        self.comparison_index = 0
        self.return_index: Dict[str, int] = {}
        self.diagnostics: List[Diagnostic] = []
        self._static_prefix = static_prefix
        # archivo en curso, solo para ubicar los diagnósticos
        self.filename: Optional[str] = None
        self._stack_push = SharedRoutine(STACK_PUSH_LABEL, stack.push_d())
        self._dispatch: Dict[type, Callable[..., List[str]]] = {
            Arithmetic: self._translate_arithmetic,
            Compare: self._translate_compare,
            Unary: self._translate_unary,
            StackOp: self._translate_stack_op,
            Goto: self._translate_goto,
            IfGoto: self._translate_if_goto,
            LabelDef: self._translate_label,
            Function: self._translate_function,
            Call: self._translate_call,
            Return: self._translate_return,
        }

    # ---------- Configuración de sesión ----------

    @property
    def static_prefix(self) -> str:
        return self._static_prefix

    @static_prefix.setter
    def static_prefix(self, prefix: str) -> None:
        self._static_prefix = prefix

    def set_static_prefix(self, prefix: str) -> None:
        self.static_prefix = prefix

    # ---------- Rutinas compartidas ----------

    def write_to_stack(self) -> List[str]:
        """Escribe D en la pila (STACK_PUSH)."""
        return self._stack_push.emit()

    # ---------- Arranque y cierre ----------

    def bootstrap(self, call_init: bool = False, stack_base: Optional[int] = None) -> List[str]:
        base = self.config.stack_base if stack_base is None else stack_base
        out = frames.init_pointers([
            ("SP", base),
            ("LCL", base),
            ("ARG", base),
            ("THIS", self.config.this_base),
            ("THAT", self.config.that_base),
        ])
        if call_init:
            out += self._emit_call(ENTRY_FUNCTION, 0)
        return out

    def finish(self, remaining: Optional[List[str]] = None) -> List[str]:
        """Bucle final de parada y rutinas compartidas pendientes."""
        out = list(remaining or [])
        out += frames.halt_loop()
        out += [f"({WRITE_TRUE_LABEL})", "D=1"]
        out += self.write_to_stack()
        return out

    # ---------- Despacho ----------

    def translate(self, ins: Instruction) -> List[str]:
        handler = self._dispatch.get(type(ins))
        if handler is None:
            self._report(ins, f"Descriptor de instrucción inválido: {type(ins).__name__}")
            return []
        problem = self._validate(ins)
        if problem is not None:
            self._report(ins, problem)
            return []
        out = handler(ins)
        source = getattr(ins, "source", None)
        if out and source and self.config.emit_comments:
            out[0] = f"{out[0]} // {source}"
        return out

    def _report(self, ins, message: str, *, severity: str = "error", hint: Optional[str] = None) -> None:
        make = error if severity == "error" else warning
        self.diagnostics.append(make(
            message,
            hint=hint,
            line=getattr(ins, "line", None),
            file=self.filename,
            source=getattr(ins, "source", None),
        ))

    def _validate(self, ins: Instruction) -> Optional[str]:
        """Mensaje de error si el descriptor no se puede traducir, si no None.

        Cubre campos ausentes (None) o de tipo incorrecto, además de valores
        fuera de dominio; el manejador solo se llama con campos válidos.
        """
        if isinstance(ins, (Arithmetic, Compare, Unary)):
            expected = _OPERATOR_TYPES[type(ins)]
            if not isinstance(ins.op, expected):
                return f"Operador inválido: {ins.op!r}"
        elif isinstance(ins, StackOp):
            if not isinstance(ins.direction, StackDirection):
                return f"Dirección de pila inválida: {ins.direction!r}"
            if not isinstance(ins.segment, Segment):
                return f"Segmento inválido: {ins.segment!r}"
            if not _is_count(ins.index):
                return f"Índice inválido en segmento {ins.segment.value}: {ins.index!r}"
            if ins.segment is Segment.POINTER and ins.index not in (0, 1):
                self._report(
                    ins,
                    f"pointer {ins.index} no es 0 ni 1; se usa THIS",
                    severity="advertencia",
                    hint="pointer 0 es THIS y pointer 1 es THAT",
                )
        elif isinstance(ins, (Goto, IfGoto)):
            if not _is_name(ins.label):
                return f"Etiqueta de salto inválida: {ins.label!r}"
        elif isinstance(ins, LabelDef):
            if not _is_name(ins.name):
                return f"Nombre de etiqueta inválido: {ins.name!r}"
        elif isinstance(ins, Function):
            if not _is_name(ins.name):
                return f"Nombre de función inválido: {ins.name!r}"
            if not _is_count(ins.n_locals):
                return f"Número de locales inválido: {ins.n_locals!r}"
        elif isinstance(ins, Call):
            if not _is_name(ins.name):
                return f"Nombre de función llamada inválido: {ins.name!r}"
            if not _is_count(ins.n_args):
                return f"Número de argumentos inválido: {ins.n_args!r}"
        return None

    # ---------- Manejadores ----------

    def _translate_arithmetic(self, ins: Arithmetic) -> List[str]:
        return stack.binary(ins.op)

    def _translate_compare(self, ins: Compare) -> List[str]:
        out = stack.comparison(ins.op, self.comparison_index)
        self.comparison_index += 1
        return out

    def _translate_unary(self, ins: Unary) -> List[str]:
        return stack.unary(ins.op)

    def _translate_stack_op(self, ins: StackOp) -> List[str]:
        if ins.direction is StackDirection.PUSH:
            return stack.push_segment(ins.segment, ins.index, self._static_prefix)
        return stack.pop_segment(ins.segment, ins.index, self._static_prefix)

    def _translate_goto(self, ins: Goto) -> List[str]:
        return frames.goto(ins.label)

    def _translate_if_goto(self, ins: IfGoto) -> List[str]:
        return frames.if_goto(ins.label)

    def _translate_label(self, ins: LabelDef) -> List[str]:
        return frames.label(ins.name)

    def _translate_function(self, ins: Function) -> List[str]:
        return frames.function(ins.name, ins.n_locals)

    def _translate_call(self, ins: Call) -> List[str]:
        return self._emit_call(ins.name, ins.n_args)

    def _translate_return(self, ins: Return) -> List[str]:
        return frames.restore_frame()

    def _emit_call(self, callee: str, n_args: int) -> List[str]:
        ordinal = self.return_index.get(callee, 0) + 1
        self.return_index[callee] = ordinal
        return frames.call(callee, n_args, frames.return_symbol(callee, ordinal))
