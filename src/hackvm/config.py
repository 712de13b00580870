"""Translator configuration."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class TranslatorConfig:
    """Parámetros de una sesión de traducción.

    bootstrap=None deja que el driver decida (se genera si hay un Sys.vm).
    """

    bootstrap: Optional[bool] = None
    stack_base: int = 256
    this_base: int = 3000
    that_base: int = 4000
    emit_comments: bool = True
