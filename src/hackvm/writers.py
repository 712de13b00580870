from __future__ import annotations
from typing import Iterable

def to_text(lines: Iterable[str]) -> str:
    return "".join(line + "\n" for line in lines)

def write_asm(lines: Iterable[str], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
