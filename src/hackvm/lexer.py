from __future__ import annotations
from typing import List

def strip_comment(line: str) -> str:
    """Remove a '//' comment and surrounding whitespace."""
    return line.split("//", 1)[0].strip()

def split_words(line: str) -> List[str]:
    """Split a command into whitespace-separated words."""
    return line.split()

def clean_command(line: str) -> str:
    """Canonical command text: no comment, single spaces."""
    return " ".join(split_words(strip_comment(line)))
