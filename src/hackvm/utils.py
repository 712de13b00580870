'''
rangos de constantes y nombres de símbolos Hack
'''

from __future__ import annotations
import re

# Mayor constante que cabe en una instrucción A (15 bits)
MAX_CONSTANT = (1 << 15) - 1

# Símbolos Hack: letras, dígitos, '_', '.', '$', ':' sin empezar por dígito
SYMBOL_RE = re.compile(r"^[A-Za-z_.$:][A-Za-z0-9_.$:]*$")

def is_unsigned_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [0, 2^n) (sin signo de n bits)."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    return 0 <= x < (1 << n)

def is_symbol(name: str) -> bool:
    """Indica si 'name' es utilizable como etiqueta o nombre de función."""
    return bool(SYMBOL_RE.match(name))
