'''
tabla formal de instrucciones C de Hack (comp, dest, jump)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict

# Función de la ALU: (A, D, M) -> resultado (sin recortar a 16 bits)
AluFn = Callable[[int, int, int], int]

COMP: Dict[str, AluFn] = {
    "0":   lambda a, d, m: 0,
    "1":   lambda a, d, m: 1,
    "-1":  lambda a, d, m: -1,
    "D":   lambda a, d, m: d,
    "A":   lambda a, d, m: a,
    "M":   lambda a, d, m: m,
    "!D":  lambda a, d, m: ~d,
    "!A":  lambda a, d, m: ~a,
    "!M":  lambda a, d, m: ~m,
    "-D":  lambda a, d, m: -d,
    "-A":  lambda a, d, m: -a,
    "-M":  lambda a, d, m: -m,
    "D+1": lambda a, d, m: d + 1,
    "A+1": lambda a, d, m: a + 1,
    "M+1": lambda a, d, m: m + 1,
    "D-1": lambda a, d, m: d - 1,
    "A-1": lambda a, d, m: a - 1,
    "M-1": lambda a, d, m: m - 1,
    "D+A": lambda a, d, m: d + a,
    "D+M": lambda a, d, m: d + m,
    "D-A": lambda a, d, m: d - a,
    "D-M": lambda a, d, m: d - m,
    "A-D": lambda a, d, m: a - d,
    "M-D": lambda a, d, m: m - d,
    "D&A": lambda a, d, m: d & a,
    "D&M": lambda a, d, m: d & m,
    "D|A": lambda a, d, m: d | a,
    "D|M": lambda a, d, m: d | m,
}

# Condición de salto sobre el resultado con signo
JUMP: Dict[str, Callable[[int], bool]] = {
    "":    lambda v: False,
    "JGT": lambda v: v > 0,
    "JEQ": lambda v: v == 0,
    "JGE": lambda v: v >= 0,
    "JLT": lambda v: v < 0,
    "JNE": lambda v: v != 0,
    "JLE": lambda v: v <= 0,
    "JMP": lambda v: True,
}

DEST_REGS = frozenset("ADM")

@dataclass(frozen=True)
class CInstr:
    """Instrucción C decodificada: dest=comp;jump."""
    dest: str
    comp: str
    jump: str

@dataclass(frozen=True)
class AInstr:
    """Instrucción A ya resuelta: @value."""
    value: int

def parse_c(text: str) -> CInstr:
    """Decodifica 'dest=comp;jump' o lanza ValueError."""
    s = text.replace(" ", "")
    dest, comp, jump = "", s, ""
    if "=" in comp:
        dest, comp = comp.split("=", 1)
    if ";" in comp:
        comp, jump = comp.split(";", 1)
    if comp not in COMP:
        raise ValueError(f"comp inválido: '{comp}' en '{text}'")
    if jump not in JUMP:
        raise ValueError(f"jump inválido: '{jump}' en '{text}'")
    if not set(dest) <= DEST_REGS or len(set(dest)) != len(dest):
        raise ValueError(f"dest inválido: '{dest}' en '{text}'")
    return CInstr(dest=dest, comp=comp, jump=jump)
