'''
primitivas de pila: pop a D y push de D
'''

from __future__ import annotations
from typing import List

from .ast import SourceCommand
from .memmap import SP

def pop_d() -> List[str]:
    """SP--, D = *SP."""
    return [f"@{SP}", "AM=M-1", "D=M"]

def push_d() -> List[str]:
    """*SP = D, SP++."""
    return [f"@{SP}", "A=M", "M=D", f"@{SP}", "M=M+1"]

def comment(sc: SourceCommand) -> str:
    return f"// {sc.unit}[{sc.line}]: {sc.source}"
