'''
resolución de segmentos: push/pop según la clase de almacenamiento
'''

from __future__ import annotations
from typing import List

from .ast import Segment, SourceCommand, DYNAMIC_SEGMENTS
from .memmap import SEGMENT_BASE, SP, POINTER_BASE, POINTER_SIZE, TEMP_BASE, TEMP_SIZE
from .stack import pop_d, push_d
from .diagnostics import SegmentError

def static_symbol(unit: str, index: int) -> str:
    """Variable simbólica del segmento static: '<unidad>.<índice>'."""
    return f"{unit}.{index}"

def _fixed_address(segment: Segment, index: int) -> int:
    if segment is Segment.POINTER:
        base, size = POINTER_BASE, POINTER_SIZE
    else:
        base, size = TEMP_BASE, TEMP_SIZE
    if index >= size:
        raise SegmentError(
            f"Índice {index} fuera del segmento {segment.value} (0..{size - 1})")
    return base + index

# ---------------- push ----------------

def push_constant(value: int) -> List[str]:
    return [f"@{value}", "D=A", *push_d()]

def push_from_variable(variable: str) -> List[str]:
    return [f"@{variable}", "D=M", *push_d()]

def push_from_segment(base: str, index: int) -> List[str]:
    return [f"@{index}", "D=A", f"@{base}", "A=D+M", "D=M", *push_d()]

def generate_push(sc: SourceCommand, segment: Segment, index: int) -> List[str]:
    if segment in DYNAMIC_SEGMENTS:
        return push_from_segment(SEGMENT_BASE[segment], index)
    if segment is Segment.CONSTANT:
        return push_constant(index)
    if segment in (Segment.POINTER, Segment.TEMP):
        return push_from_variable(str(_fixed_address(segment, index)))
    if segment is Segment.STATIC:
        return push_from_variable(static_symbol(sc.unit, index))
    raise SegmentError(f"No se puede direccionar el segmento para push: {segment.value}")

# ---------------- pop ----------------

def pop_to_variable(variable: str) -> List[str]:
    return [*pop_d(), f"@{variable}", "M=D"]

def pop_to_segment(base: str, index: int) -> List[str]:
    # D = dirección + valor; A = D - valor = dirección; M = D - dirección = valor
    return [
        f"@{base}", "D=M",
        f"@{index}", "D=D+A",
        f"@{SP}", "AM=M-1",
        "D=D+M",
        "A=D-M",
        "M=D-A",
    ]

def generate_pop(sc: SourceCommand, segment: Segment, index: int) -> List[str]:
    if segment in DYNAMIC_SEGMENTS:
        return pop_to_segment(SEGMENT_BASE[segment], index)
    if segment in (Segment.POINTER, Segment.TEMP):
        return pop_to_variable(str(_fixed_address(segment, index)))
    if segment is Segment.STATIC:
        return pop_to_variable(static_symbol(sc.unit, index))
    raise SegmentError(f"No se puede direccionar el segmento para pop: {segment.value}")
