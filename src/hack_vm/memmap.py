'''
mapa de memoria fijo de la máquina Hack (registros puntero, bases, arranque)
'''

from __future__ import annotations
from typing import Dict

from .ast import Segment

# Registros puntero (símbolos predefinidos del ensamblador Hack)
SP = "SP"
LCL = "LCL"
ARG = "ARG"
THIS = "THIS"
THAT = "THAT"

# Segmento -> registro que guarda su dirección base
SEGMENT_BASE: Dict[Segment, str] = {
    Segment.LOCAL: LCL,
    Segment.ARGUMENT: ARG,
    Segment.THIS: THIS,
    Segment.THAT: THAT,
}

# Ventanas de dirección fija (relativas al origen de RAM)
POINTER_BASE = 3    # pointer 0 -> THIS, pointer 1 -> THAT
POINTER_SIZE = 2
TEMP_BASE = 5       # RAM[5..12]
TEMP_SIZE = 8

# Registros de uso general para el protocolo de retorno
FRAME = "R13"
RET_ADDR = "R14"

# Palabras que guarda una llamada: retorno + LCL, ARG, THIS, THAT
FRAME_SIZE = 5

# Valores de arranque
STACK_BASE = 256
BOOT_LCL = -1
BOOT_ARG = -2
BOOT_THIS = -3
BOOT_THAT = -4

# Mayor literal cargable con una instrucción A (15 bits)
MAX_CONSTANT = 0x7FFF

# Símbolos predefinidos del ensamblador
PREDEFINED: Dict[str, int] = {
    SP: 0, LCL: 1, ARG: 2, THIS: 3, THAT: 4,
    "SCREEN": 0x4000, "KBD": 0x6000,
    **{f"R{i}": i for i in range(16)},
}

# Primera dirección para variables simbólicas (static)
VARIABLE_BASE = 16
