'''
dataclases de comandos VM (Segment, Push/Pop, aritmética, flujo, llamadas)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union

# ---- Segmentos de memoria ----

class Segment(Enum):
    """Segmento lógico de la máquina de pila."""
    ARGUMENT = "argument"
    LOCAL = "local"
    THIS = "this"
    THAT = "that"
    POINTER = "pointer"
    TEMP = "temp"
    STATIC = "static"
    CONSTANT = "constant"

    @classmethod
    def from_name(cls, name: str) -> "Segment":
        """Devuelve el segmento para su palabra clave o lanza ValueError."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Segmento desconocido: '{name}'") from None

# Segmentos cuyo base vive en un registro puntero (LCL/ARG/THIS/THAT)
DYNAMIC_SEGMENTS = frozenset({Segment.ARGUMENT, Segment.LOCAL, Segment.THIS, Segment.THAT})

# ---- Acceso a memoria ----

@dataclass(frozen=True)
class Push:
    segment: Segment
    index: int

@dataclass(frozen=True)
class Pop:
    segment: Segment
    index: int

# ---- Aritmética / lógica ----

@dataclass(frozen=True)
class Add: pass

@dataclass(frozen=True)
class Sub: pass

@dataclass(frozen=True)
class Neg: pass

@dataclass(frozen=True)
class Eq: pass

@dataclass(frozen=True)
class Gt: pass

@dataclass(frozen=True)
class Lt: pass

@dataclass(frozen=True)
class And: pass

@dataclass(frozen=True)
class Or: pass

@dataclass(frozen=True)
class Not: pass

# ---- Flujo de control ----

@dataclass(frozen=True)
class Label:
    name: str

@dataclass(frozen=True)
class Goto:
    name: str

@dataclass(frozen=True)
class IfGoto:
    name: str

# ---- Funciones ----

@dataclass(frozen=True)
class Function:
    """Declaración de función con `nvars` variables locales."""
    name: str
    nvars: int

@dataclass(frozen=True)
class Call:
    """Llamada a `name` con `nargs` argumentos ya apilados."""
    name: str
    nargs: int

@dataclass(frozen=True)
class Return: pass

Command = Union[Push, Pop, Add, Sub, Neg, Eq, Gt, Lt, And, Or, Not,
                Label, Goto, IfGoto, Function, Call, Return]

# Comandos sin argumentos, por palabra clave
ARITHMETIC = {
    "add": Add(), "sub": Sub(), "neg": Neg(),
    "eq": Eq(), "gt": Gt(), "lt": Lt(),
    "and": And(), "or": Or(), "not": Not(),
}

@dataclass(frozen=True)
class SourceCommand:
    """Comando con su origen: unidad de traducción, línea (base 0) y texto original."""
    command: Command
    unit: str
    line: int
    source: str
