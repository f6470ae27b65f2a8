# src/hack_vm/codegen.py
from __future__ import annotations
from typing import Dict, List, Type

from .ast import (
    SourceCommand, Push, Pop, Add, Sub, Neg, Eq, Gt, Lt, And, Or, Not,
    Label, Goto, IfGoto, Function, Call, Return,
)
from .memmap import (
    SP, LCL, ARG, THIS, THAT, FRAME, RET_ADDR, FRAME_SIZE,
    STACK_BASE, BOOT_LCL, BOOT_ARG, BOOT_THIS, BOOT_THAT,
)
from .segments import generate_push, generate_pop, push_constant
from .lexer import is_reserved_label
from .stack import pop_d, push_d
from .diagnostics import LabelError, UnimplementedCommandError

BOOTSTRAP_SCOPE = "Bootstrap"

# ---------------- Aritmética / lógica ----------------

# x op y, con D = y (cima) y M = x (segundo)
BINARY_OPS: Dict[Type, str] = {
    Add: "D+M",
    Sub: "M-D",
    And: "D&M",
    Or:  "D|M",
}

UNARY_OPS: Dict[Type, str] = {
    Neg: "-D",
    Not: "!D",
}

# Con D = y - x: x > y  <=>  D < 0 ; x < y  <=>  D > 0
COMPARISON_JUMPS: Dict[Type, str] = {
    Eq: "JEQ",
    Gt: "JLT",
    Lt: "JGT",
}

def generate_binary(op: str) -> List[str]:
    return [*pop_d(), f"@{SP}", "AM=M-1", f"D={op}", *push_d()]

def generate_unary(op: str) -> List[str]:
    return [*pop_d(), f"D={op}", *push_d()]

def generate_comparison(sc: SourceCommand, jump: str) -> List[str]:
    """Calcula D = y - x (y en la cima, x debajo) y salta con `jump` si la
    comparación es cierta. Apila -1 (cierto) o 0 (falso).

    Las etiquetas llevan unidad y línea, únicas en todo el programa.
    """
    true_label = f"COMP_TRUE_{sc.unit}.{sc.line}"
    end_label = f"COMP_END_{sc.unit}.{sc.line}"
    return [
        *pop_d(),
        f"@{SP}", "AM=M-1",
        "D=D-M",
        f"@{true_label}", f"D;{jump}",
        "D=0",
        f"@{end_label}", "0;JMP",
        f"({true_label})",
        "D=-1",
        f"({end_label})",
        *push_d(),
    ]

# ---------------- Flujo de control ----------------

def scoped_label(scope: str, name: str) -> str:
    """Etiqueta de usuario calificada: '<scope>$<name>'."""
    if not name:
        raise LabelError("Nombre de etiqueta vacío")
    if is_reserved_label(name):
        raise LabelError(f"Nombre de etiqueta reservado: '{name}'")
    return f"{scope}${name}"

def generate_label(scope: str, name: str) -> List[str]:
    return [f"({scoped_label(scope, name)})"]

def generate_goto(scope: str, name: str) -> List[str]:
    return [f"@{scoped_label(scope, name)}", "0;JMP"]

def generate_if_goto(scope: str, name: str) -> List[str]:
    target = scoped_label(scope, name)
    return [*pop_d(), f"@{target}", "D;JNE"]

# ---------------- Llamadas ----------------

def return_label(scope: str, line: int) -> str:
    return f"{scope}$ret.{line}"

def _push_register(reg: str) -> List[str]:
    return [f"@{reg}", "D=M", *push_d()]

def call_sequence(name: str, nargs: int, ret: str) -> List[str]:
    """Apila el marco (retorno, LCL, ARG, THIS, THAT), reubica ARG y LCL y salta a `name`."""
    if not name:
        raise LabelError("Nombre de función vacío")
    asm = [f"@{ret}", "D=A", *push_d()]
    for reg in (LCL, ARG, THIS, THAT):
        asm += _push_register(reg)
    asm += [
        # ARG = SP - nargs - 5
        f"@{SP}", "D=M", f"@{nargs + FRAME_SIZE}", "D=D-A", f"@{ARG}", "M=D",
        # LCL = SP
        f"@{SP}", "D=M", f"@{LCL}", "M=D",
        f"@{name}", "0;JMP",
        f"({ret})",
    ]
    return asm

def generate_call(sc: SourceCommand, scope: str, name: str, nargs: int) -> List[str]:
    return call_sequence(name, nargs, return_label(scope, sc.line))

def generate_function(name: str, nvars: int) -> List[str]:
    if not name:
        raise LabelError("Nombre de función vacío")
    asm = [f"({name})"]
    for _ in range(nvars):
        asm += push_constant(0)
    return asm

def _restore_register(reg: str) -> List[str]:
    # FRAME--, reg = *FRAME
    return [f"@{FRAME}", "AM=M-1", "D=M", f"@{reg}", "M=D"]

def generate_return() -> List[str]:
    asm = [
        # FRAME = LCL
        f"@{LCL}", "D=M", f"@{FRAME}", "M=D",
        # RET_ADDR = *(FRAME - 5), antes de pisar *ARG (con 0 argumentos es la misma celda)
        f"@{FRAME_SIZE}", "A=D-A", "D=M", f"@{RET_ADDR}", "M=D",
        # *ARG = pop()
        *pop_d(), f"@{ARG}", "A=M", "M=D",
        # SP = ARG + 1
        f"@{ARG}", "D=M+1", f"@{SP}", "M=D",
    ]
    for reg in (THAT, THIS, ARG, LCL):
        asm += _restore_register(reg)
    asm += [f"@{RET_ADDR}", "A=M", "0;JMP"]
    return asm

# ---------------- Arranque ----------------

def _set_register(reg: str, value: int) -> List[str]:
    if value < 0:
        return [f"@{-value}", "D=-A", f"@{reg}", "M=D"]
    return [f"@{value}", "D=A", f"@{reg}", "M=D"]

def generate_bootstrap(entry: str) -> List[str]:
    """Inicializa SP y los punteros de segmento y llama a `entry` sin argumentos.
    Si `entry` retorna, la máquina queda en un bucle de parada."""
    halt = f"{BOOTSTRAP_SCOPE}$halt"
    asm: List[str] = []
    asm += _set_register(SP, STACK_BASE)
    asm += _set_register(LCL, BOOT_LCL)
    asm += _set_register(ARG, BOOT_ARG)
    asm += _set_register(THIS, BOOT_THIS)
    asm += _set_register(THAT, BOOT_THAT)
    asm += call_sequence(entry, 0, f"{BOOTSTRAP_SCOPE}$ret")
    asm += [f"({halt})", f"@{halt}", "0;JMP"]
    return asm

# ---------------- Despacho ----------------

def generate(sc: SourceCommand, scope: str) -> List[str]:
    """Genera las líneas Hack de un comando. `scope` es la función que lo encierra
    (o la unidad fuera de funciones). Lanza CodeGenError si no es traducible."""
    cmd = sc.command
    kind = type(cmd)

    if isinstance(cmd, Push):
        return generate_push(sc, cmd.segment, cmd.index)
    if isinstance(cmd, Pop):
        return generate_pop(sc, cmd.segment, cmd.index)
    if kind in BINARY_OPS:
        return generate_binary(BINARY_OPS[kind])
    if kind in UNARY_OPS:
        return generate_unary(UNARY_OPS[kind])
    if kind in COMPARISON_JUMPS:
        return generate_comparison(sc, COMPARISON_JUMPS[kind])
    if isinstance(cmd, Label):
        return generate_label(scope, cmd.name)
    if isinstance(cmd, Goto):
        return generate_goto(scope, cmd.name)
    if isinstance(cmd, IfGoto):
        return generate_if_goto(scope, cmd.name)
    if isinstance(cmd, Function):
        return generate_function(cmd.name, cmd.nvars)
    if isinstance(cmd, Call):
        return generate_call(sc, scope, cmd.name, cmd.nargs)
    if isinstance(cmd, Return):
        return generate_return()

    raise UnimplementedCommandError(f"Generación de código no implementada para {cmd!r}")
