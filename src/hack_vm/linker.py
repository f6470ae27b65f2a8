# src/hack_vm/linker.py
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, List, Union

from .isa import AInstr, CInstr, parse_c
from .lexer import is_symbol, is_index, strip_comment
from .memmap import PREDEFINED, VARIABLE_BASE, MAX_CONSTANT
from .diagnostics import Diagnostic, error

LABEL_DECL_RE = re.compile(r"^\((?P<name>[^)]*)\)$")

# ---------- Resultado del enlace ----------

@dataclass(frozen=True)
class LinkResult:
    rom: List[Union[AInstr, CInstr]]
    symtab: Dict[str, int]
    variables: Dict[str, int]
    diagnostics: List[Diagnostic]

def first_pass(lines: List[str]) -> LinkResult:
    """
    Resuelve un programa Hack simbólico:
      - PASADA 1: '(LABEL)' toma la dirección ROM de la siguiente instrucción.
      - PASADA 2: '@sym' se resuelve contra predefinidos, etiquetas o una variable
        nueva (RAM 16, 17, ... en orden de primera aparición).
    """
    diags: List[Diagnostic] = []
    symtab: Dict[str, int] = dict(PREDEFINED)
    variables: Dict[str, int] = {}
    code: List[tuple] = []  # (texto, línea)

    for lineno, raw in enumerate(lines):
        core = strip_comment(raw)
        if not core:
            continue
        m = LABEL_DECL_RE.match(core)
        if m:
            name = m.group("name")
            if not is_symbol(name):
                diags.append(error(f"Etiqueta inválida: '{name}'", line=lineno, source=core))
            elif name in symtab:
                diags.append(error(f"Etiqueta '{name}' redefinida", line=lineno, source=core))
            else:
                symtab[name] = len(code)
            continue
        code.append((core, lineno))

    rom: List[Union[AInstr, CInstr]] = []
    next_var = VARIABLE_BASE
    for core, lineno in code:
        if core.startswith("@"):
            token = core[1:]
            if is_index(token):
                value = int(token)
                if value > MAX_CONSTANT:
                    diags.append(error(f"Literal fuera de rango: {value}", line=lineno, source=core))
                rom.append(AInstr(value))
                continue
            if not is_symbol(token):
                diags.append(error(f"Símbolo inválido: '{token}'", line=lineno, source=core))
                rom.append(AInstr(0))
                continue
            if token not in symtab:
                symtab[token] = next_var
                variables[token] = next_var
                next_var += 1
            rom.append(AInstr(symtab[token]))
            continue
        try:
            rom.append(parse_c(core))
        except ValueError as ex:
            diags.append(error(str(ex), line=lineno, source=core))

    return LinkResult(rom=rom, symtab=symtab, variables=variables, diagnostics=diags)
