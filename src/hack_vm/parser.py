# src/hack_vm/parser.py
from __future__ import annotations
import os
from typing import List, Optional, Sequence, Tuple

from .lexer import strip_comment, split_words, is_symbol, is_index, is_reserved_label
from .ast import (
    ARITHMETIC, Segment, Command, SourceCommand,
    Push, Pop, Label, Goto, IfGoto, Function, Call, Return,
)
from .memmap import MAX_CONSTANT
from .utils import is_unsigned_nbit
from .diagnostics import error, Diagnostic

Unit = Tuple[str, List[SourceCommand]]

class ParseError(ValueError):
    """Error de análisis con una pista opcional para el usuario."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint

def unit_name(path: str) -> str:
    """Nombre de unidad de traducción: nombre base del archivo sin extensión."""
    return os.path.splitext(os.path.basename(path))[0]

def _parse_int(token: str, what: str) -> int:
    if not is_index(token):
        raise ValueError(f"{what} inválido: '{token}'")
    value = int(token)
    # A-instruction literal: 15 bits sin signo
    if not is_unsigned_nbit(value, 15):
        raise ValueError(f"{what} fuera de rango (0..{MAX_CONSTANT}): {value}")
    return value

def _parse_symbol(token: str) -> str:
    if not is_symbol(token):
        raise ValueError(f"Nombre de símbolo inválido: '{token}'")
    return token

def _expect(keyword: str, args: List[str], n: int, form: str) -> None:
    if len(args) != n:
        raise ValueError(f"{keyword} espera el formato '{form}'")

def parse_command(core: str) -> Command:
    """Convierte una línea sin comentarios en un comando; lanza ValueError si no es válida."""
    keyword, args = split_words(core)

    if keyword in ARITHMETIC:
        _expect(keyword, args, 0, keyword)
        return ARITHMETIC[keyword]

    if keyword in ("push", "pop"):
        _expect(keyword, args, 2, f"{keyword} <segmento> <índice>")
        segment = Segment.from_name(args[0].lower())
        index = _parse_int(args[1], "Índice")
        if keyword == "push":
            return Push(segment, index)
        if segment is Segment.CONSTANT:
            raise ParseError("pop no admite el segmento constant",
                             hint="use push constant, o pop a otro segmento")
        return Pop(segment, index)

    if keyword in ("label", "goto", "if-goto"):
        _expect(keyword, args, 1, f"{keyword} <etiqueta>")
        name = _parse_symbol(args[0])
        if is_reserved_label(name):
            raise ParseError(f"Nombre de etiqueta reservado: '{name}'",
                             hint="las etiquetas 'ret.<n>' son direcciones de retorno")
        if keyword == "label":
            return Label(name)
        if keyword == "goto":
            return Goto(name)
        return IfGoto(name)

    if keyword == "function":
        _expect(keyword, args, 2, "function <nombre> <nvars>")
        return Function(_parse_symbol(args[0]), _parse_int(args[1], "Número de locales"))

    if keyword == "call":
        _expect(keyword, args, 2, "call <nombre> <nargs>")
        return Call(_parse_symbol(args[0]), _parse_int(args[1], "Número de argumentos"))

    if keyword == "return":
        _expect(keyword, args, 0, "return")
        return Return()

    raise ValueError(f"Comando desconocido: '{keyword}'")

def parse(text: str, *, unit: Optional[str] = None,
          filename: Optional[str] = None) -> Tuple[List[SourceCommand], List[Diagnostic]]:
    """
    Devuelve (commands, diagnostics) para una unidad de traducción.

    Reglas:
      - Comentarios: '//' hasta fin de línea.
      - Líneas vacías o sólo comentario se ignoran.
      - Números de línea en base 0, tal como aparecen en el archivo.
      - Un error no detiene el análisis: se reportan todos.
    """
    if unit is None:
        unit = unit_name(filename) if filename else "Main"
    file = filename if filename is not None else unit

    commands: List[SourceCommand] = []
    diags: List[Diagnostic] = []

    for lineno, raw in enumerate(text.splitlines()):
        core = strip_comment(raw)
        if not core:
            continue
        try:
            command = parse_command(core)
        except ValueError as ex:
            diags.append(error(str(ex), line=lineno, file=file, source=core,
                               hint=getattr(ex, "hint", None)))
            continue
        commands.append(SourceCommand(command=command, unit=unit, line=lineno, source=core))

    return commands, diags

def parse_units(sources: Sequence[Tuple[str, str]]) -> Tuple[List[Unit], List[Diagnostic]]:
    """Parsea todas las fuentes (filename, texto) y acumula todos los diagnósticos."""
    units: List[Unit] = []
    diags: List[Diagnostic] = []
    for filename, text in sources:
        name = unit_name(filename)
        commands, d = parse(text, unit=name, filename=filename)
        units.append((name, commands))
        diags.extend(d)
    return units, diags
