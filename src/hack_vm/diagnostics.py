'''
clase Diagnostic, helpers y errores de generación de código
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia", "nota"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Abarca errores, advertencias y notas, con ubicación opcional (unidad y línea),
    el texto fuente original del comando y un mensaje de ayuda (pista).
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    file: Optional[str] = None
    source: Optional[str] = None
    hint: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.source:
            core += f" ('{self.source}')"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None, file: str | None = None,
          source: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, file, source, hint)

def warning(message: str, *, line: int | None = None, file: str | None = None,
            source: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, file, source, hint)

def has_errors(diags) -> bool:
    return any(d.severity == "error" for d in diags)

# ---- Errores de generación de código ----

class CodeGenError(Exception):
    """Error clasificado de generación de código; aborta la traducción."""

class SegmentError(CodeGenError):
    """Segmento no direccionable para la operación (p.ej. pop constant)."""

class UnimplementedCommandError(CodeGenError):
    """Comando sin generación de código."""

class LabelError(CodeGenError):
    """Nombre de etiqueta mal formado."""
