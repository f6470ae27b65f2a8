from __future__ import annotations
import argparse, logging, os, sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .ast import Function, Goto, Return, SourceCommand
from .parser import parse_units, Unit
from .codegen import generate, generate_bootstrap
from .stack import comment
from .diagnostics import CodeGenError, Diagnostic, error, warning, has_errors
from .writers import write_asm

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class TranslateOptions:
    """Opciones de traducción.

    - comments: emitir '// unidad[línea]: fuente' antes de cada comando
    - bootstrap: True/False lo fuerza; None lo emite sólo si existe la función `entry`
    - entry: función de entrada del programa
    """
    comments: bool = True
    bootstrap: Optional[bool] = None
    entry: str = "Sys.init"

@dataclass(frozen=True)
class TranslationResult:
    lines: List[str]
    diagnostics: List[Diagnostic]

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)

def has_entry(units: Sequence[Unit], entry: str) -> bool:
    return any(isinstance(sc.command, Function) and sc.command.name == entry
               for _, commands in units for sc in commands)

def _translate_unit(name: str, commands: Sequence[SourceCommand], options: TranslateOptions,
                    out: List[str], diags: List[Diagnostic]) -> bool:
    """Traduce una unidad en orden. La pila de ámbitos empieza vacía en cada unidad.
    Devuelve False (con el error en diags) en el primer comando no traducible."""
    scopes: List[str] = []
    returned = True
    last = None

    for sc in commands:
        cmd = sc.command

        # function reemplaza el ámbito abierto; return no lo cierra
        if isinstance(cmd, Function):
            # un goto final (bucle de parada) también cierra el cuerpo
            if scopes and not returned and not isinstance(last, Goto):
                diags.append(warning(
                    f"La función '{scopes[-1]}' no tiene return antes de '{cmd.name}'",
                    line=sc.line, file=name, source=sc.source))
            scopes[-1:] = [cmd.name]
            returned = False
        elif isinstance(cmd, Return):
            if not scopes:
                diags.append(warning("return fuera de una función",
                                     line=sc.line, file=name, source=sc.source))
            returned = True
        last = cmd

        scope = scopes[-1] if scopes else name
        try:
            code = generate(sc, scope)
        except CodeGenError as ex:
            diags.append(error(str(ex), line=sc.line, file=name, source=sc.source))
            return False

        if options.comments:
            out.append(comment(sc))
        out.extend(code)

    return True

def translate(units: Sequence[Unit], options: TranslateOptions = TranslateOptions()) -> TranslationResult:
    """Traduce las unidades (nombre, comandos) en orden a un único programa Hack.

    Sin salida parcial: ante el primer error de generación devuelve lines=[]
    y un diagnóstico con la línea y el texto fuente del comando."""
    diags: List[Diagnostic] = []
    out: List[str] = []

    bootstrap = options.bootstrap
    if bootstrap is None:
        bootstrap = has_entry(units, options.entry)
    elif bootstrap and not has_entry(units, options.entry):
        diags.append(error(f"Arranque solicitado pero la función de entrada '{options.entry}' no está declarada",
                           hint="declare la función o use --entry con otra función"))
        return TranslationResult(lines=[], diagnostics=diags)
    if bootstrap:
        logger.debug("emitiendo arranque hacia %s", options.entry)
        if options.comments:
            out.append(f"// bootstrap: call {options.entry} 0")
        out.extend(generate_bootstrap(options.entry))

    for name, commands in units:
        logger.debug("traduciendo unidad %s (%d comandos)", name, len(commands))
        if not _translate_unit(name, commands, options, out, diags):
            return TranslationResult(lines=[], diagnostics=diags)

    return TranslationResult(lines=out, diagnostics=diags)

def translate_text(sources: Sequence[Tuple[str, str]],
                   options: TranslateOptions = TranslateOptions()) -> TranslationResult:
    """Parsea todas las fuentes (filename, texto) y traduce.
    Cualquier error de parseo, en cualquier archivo, impide generar código."""
    units, diags = parse_units(sources)
    if has_errors(diags):
        return TranslationResult(lines=[], diagnostics=diags)
    result = translate(units, options)
    return TranslationResult(lines=result.lines, diagnostics=diags + result.diagnostics)

def collect_sources(path: str) -> Tuple[List[str], str]:
    """Devuelve (archivos .vm, salida .asm por defecto) para un archivo o directorio."""
    if os.path.isdir(path):
        d = os.path.normpath(path)
        files = sorted(os.path.join(d, f) for f in os.listdir(d) if f.endswith(".vm"))
        return files, os.path.join(d, os.path.basename(os.path.abspath(d)) + ".asm")
    return [path], os.path.splitext(path)[0] + ".asm"

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Traductor VM -> ensamblador Hack")
    ap.add_argument("source", help="archivo .vm o directorio con archivos .vm")
    ap.add_argument("-o", "--output", help="archivo .asm de salida")
    ap.add_argument("--no-comments", action="store_true", help="no emitir comentarios de origen")
    boot = ap.add_mutually_exclusive_group()
    boot.add_argument("--bootstrap", dest="bootstrap", action="store_true", default=None,
                      help="emitir siempre el código de arranque")
    boot.add_argument("--no-bootstrap", dest="bootstrap", action="store_false",
                      help="no emitir el código de arranque")
    ap.add_argument("--entry", default="Sys.init", help="función de entrada (por defecto Sys.init)")
    ap.add_argument("-v", "--verbose", action="store_true", help="registro de depuración")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    files, default_out = collect_sources(args.source)
    out_path = args.output or default_out
    if not files:
        print(f"ERROR: no hay archivos .vm en {args.source}", file=sys.stderr)
        return 2

    sources = []
    for f in files:
        try:
            with open(f, "r", encoding="utf-8") as fh:
                sources.append((f, fh.read()))
        except OSError as ex:
            print(f"ERROR: no pude leer {f}: {ex}", file=sys.stderr)
            return 2

    options = TranslateOptions(comments=not args.no_comments, bootstrap=args.bootstrap,
                               entry=args.entry)
    result = translate_text(sources, options)

    for d in result.diagnostics:
        print(d, file=sys.stderr)
    if not result.ok:
        return 1

    try:
        write_asm(result.lines, out_path)
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    logger.info("%d archivo(s) -> %s (%d líneas)", len(files), out_path, len(result.lines))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
