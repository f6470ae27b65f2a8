'''
emulador de la CPU Hack para verificar la semántica del código generado
'''

from __future__ import annotations
from typing import List, Optional

from .isa import AInstr, COMP, JUMP
from .linker import first_pass, LinkResult
from .memmap import SP, STACK_BASE
from .utils import u16, to_signed16
from .diagnostics import has_errors

RAM_SIZE = 0x8000

class MachineError(Exception):
    pass

class HackMachine:
    """CPU Hack: registros A, D y PC, ROM de instrucciones y 32K palabras de RAM.

    La máquina se detiene cuando el PC sale de la ROM o entra en el bucle
    canónico de parada '(X) @X 0;JMP'.
    """

    def __init__(self, lines: List[str]):
        self.link: LinkResult = first_pass(lines)
        if has_errors(self.link.diagnostics):
            raise MachineError("; ".join(str(d) for d in self.link.diagnostics))
        self.rom = self.link.rom
        self.ram = [0] * RAM_SIZE
        self.a = 0
        self.d = 0
        self.pc = 0
        self.steps = 0
        self.halted = False

    # ---- acceso con signo ----

    def peek(self, addr: int) -> int:
        return to_signed16(self.ram[addr])

    def poke(self, addr: int, value: int) -> None:
        self.ram[addr] = u16(value)

    def address_of(self, symbol: str) -> int:
        return self.link.symtab[symbol]

    def stack(self, base: int = STACK_BASE) -> List[int]:
        """Contenido de la pila (con signo) desde `base` hasta SP."""
        return [self.peek(i) for i in range(base, self.ram[self.address_of(SP)])]

    # ---- ejecución ----

    def _is_halt_loop(self, target: int) -> bool:
        ins = self.rom[target] if target < len(self.rom) else None
        return target == self.pc - 1 and isinstance(ins, AInstr) and ins.value == target

    def step(self) -> None:
        if self.halted or self.pc >= len(self.rom):
            self.halted = True
            return
        ins = self.rom[self.pc]
        self.steps += 1

        if isinstance(ins, AInstr):
            self.a = ins.value
            self.pc += 1
            return

        if self.a >= RAM_SIZE and "M" in ins.comp + ins.dest:
            raise MachineError(f"acceso a RAM fuera de rango: {self.a} (pc={self.pc})")
        m = to_signed16(self.ram[self.a]) if self.a < RAM_SIZE else 0
        value = to_signed16(u16(COMP[ins.comp](to_signed16(self.a), to_signed16(self.d), m)))

        # M y el salto usan la A anterior a la asignación
        old_a = self.a
        if "M" in ins.dest:
            self.ram[old_a] = u16(value)
        if "D" in ins.dest:
            self.d = u16(value)
        if "A" in ins.dest:
            self.a = u16(value)

        if JUMP[ins.jump](value):
            target = old_a
            if self._is_halt_loop(target):
                self.halted = True
            self.pc = target
        else:
            self.pc += 1

        if self.pc >= len(self.rom):
            self.halted = True

    def run(self, max_steps: int = 100_000, until: Optional[str] = None) -> int:
        """Ejecuta hasta parar, hasta llegar a la etiqueta `until` o hasta `max_steps`.
        Devuelve el número de pasos ejecutados."""
        stop = self.address_of(until) if until is not None else None
        start = self.steps
        while not self.halted:
            if stop is not None and self.pc == stop:
                break
            if self.steps - start >= max_steps:
                raise MachineError(f"límite de {max_steps} pasos alcanzado (pc={self.pc})")
            self.step()
        return self.steps - start
