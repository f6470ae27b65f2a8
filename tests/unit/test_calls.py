from src.hack_vm.parser import parse, parse_units
from src.hack_vm.translator import translate, TranslateOptions
from src.hack_vm.emulator import HackMachine
from src.hack_vm.codegen import generate_return

CALLER = {1: 300, 2: 400, 3: 3000, 4: 3010}   # LCL, ARG, THIS, THAT

def _machine(src: str, unit: str = "Main"):
    cmds, diags = parse(src, unit=unit)
    assert not diags
    res = translate([(unit, cmds)], TranslateOptions(bootstrap=False))
    assert res.ok
    m = HackMachine(res.lines)
    m.poke(0, 256)
    for reg, value in CALLER.items():
        m.poke(reg, value)
    return m, res.lines

FOO = """\
push constant 10
call Foo 1
label END
goto END
function Foo 2
push argument 0
return
"""

def test_call_return_replaces_arguments_with_result():
    m, _ = _machine(FOO)
    m.run()
    assert m.stack() == [10]
    assert m.peek(0) == 257
    for reg, value in CALLER.items():
        assert m.peek(reg) == value

def test_function_zeroes_locals():
    src = """\
push constant 10
call Foo 1
label END
goto END
function Foo 2
push local 0
push local 1
add
push argument 0
add
return
"""
    m, _ = _machine(src)
    # SP=257 tras el argumento, +5 del marco: los locales viven en 262 y 263
    m.poke(262, 99)
    m.poke(263, 99)
    m.run()
    assert m.stack() == [10]

def test_call_with_two_arguments_keeps_order():
    src = """\
push constant 1
push constant 7
push constant 3
call Minus 2
label END
goto END
function Minus 0
push argument 0
push argument 1
sub
return
"""
    m, _ = _machine(src)
    m.run()
    assert m.stack() == [1, 4]
    assert m.peek(0) == 258

def test_zero_argument_call_does_not_lose_return_address():
    src = """\
push constant 5
call Seven 0
add
label END
goto END
function Seven 0
push constant 7
return
"""
    m, _ = _machine(src)
    m.run()
    assert m.stack() == [12]

def test_callee_frame_pointers():
    m, _ = _machine(FOO)
    m.run(until="Foo")
    assert m.peek(0) == 262
    assert m.peek(1) == 262          # LCL = SP
    assert m.peek(2) == 256          # ARG = SP - 1 - 5
    # marco: retorno, LCL, ARG, THIS, THAT
    assert [m.peek(a) for a in range(258, 262)] == [300, 400, 3000, 3010]
    assert m.peek(257) == m.address_of("Main$ret.1")

def test_return_labels_unique_per_call_site():
    src = """\
function Main.main 0
call Foo 0
pop temp 0
call Foo 0
pop temp 0
push constant 0
return
function Foo 0
push constant 0
return
"""
    _, lines = _machine(src)
    assert "(Main.main$ret.1)" in lines
    assert "(Main.main$ret.3)" in lines
    decls = [l for l in lines if l.startswith("(")]
    assert len(decls) == len(set(decls))

def test_restore_order_is_that_this_arg_lcl():
    asm = generate_return()
    restored = [asm[i + 2] for i, l in enumerate(asm) if l == "AM=M-1" and asm[i - 1] == "@R13"]
    assert restored == ["@THAT", "@THIS", "@ARG", "@LCL"]

RECURSIVE = {
    "Sys.vm": """\
function Sys.init 0
push constant 6
call Main.fib 1
pop static 0
label HALT
goto HALT
""",
    "Main.vm": """\
// fib(n) recursivo; la etiqueta BASE va después de un return
function Main.fib 0
push argument 0
push constant 2
lt
if-goto BASE
push argument 0
push constant 1
sub
call Main.fib 1
push argument 0
push constant 2
sub
call Main.fib 1
add
return
label BASE
push argument 0
return
""",
}

def test_recursive_program_with_bootstrap():
    units, diags = parse_units(sorted(RECURSIVE.items()))
    assert not diags
    res = translate(units)
    assert res.ok
    m = HackMachine(res.lines)
    m.run(max_steps=200_000)
    assert m.halted
    assert m.peek(m.address_of("Sys.0")) == 8
    # Sys.init no tiene argumentos: su marco empieza en 256
    assert m.peek(2) == 256
