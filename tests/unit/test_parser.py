import pytest
from src.hack_vm.parser import parse, parse_units, parse_command, unit_name
from src.hack_vm.ast import (
    Segment, Push, Pop, Add, Not, Label, Goto, IfGoto, Function, Call, Return,
)

def test_parse_simple_program():
    src = """
    // Main.vm
    function Main.main 1
        push constant 7   // siete
        pop local 0
    label LOOP
        if-goto LOOP
        call Math.multiply 2
        return
    """
    cmds, diags = parse(src, filename="dir/Main.vm")
    assert not diags
    assert [c.command for c in cmds] == [
        Function("Main.main", 1),
        Push(Segment.CONSTANT, 7),
        Pop(Segment.LOCAL, 0),
        Label("LOOP"),
        IfGoto("LOOP"),
        Call("Math.multiply", 2),
        Return(),
    ]
    assert all(c.unit == "Main" for c in cmds)
    # líneas en base 0, contando vacías y comentarios
    assert [c.line for c in cmds] == [2, 3, 4, 5, 6, 7, 8]
    assert cmds[1].source == "push constant 7"

@pytest.mark.parametrize("src, expected", [
    ("add", Add()),
    ("NOT", Not()),
    ("goto END", Goto("END")),
    ("push pointer 1", Push(Segment.POINTER, 1)),
    ("push constant 32767", Push(Segment.CONSTANT, 32767)),
])
def test_parse_command(src, expected):
    assert parse_command(src) == expected

@pytest.mark.parametrize("src, fragment", [
    ("push nowhere 0", "Segmento desconocido"),
    ("push local", "espera el formato"),
    ("push local x", "inválido"),
    ("push constant 32768", "fuera de rango"),
    ("pop constant 0", "constant"),
    ("add 1", "espera el formato"),
    ("label 1bad", "símbolo inválido"),
    ("call Foo", "espera el formato"),
    ("jump X", "Comando desconocido"),
])
def test_parse_errors(src, fragment):
    cmds, diags = parse(src, unit="Bad")
    assert cmds == []
    (d,) = diags
    assert d.severity == "error"
    assert fragment in d.message
    assert d.line == 0 and d.source == src

def test_all_errors_reported():
    cmds, diags = parse("push x 0\nadd\npop y 1\n", filename="Two.vm")
    assert len(cmds) == 1
    assert [d.line for d in diags] == [0, 2]
    assert all(d.file == "Two.vm" for d in diags)

def test_parse_units_keeps_order():
    units, diags = parse_units([("b/Zed.vm", "add\n"), ("a/Alpha.vm", "sub\n")])
    assert not diags
    assert [name for name, _ in units] == ["Zed", "Alpha"]

def test_unit_name():
    assert unit_name("/tmp/proj/SimpleAdd.vm") == "SimpleAdd"

@pytest.mark.parametrize("src", ["pop constant 0", "label ret.3", "if-goto ret.12"])
def test_parse_error_hints(src):
    _, diags = parse(src, unit="Bad")
    (d,) = diags
    assert d.hint
    assert "pista" in str(d)

def test_ret_like_labels_not_reserved_unless_exact():
    cmds, diags = parse("label ret\nlabel ret.x\nlabel my.ret.1\n", unit="Ok")
    assert not diags
    assert [sc.command for sc in cmds] == [Label("ret"), Label("ret.x"), Label("my.ret.1")]
