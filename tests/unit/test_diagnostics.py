from src.hack_vm.diagnostics import error, warning, has_errors

def test_error_str():
    d = error("segmento desconocido", line=12, file="Main.vm", source="push nowhere 0", hint="use local")
    s = str(d)
    assert "Main.vm:12:" in s
    assert "ERROR: segmento desconocido" in s
    assert "('push nowhere 0')" in s
    assert "(pista: use local)" in s

def test_has_errors_ignores_warnings():
    assert not has_errors([warning("return fuera de una función", line=3)])
    assert has_errors([warning("w"), error("e")])
