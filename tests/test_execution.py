import pytest

from LitPyside.core.execution import InProcessInterpreter


@pytest.fixture
def interpreter() -> InProcessInterpreter:
    return InProcessInterpreter()


def test_expression_value_is_echoed(interpreter: InProcessInterpreter) -> None:
    assert interpreter.execute("1 + 1") == "2\n"


def test_namespace_survives_between_commands(interpreter: InProcessInterpreter) -> None:
    assert interpreter.execute("x = 5") == ""
    assert interpreter.execute("x * 2") == "10\n"
    assert interpreter.namespace["x"] == 5


def test_compound_statement(interpreter: InProcessInterpreter) -> None:
    assert interpreter.execute("for i in range(2):\n    print(i)") == "0\n1\n"


def test_traceback_is_returned_as_output(interpreter: InProcessInterpreter) -> None:
    output = interpreter.execute("1 / 0")
    assert "ZeroDivisionError" in output


def test_incomplete_input_is_discarded(interpreter: InProcessInterpreter) -> None:
    assert interpreter.execute("for i in range(2):") == ""
    assert interpreter.execute("   ") == ""


def test_reset_clears_namespace(interpreter: InProcessInterpreter) -> None:
    interpreter.execute("y = 1")
    interpreter.reset()
    assert "NameError" in interpreter.execute("y")


def test_shared_namespace_argument() -> None:
    namespace = {"seed": 7}
    interpreter = InProcessInterpreter(namespace)
    assert interpreter.execute("seed + 1") == "8\n"


def test_exit_is_reported_instead_of_raised(interpreter: InProcessInterpreter) -> None:
    assert interpreter.execute("raise SystemExit(3)") == "SystemExit: 3\n"
    assert interpreter.execute("import sys; sys.exit()") == "SystemExit\n"
    assert interpreter.execute("1 + 1") == "2\n"
