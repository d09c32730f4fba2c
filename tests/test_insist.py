import io

import pytest

from scratchpad.insist import Insist, insist, main


def test_success_is_silent_by_default():
    buf = io.StringIO()
    check = Insist(stream=buf)
    check(1 + 1 == 2, "arithmetic works")
    assert buf.getvalue() == ""


def test_failure_reports_expression_and_exits():
    buf = io.StringIO()
    check = Insist(stream=buf)
    flag = False
    with pytest.raises(SystemExit) as info:
        check(flag, "flag must be set")
    assert info.value.code == 7
    assert buf.getvalue() == "ASSERTION FAILED: flag must be set (`flag` was false)\n"


def test_custom_exit_code():
    buf = io.StringIO()
    check = Insist(stream=buf, exit_code=23)
    with pytest.raises(SystemExit) as info:
        check([], "list must not be empty")
    assert info.value.code == 23


def test_print_always_ignored_without_debugging():
    buf = io.StringIO()
    check = Insist(stream=buf, print_always=True)
    check(True, "fine")
    assert buf.getvalue() == ""


def test_debug_failure_prints_backtrace():
    buf = io.StringIO()
    check = Insist(stream=buf, debugging=True)
    flag = False
    with pytest.raises(SystemExit):
        check(flag, "flag must be set")
    text = buf.getvalue()
    assert text.startswith(
        "ASSERTION FAILED: flag must be set (`flag` was false, "
        "in test_debug_failure_prints_backtrace(), at "
    )
    assert " frames\n" in text
    assert text.endswith("done\n")


def test_print_always_reports_success():
    buf = io.StringIO()
    check = Insist(stream=buf, debugging=True, print_always=True)
    x = 1
    check(x == 1, "x is one")
    text = buf.getvalue()
    assert text.startswith(
        "assertion succeeded: x is one (`x == 1` was true, "
        "in test_print_always_reports_success(), at "
    )
    assert text.endswith("\n")


def test_print_always_failure_has_no_frame_count():
    buf = io.StringIO()
    check = Insist(stream=buf, debugging=True, print_always=True)
    with pytest.raises(SystemExit):
        check(None, "value required")
    text = buf.getvalue()
    assert " frames\n" not in text
    assert text.endswith("done\n")


def test_module_function_uses_stderr(capsys):
    count = 0
    with pytest.raises(SystemExit) as info:
        insist(count > 0, "count must be positive")
    assert info.value.code == 7
    assert capsys.readouterr().err == (
        "ASSERTION FAILED: count must be positive (`count > 0` was false)\n"
    )


def test_main_fails_with_23(capsys):
    assert main([]) == 23
    out = capsys.readouterr().out
    assert out.startswith(
        "ASSERTION FAILED: x should be the answer to life, the universe, and everything "
        "(`x == 42` was false, in main(), at "
    )
    assert out.endswith("done\n")