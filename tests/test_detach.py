import sys
import time

import pytest

from scratchpad.detach import detach, main


def _wait_for(path, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if path.exists() and path.read_text() == "ok":
            return True
        time.sleep(0.05)
    return False


def test_detach_runs_command_and_reports_status():
    proc = detach([sys.executable, "-c", "import sys; sys.exit(3)"])
    assert proc.wait(timeout=30) == 3


def test_detach_silences_output(capfd):
    proc = detach([sys.executable, "-c", "print('hello'); import sys; print('oops', file=sys.stderr)"])
    assert proc.wait(timeout=30) == 0
    captured = capfd.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_detach_stdin_is_empty(tmp_path):
    target = tmp_path / "stdin.txt"
    script = f"import sys; open({str(target)!r}, 'w').write(repr(sys.stdin.read()))"
    proc = detach([sys.executable, "-c", script])
    assert proc.wait(timeout=30) == 0
    assert target.read_text() == "''"


def test_detach_requires_command():
    with pytest.raises(ValueError):
        detach([])


def test_main_usage(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err == "USAGE: detach command --to --run -forked\n"


def test_main_missing_program(capsys, tmp_path):
    assert main([str(tmp_path / "no-such-program")]) == 1
    assert capsys.readouterr().err.startswith("exec() failed: ")


def test_main_starts_command(tmp_path):
    target = tmp_path / "done.txt"
    script = f"open({str(target)!r}, 'w').write('ok')"
    assert main([sys.executable, "-c", script]) == 0
    assert _wait_for(target)