import io
import sys
import types

import pytest

from trvs.utils import console_io
from trvs.utils.console_io import ConsoleIO, DefaultOption, center_text


def console_with(*lines, use_color=False):
    return ConsoleIO(
        stdin=io.StringIO("".join(f"{line}\n" for line in lines)),
        stdout=io.StringIO(),
        use_color=use_color,
    )


@pytest.mark.parametrize("answer", ["y", "Y", "yes", "  YES  "])
def test_yes_answers(answer):
    assert console_with(answer).prompt_yes_no() is True


@pytest.mark.parametrize("answer", ["n", "N", "no", " No "])
def test_no_answers(answer):
    assert console_with(answer).prompt_yes_no() is False


def test_empty_input_without_default_prompts_again():
    console = console_with("", "maybe", "y")
    assert console.prompt_yes_no() is True
    assert console.stdout.getvalue().count("Yes or no? [y/n]: ") == 3


def test_empty_input_uses_default():
    assert console_with("").prompt_yes_no(default=DefaultOption.YES) is True
    assert console_with("").prompt_yes_no(default=DefaultOption.NO) is False


def test_default_shown_in_prompt():
    console = console_with("n")
    console.prompt_yes_no(default=DefaultOption.YES)
    assert "[Y/n]" in console.stdout.getvalue()


def test_custom_prompt_text():
    console = console_with("y")
    console.prompt_yes_no("Kill it? ")
    assert console.stdout.getvalue().startswith("Kill it? ")


def test_closed_input_raises_eof():
    with pytest.raises(EOFError):
        console_with().prompt_yes_no()


def test_prompt_choice_returns_zero_based_index():
    console = console_with("0", "abc", "3", "2")
    assert console.prompt_choice(["a", "b", "c"]) == 2
    output = console.stdout.getvalue()
    assert "  1: a" in output
    assert output.count("Please enter a number from 1 to 3.") == 2


def test_prompt_choice_requires_options():
    with pytest.raises(ValueError):
        console_with("1").prompt_choice([])


def test_colors_only_when_enabled():
    plain = console_with()
    plain.print_with_color("warning", "yellow")
    assert plain.stdout.getvalue() == "warning\n"

    colored = console_with(use_color=True)
    colored.print_with_color("warning", "yellow")
    assert colored.stdout.getvalue() == "\033[93mwarning\033[0m\n"


def test_header_is_boxed_to_width():
    console = console_with()
    console.print_header("Version swap complete!", "Press any key to exit...")
    lines = console.stdout.getvalue().splitlines()
    assert len(lines) == 4
    assert all(len(line) == 80 for line in lines)
    assert lines[0].startswith("╔") and lines[-1].endswith("╝")
    assert "Version swap complete!" in lines[1]


def test_center_text_falls_back_when_too_wide():
    assert center_text("abc", "|", 9) == "|  abc  |"
    assert center_text("x" * 20, "|", 10) == "| " + "x" * 20 + " |"


def test_wait_for_key_reads_from_input():
    console = console_with("")
    console.wait_for_key("Press any key to exit...")
    assert console.stdout.getvalue() == "Press any key to exit...\n"


def test_windows_ctrl_c_key_interrupts(monkeypatch):
    keys = iter(["\x03"])
    monkeypatch.setitem(sys.modules, "msvcrt", types.SimpleNamespace(getwch=lambda: next(keys)))
    with pytest.raises(KeyboardInterrupt):
        console_io._read_key_windows()


def test_windows_key_read_returns_other_keys(monkeypatch):
    monkeypatch.setitem(sys.modules, "msvcrt", types.SimpleNamespace(getwch=lambda: "q"))
    assert console_io._read_key_windows() == "q"


def test_windows_title_is_set_without_a_shell(monkeypatch):
    titles = []
    kernel32 = types.SimpleNamespace(SetConsoleTitleW=titles.append)
    fake_ctypes = types.SimpleNamespace(windll=types.SimpleNamespace(kernel32=kernel32))
    monkeypatch.setitem(sys.modules, "ctypes", fake_ctypes)

    console_io._set_windows_title("TR1 & echo pwned")

    assert titles == ["TR1 & echo pwned"]
