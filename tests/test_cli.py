from unittest import mock

import pytest

from chipeight.cli import SHELLS, build_parser, completion_script, main


def test_parser_run_subcommand():
    args = build_parser().parse_args(["run", "game.ch8"])
    assert args.command == "run"
    assert args.file == "game.ch8"


def test_parser_rejects_unknown_shell():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["completions", "tcsh"])


@pytest.mark.parametrize("shell", SHELLS)
def test_completion_script_mentions_commands(shell):
    script = completion_script(shell, "chip-8")
    assert "chip-8" in script
    assert "completions" in script
    assert "run" in script
    assert "@" + "PROG@" not in script


def test_completion_script_unknown_shell():
    with pytest.raises(ValueError):
        completion_script("tcsh", "chip-8")


def test_main_without_command(capsys):
    assert main([]) == 0
    assert "Try --help" in capsys.readouterr().err


def test_main_completions(capsys):
    assert main(["completions", "bash"]) == 0
    assert capsys.readouterr().out == completion_script("bash", "chip-8")


def test_main_run_missing_file(tmp_path, capsys):
    missing = tmp_path / "missing.ch8"
    assert main(["run", str(missing)]) == 1
    captured = capsys.readouterr()
    assert "Beep Boop" in captured.out
    assert "Failed to load" in captured.err


def test_main_run_starts_interface(tmp_path, capsys):
    path = tmp_path / "prog.ch8"
    path.write_bytes(b"\x60\x05")
    with mock.patch("curses.wrapper") as wrapper:
        assert main(["run", str(path)]) == 0
    assert wrapper.call_count == 1
    assert callable(wrapper.call_args.args[0])
    out = capsys.readouterr().out
    assert "Beep Boop" in out
    assert str(path) in out