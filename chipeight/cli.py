"""Command line entry point."""

from __future__ import annotations

import argparse
import curses
import sys

from .machine import Chip8
from .tui import App

PROG = "chip-8"
VERSION = "0.1.0"
SHELLS = ("bash", "elvish", "fish", "powershell", "zsh")

_BASH = r"""_@FN@() {
    local cur prev
    cur="${COMP_WORDS[COMP_CWORD]}"
    prev="${COMP_WORDS[COMP_CWORD-1]}"
    case "$prev" in
        completions) COMPREPLY=($(compgen -W "@SHELLS@" -- "$cur")); return ;;
        run) COMPREPLY=($(compgen -f -- "$cur")); return ;;
    esac
    if [ "$COMP_CWORD" -eq 1 ]; then
        COMPREPLY=($(compgen -W "completions run -h --help -V --version" -- "$cur"))
    fi
}
complete -F _@FN@ @PROG@
"""

_ZSH = r"""#compdef @PROG@
_@FN@() {
    local -a commands
    commands=('completions:Generate shell completions' 'run:Run the CHIP-8 emulator')
    if (( CURRENT == 2 )); then
        _describe 'command' commands
        return
    fi
    case "$words[2]" in
        completions) _values 'shell' @SHELLS@ ;;
        run) _files ;;
    esac
}
compdef _@FN@ @PROG@
"""

_FISH = r"""complete -c @PROG@ -n "__fish_use_subcommand" -f -a completions -d 'Generate shell completions'
complete -c @PROG@ -n "__fish_use_subcommand" -f -a run -d 'Run the CHIP-8 emulator'
complete -c @PROG@ -n "__fish_seen_subcommand_from completions" -f -a "@SHELLS@"
complete -c @PROG@ -n "__fish_seen_subcommand_from run" -F
"""

_ELVISH = r"""set edit:completion:arg-completer[@PROG@] = {|@words|
    var n = (count $words)
    if (== $n 2) {
        put completions run
    } elif (and (== $n 3) (eq $words[1] completions)) {
        put @SHELLS@
    } elif (and (== $n 3) (eq $words[1] run)) {
        edit:complete-filename $words[-1]
    }
}
"""

_POWERSHELL = r"""Register-ArgumentCompleter -Native -CommandName '@PROG@' -ScriptBlock {
    param($wordToComplete, $commandAst, $cursorPosition)
    $elements = $commandAst.CommandElements
    if ($elements.Count -le 2) {
        $candidates = @('completions', 'run')
    } elseif ($elements[1].Value -eq 'completions') {
        $candidates = '@SHELLS@'.Split(' ')
    } else {
        return
    }
    $candidates | Where-Object { $_ -like "$wordToComplete*" } |
        ForEach-Object { [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_) }
}
"""

_TEMPLATES = {
    "bash": _BASH,
    "elvish": _ELVISH,
    "fish": _FISH,
    "powershell": _POWERSHELL,
    "zsh": _ZSH,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG, description="A CHIP-8 emulator with a step debugger."
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    sub = parser.add_subparsers(dest="command")
    completions = sub.add_parser("completions", help="Generate shell completions")
    completions.add_argument("shell", choices=SHELLS)
    run = sub.add_parser("run", help="Run the CHIP-8 emulator")
    run.add_argument("file")
    return parser


def completion_script(shell: str, prog: str = PROG) -> str:
    """Shell completion script for ``prog`` in the given shell."""
    try:
        template = _TEMPLATES[shell]
    except KeyError:
        raise ValueError(f"unsupported shell: {shell}") from None
    return (
        template.replace("@PROG@", prog)
        .replace("@FN@", prog.replace("-", "_"))
        .replace("@SHELLS@", " ".join(SHELLS))
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "completions":
        sys.stdout.write(completion_script(args.shell, parser.prog))
        return 0

    if args.command == "run":
        print(f"Beep Boop, I'm CHIP-8 and I'll run {args.file}")
        chip = Chip8()
        try:
            chip.load_memory(args.file)
        except (OSError, ValueError) as exc:
            print(f"Failed to load file into memory: {exc}", file=sys.stderr)
            return 1
        curses.wrapper(App(chip).run)
        return 0

    print("Try --help", file=sys.stderr)
    return 0