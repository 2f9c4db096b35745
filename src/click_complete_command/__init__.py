import typing as t

import click

from ._common import Completer
from .bash_impl import BashCompleter
from .cli import ShellChoice, completion_command
from .elvish_impl import ElvishCompleter
from .fig_impl import FigCompleter
from .fish_impl import FishCompleter
from .powershell_impl import PowerShellCompleter
from .shell import Shell, generate, generate_to
from .zsh_impl import ZshCompleter

__all__ = (
    "BashCompleter",
    "Completer",
    "ElvishCompleter",
    "FigCompleter",
    "FishCompleter",
    "PowerShellCompleter",
    "Shell",
    "ShellChoice",
    "ZshCompleter",
    "completion_command",
    "generate",
    "generate_completion",
    "generate_to",
)


def generate_completion(
    command: click.Command, shell: t.Optional[t.Union[Shell, str]] = None
) -> str:
    """Return the completion script as a string, for ``$SHELL`` by default."""
    target = Shell.from_env() if shell is None else Shell(shell)
    return target.to_generator()(command).gen_completion()
