import enum
import logging
import os
import typing as t
from pathlib import Path

import click

from ._common import Completer
from .bash_impl import BashCompleter
from .elvish_impl import ElvishCompleter
from .fig_impl import FigCompleter
from .fish_impl import FishCompleter
from .powershell_impl import PowerShellCompleter
from .zsh_impl import ZshCompleter

logger = logging.getLogger(__name__)

# basenames of $SHELL which differ from the canonical name
_SHELL_ALIASES = {"pwsh": "powershell"}


class Shell(str, enum.Enum):
    """Available completion targets.

    Members are declared in lexicographic order of their canonical names,
    which is the order used for help text and for completing the shell name
    itself. New members must keep that order. More may be added, so do not
    treat the set as exhaustive.

    Example::

        @cli.command()
        @click.argument("shell", type=ShellChoice())
        def completion(shell: Shell) -> None:
            shell.generate(cli, "mycli")
    """

    BASH = "bash"
    ELVISH = "elvish"
    FIG = "fig"
    FISH = "fish"
    POWERSHELL = "powershell"
    ZSH = "zsh"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def variants(cls) -> t.List["Shell"]:
        return list(cls)

    @classmethod
    def possible_values(cls) -> t.List[str]:
        return [shell.value for shell in cls]

    @classmethod
    def from_env(cls, environ: t.Optional[t.Mapping[str, str]] = None) -> "Shell":
        """Guess the user's shell from ``$SHELL``, e.g. ``/bin/zsh``.

        Falls back to bash when the variable is unset or names a shell with no
        completion support.
        """
        if environ is None:
            environ = os.environ
        basename = os.path.basename(environ.get("SHELL", ""))
        try:
            return cls(_SHELL_ALIASES.get(basename, basename))
        except ValueError:
            return cls.BASH

    def to_generator(self) -> t.Type[Completer]:
        return _GENERATORS[self]

    def generate(
        self,
        command: click.Command,
        bin_name: t.Optional[t.Any] = None,
        buffer: t.Optional[t.IO[t.Any]] = None,
    ) -> None:
        """Write the completion script for ``command`` to ``buffer``.

        See :func:`generate`.
        """
        logger.debug("generating %s completions", self)
        generate(self.to_generator(), command, bin_name=bin_name, buffer=buffer)

    def generate_to(
        self,
        command: click.Command,
        bin_name: t.Optional[t.Any] = None,
        out_dir: t.Union[str, "os.PathLike[str]"] = ".",
    ) -> Path:
        """Write the completion script for ``command`` into ``out_dir``.

        See :func:`generate_to`.
        """
        logger.debug("generating %s completions into %s", self, out_dir)
        return generate_to(
            self.to_generator(), command, bin_name=bin_name, out_dir=out_dir
        )


_GENERATORS: t.Dict[Shell, t.Type[Completer]] = {
    Shell.BASH: BashCompleter,
    Shell.ELVISH: ElvishCompleter,
    Shell.FIG: FigCompleter,
    Shell.FISH: FishCompleter,
    Shell.POWERSHELL: PowerShellCompleter,
    Shell.ZSH: ZshCompleter,
}


def generate(
    completer_cls: t.Type[Completer],
    command: click.Command,
    bin_name: t.Optional[t.Any] = None,
    buffer: t.Optional[t.IO[t.Any]] = None,
) -> None:
    """Write a completion script to a text or binary stream.

    :param completer_cls: the generator to use
    :param command: the root command, it is only read
    :param bin_name: the program name completions are registered for,
        ``command.name`` when omitted
    :param buffer: the destination, standard output when omitted

    Write errors propagate unchanged.
    """
    completer_cls(command, command_name=bin_name).write(buffer)


def generate_to(
    completer_cls: t.Type[Completer],
    command: click.Command,
    bin_name: t.Optional[t.Any] = None,
    out_dir: t.Union[str, "os.PathLike[str]"] = ".",
) -> Path:
    """Write a completion script into ``out_dir`` and return its path.

    The file name is chosen by the generator, e.g. ``_mycli`` for zsh. The
    directory must already exist. If writing fails the partial file is
    removed before the error is re-raised.
    """
    completer = completer_cls(command, command_name=bin_name)
    path = Path(out_dir) / completer_cls.file_name(completer.name)

    fh = path.open("w", encoding="utf-8", newline="\n")
    try:
        with fh:
            completer.write(fh)
    except Exception:
        logger.debug("removing partially written %s", path)
        path.unlink(missing_ok=True)
        raise

    logger.debug("wrote completions to %s", path)
    return path
