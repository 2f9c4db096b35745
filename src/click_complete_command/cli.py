import typing as t
from pathlib import Path

import click

from .shell import Shell


class ShellChoice(click.Choice):
    """A ``click.Choice`` over the canonical shell names, converting to :class:`Shell`."""

    name = "shell"

    def __init__(self, case_sensitive: bool = True) -> None:
        super().__init__(Shell.possible_values(), case_sensitive=case_sensitive)

    def convert(
        self,
        value: t.Any,
        param: t.Optional[click.Parameter],
        ctx: t.Optional[click.Context],
    ) -> Shell:
        if isinstance(value, Shell):
            return value
        return Shell(super().convert(value, param, ctx))


def completion_command(name: str = "completion") -> click.Command:
    """Build a subcommand which prints completions for the program it is attached to.

    e.g. ``mycli completion zsh`` or ``mycli completion fish --out-dir ~/.config/fish/completions``
    """

    @click.command(name)
    @click.argument("shell", type=ShellChoice())
    @click.option(
        "--out-dir",
        type=click.Path(exists=True, file_okay=False, writable=True, path_type=Path),
        help="Write the script into this directory instead of standard output.",
    )
    @click.pass_context
    def completion(ctx: click.Context, shell: Shell, out_dir: t.Optional[Path]) -> None:
        """Generate shell completions."""
        root = ctx.find_root()
        if out_dir is None:
            shell.generate(root.command, root.info_name)
        else:
            click.echo(shell.generate_to(root.command, root.info_name, out_dir))

    return completion
