import click

from click_complete_command import Shell, ShellChoice


@click.group()
def cli() -> None:
    pass


@cli.command()
@click.argument("shell", type=ShellChoice())
def completion(shell: Shell) -> None:
    """Generate shell completions."""
    shell.generate(cli, "derive")


if __name__ == "__main__":
    cli()
