import click
from pytest import fixture


def build_cli() -> click.Group:
    @click.group()
    @click.option("-v", "--verbose", count=True, help="Increase verbosity.")
    @click.option(
        "-F",
        "--format",
        "fmt",
        type=click.Choice(["json", "text"]),
        help="Output format.",
    )
    @click.option("--token", hidden=True, help="Not for completion.")
    def mycli(verbose: int, fmt: str, token: str) -> None:
        """An example program."""

    @mycli.command()
    @click.option("--dry-run", is_flag=True, help="Only print what would happen.")
    @click.argument("target")
    def deploy(dry_run: bool, target: str) -> None:
        """Deploy to a target."""

    @mycli.group("config")
    def config_group() -> None:
        """Read and write settings."""

    @config_group.command("get")
    @click.argument("key")
    def config_get(key: str) -> None:
        """Print a setting."""

    @config_group.command("set")
    @click.argument("key")
    @click.argument("value")
    def config_set(key: str, value: str) -> None:
        """Change a setting."""

    @mycli.command(hidden=True)
    def secret() -> None:
        """Not for completion."""

    return mycli


@fixture
def cli() -> click.Group:
    return build_cli()
