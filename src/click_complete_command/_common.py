import enum
import io
import re
import typing as t

import click

_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")


class ContextTree:
    """Depth-first walk over a command tree, yielding one context per command.

    A group's own context comes first, then its plain subcommands, then the
    subtrees of its subgroups. Hidden commands are skipped.
    """

    def __init__(
        self,
        cmd: click.Command,
        info_name: t.Optional[str] = None,
        parent_ctx: t.Optional[click.Context] = None,
    ):
        self.cmd = cmd
        self.name = info_name or cmd.name
        self.parent_ctx = parent_ctx

    def _walk(
        self,
    ) -> t.Tuple[click.Context, t.List[click.Context], t.List["ContextTree"]]:
        current_ctx = click.Context(
            self.cmd, info_name=self.name, parent=self.parent_ctx
        )
        cmds, subtrees = [], []

        for subcmdname, subcmd in visible_subcommands(self.cmd).items():
            if isinstance(subcmd, click.Group):
                subtrees.append(
                    ContextTree(subcmd, info_name=subcmdname, parent_ctx=current_ctx)
                )
            else:
                cmds.append(
                    click.Context(subcmd, info_name=subcmdname, parent=current_ctx)
                )

        return (current_ctx, cmds, subtrees)

    def __iter__(self) -> t.Generator[click.Context, None, None]:
        ctx, subcmds, subtrees = self._walk()
        yield ctx
        yield from subcmds
        for st in subtrees:
            yield from st


class Completer:
    """Base class for all completion script generators.

    A subclass sets ``FILE_NAME_FMT`` and implements either
    ``group_completer``/``cmd_completer`` (called once per command in the
    tree, between ``prologue`` and ``epilogue``) or ``_gen_completion``.
    """

    FILE_NAME_FMT = "{name}"

    @property
    def epilogue(self) -> str:
        return ""

    @property
    def prologue(self) -> str:
        return ""

    @classmethod
    def file_name(cls, name: str) -> str:
        return cls.FILE_NAME_FMT.format(name=name)

    def _slugify(self, s: str) -> str:
        # shell identifiers only allow ASCII letters, digits and underscores
        return _NON_IDENT_RE.sub("_", s)

    def __init__(
        self,
        command: click.Command,
        command_name: t.Optional[t.Any] = None,
    ) -> None:
        self.name = str(command_name) if command_name is not None else command.name
        if not self.name:
            raise ValueError(
                "cannot generate completions unless the command name is set"
            )
        self.root_cmd = command
        self.root_slug = self._slugify(self.name)
        self.slug = f"__{self.root_slug}__comp"

    def group_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        raise NotImplementedError

    def cmd_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        raise NotImplementedError

    def _gen_completion(self) -> t.Generator[str, None, None]:
        yield self.prologue
        for ctx in ContextTree(self.root_cmd, self.name):
            if isinstance(ctx.command, click.Group):
                yield from self.group_completer(ctx)
            else:
                yield from self.cmd_completer(ctx)
        yield self.epilogue

    def gen_completion(self) -> str:
        return "\n".join(self._gen_completion())

    def write(self, buffer: t.Optional[t.IO[t.Any]] = None) -> None:
        script = self.gen_completion()
        # color=False strips the same way for terminals and files
        if isinstance(buffer, (io.RawIOBase, io.BufferedIOBase)):
            click.echo(script.encode("utf-8"), file=buffer, color=False)
        else:
            click.echo(script, file=buffer, color=False)


def visible_subcommands(cmd: click.Command) -> t.Dict[str, click.Command]:
    return {
        name: subcmd
        for name, subcmd in getattr(cmd, "commands", {}).items()
        if not subcmd.hidden
    }


def visible_options(ctx: click.Context) -> t.List[click.Option]:
    # get_params() includes the automatic --help option
    return [
        x
        for x in ctx.command.get_params(ctx)
        if isinstance(x, click.Option) and not x.hidden
    ]


def positional_args(ctx: click.Context) -> t.List[click.Argument]:
    return [x for x in ctx.command.params if isinstance(x, click.Argument)]


def command_help(cmd: click.Command) -> str:
    # scripts never carry ANSI styling, wherever they are written
    return click.unstyle(cmd.get_short_help_str() or "")


def option_help(o: click.Option) -> str:
    return click.unstyle(o.help or "")


def is_repeatable(o: click.Parameter) -> bool:
    return bool(getattr(o, "count", False) or o.multiple)


def compute_nargs(o: click.Parameter) -> int:
    if getattr(o, "is_flag", False) or getattr(o, "count", False):
        return 0
    else:
        return o.nargs


def choices(o: click.Parameter) -> t.List[str]:
    if not isinstance(o.type, click.Choice):
        return []
    return [c.name if isinstance(c, enum.Enum) else str(c) for c in o.type.choices]


def opt_strs(o: click.Option) -> t.List[str]:
    return list(o.opts) + list(o.secondary_opts)


def short_opts(o: click.Option) -> t.List[str]:
    return [x for x in opt_strs(o) if len(x) == 2 and x[1] != "-"]


def long_opts(o: click.Option) -> t.List[str]:
    return [x for x in opt_strs(o) if x.startswith("--")]


def old_style_opts(o: click.Option) -> t.List[str]:
    # single-dash options longer than one letter, like `-name`
    return [x for x in opt_strs(o) if len(x) > 2 and not x.startswith("--")]


def slamopts(o: click.Option) -> t.List[str]:
    # two letter options, like `-F` can be slammed if they consume exactly one argument
    if compute_nargs(o) != 1:
        return []
    return [x for x in opt_strs(o) if len(x) < 3]
