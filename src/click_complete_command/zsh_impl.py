import re
import typing as t

import click

from ._common import (
    Completer,
    choices,
    command_help,
    compute_nargs,
    is_repeatable,
    opt_strs,
    option_help,
    positional_args,
    visible_options,
    visible_subcommands,
)

_ZSH_HELP_ESC_RE = re.compile(r'([`":\[\]\\$])')


class ZshCompleter(Completer):
    FILE_NAME_FMT = "_{name}"
    DEFAULT_EAGER_EXIT_OPTS = ("-h", "--help")

    @property
    def prologue(self) -> str:
        return f"#compdef {self.name}\n"

    @property
    def epilogue(self) -> str:
        # autoloaded from $fpath the file body runs as the completion function,
        # sourced directly it only registers it
        root = f"{self.slug}_cmd_{self.root_slug}"
        return (
            f'\nif [ "$funcstack[1]" = "_{self.name}" ]; then\n'
            f'  {root} "$@"\n'
            "else\n"
            f"  compdef {root} {self.name}\n"
            "fi"
        )

    def __init__(
        self,
        command: click.Command,
        command_name: t.Optional[t.Any] = None,
        options_causing_eager_exit: t.Optional[t.Tuple[str, ...]] = None,
    ) -> None:
        super().__init__(command, command_name=command_name)
        self.options_causing_eager_exit = (
            options_causing_eager_exit
            if options_causing_eager_exit is not None
            else self.DEFAULT_EAGER_EXIT_OPTS
        )

    def _is_root_ctx(self, ctx: click.Context) -> bool:
        return ctx.parent is None

    def _cmdslug(self, ctx: click.Context) -> str:
        return self._slugify(ctx.command_path)

    def _cmd_completer_name(self, ctx: click.Context) -> str:
        return f"{self.slug}_cmd_{self._cmdslug(ctx)}"

    def _subcmd_describer_name(self, ctx: click.Context) -> str:
        return f"{self.slug}_describe_subcmds_{self._cmdslug(ctx)}"

    def _escape(self, s: str) -> str:
        return _ZSH_HELP_ESC_RE.sub(r"\\\1", s)

    def _option_descs(self, o: click.Option) -> t.Generator[str, None, None]:
        nargs = compute_nargs(o)
        argspec = ""
        values = choices(o)
        if values:
            argspec = ": :(" + " ".join(self._escape(v) for v in values) + ")"
        elif nargs > 0:
            argspec = ": :_default"

        help_ = option_help(o)
        helptext = ("[" + self._escape(help_) + "]") if help_ else ""

        # aliases are listed as mutually exclusive, so `--help` and `-h` are not
        # both offered once one of them is on the line
        raw_flags = flags = opt_strs(o)

        # `-F+` accepts a slammed argument, as in `-Fjson`
        flags = [
            (f"{flag}+" if len(flag) == 2 and nargs == 1 else flag) for flag in flags
        ]
        # `--format=` accepts `--format=text`
        flags = [
            (f"{flag}=" if flag.startswith("--") and nargs == 1 else flag)
            for flag in flags
        ]
        if is_repeatable(o):
            flags = [f"*{flag}" for flag in flags]

        excludes = " ".join(raw_flags)
        if is_repeatable(o):
            excludes = ""
        if raw_flags[0] in self.options_causing_eager_exit:
            excludes = excludes + (" " if excludes else "") + "- :"
        if excludes:
            excludes = "(" + excludes + ")"

        if len(flags) == 1:
            yield f'"{excludes}{flags[0]}{helptext}{argspec}"'
        else:
            for flag in flags:
                yield f'"{excludes}{flag}{helptext}{argspec}"'

    def _all_option_descs(self, ctx: click.Context) -> t.List[str]:
        return [x for o in visible_options(ctx) for x in self._option_descs(o)]

    def _positional_arg_desc(self, arg_position: int, arg: click.Argument) -> str:
        n = str(arg_position + 1)
        if compute_nargs(arg) == -1:
            n = "*"
        # a double colon before the message marks the argument optional
        opt_colon = "" if arg.required else ":"
        values = choices(arg)
        action = "(" + " ".join(self._escape(v) for v in values) + ")" if values else ""
        return f'"{n}{opt_colon}:{arg.human_readable_name}:{action}"'

    def _all_positional_arg_descs(self, ctx: click.Context) -> t.List[str]:
        args = positional_args(ctx)
        return [self._positional_arg_desc(i, a) for i, a in enumerate(args)]

    def cmd_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield f"{self._cmd_completer_name(ctx)}() {{"
        all_descs = self._all_option_descs(ctx) + self._all_positional_arg_descs(ctx)
        if not all_descs:
            yield "  _nothing"
            yield "}"
            return
        yield "  _arguments \\"
        for d in all_descs[:-1]:
            yield f"    {d} \\"
        yield "    " + all_descs[-1]
        yield "}"

    def group_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        subcommands = visible_subcommands(ctx.command)
        yield f"{self._subcmd_describer_name(ctx)}() {{"
        yield "  local -a subcmds; subcmds=("
        for n, cmd in subcommands.items():
            yield f'    "{n}:{self._escape(command_help(cmd))}"'
        yield "  )"
        yield f"  _describe -t subcmds '{ctx.command_path} command' subcmds \"$@\""
        yield "}"

        yield f"{self._cmd_completer_name(ctx)}() {{"
        if self._is_root_ctx(ctx):
            yield '  local curcontext="$curcontext" context state state_descr line'
            yield "  typeset -A opt_args"
        yield "  _arguments -C \\"
        for desc in self._all_option_descs(ctx):
            yield f"    {desc} \\"
        # Both specs below MUST carry '(-)', making them mutually exclusive with
        # further options. Otherwise `foo bar -h` would let the `foo` level
        # consume `-h` instead of leaving it to the `_arguments` call of `bar`.
        # Earlier options are unaffected, so `foo --format json <TAB>` still
        # describes the subcommands.
        yield f'    "(-): :{self._subcmd_describer_name(ctx)}" \\'
        yield '    "(-)*::arg:->args"'

        yield "  case $state in (args) case $line[1] in"
        for n in subcommands:
            funcname = f"{self._cmd_completer_name(ctx)}_{self._slugify(n)}"
            yield f'    "{n}") {funcname} ;;'
        yield "  esac ;; esac"
        yield "}"
