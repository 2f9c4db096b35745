import typing as t

import click

from ._common import (
    Completer,
    ContextTree,
    choices,
    command_help,
    compute_nargs,
    long_opts,
    old_style_opts,
    opt_strs,
    option_help,
    short_opts,
    visible_options,
    visible_subcommands,
)


def _quote(s: str) -> str:
    return "'" + s.replace("\\", "\\\\").replace("'", "\\'") + "'"


class FishCompleter(Completer):
    """Static completions for fish.

    fish has no associative arrays, so subcommand lookup is a generated
    ``switch`` over command paths. Every ``complete`` line is conditioned on
    the command path reached so far.
    """

    FILE_NAME_FMT = "{name}.fish"

    PROLOGUE_FMT = """\
function {x.slug}_subcmds
  switch $argv[1]
{cases}
  end
end

function {x.slug}_opt_nargs
  switch $argv[1]
{nargs_cases}
    case '*'
      echo 0
  end
end

function {x.slug}_cmdpath
  set -l words (commandline -opc)
  set -e words[1]
  set -l curcmd {name}
  set -l toskip 0
  for word in $words
    if test $toskip -gt 0
      set toskip (math $toskip - 1)
      continue
    end
    switch $word
      case '-*'
        set toskip ({x.slug}_opt_nargs "$curcmd $word")
        continue
    end
    if contains -- $word ({x.slug}_subcmds $curcmd)
      set curcmd "$curcmd $word"
    end
  end
  echo $curcmd
end

function {x.slug}_using
  test ({x.slug}_cmdpath) = "$argv[1]"
end
"""

    @property
    def prologue(self) -> str:
        cases, nargs_cases = [], []
        for ctx in ContextTree(self.root_cmd, self.name):
            names = list(visible_subcommands(ctx.command))
            if names:
                cases.append(f"    case {_quote(ctx.command_path)}")
                cases.append(
                    "      printf '%s\\n' " + " ".join(_quote(n) for n in names)
                )
            # option values are skipped so they never count as subcommands
            for o in visible_options(ctx):
                nargs = compute_nargs(o)
                if nargs <= 0:
                    continue
                keys = " ".join(_quote(f"{ctx.command_path} {s}") for s in opt_strs(o))
                nargs_cases.append(f"    case {keys}")
                nargs_cases.append(f"      echo {nargs}")
        return self.PROLOGUE_FMT.format(
            x=self,
            name=_quote(self.name),
            cases="\n".join(cases),
            nargs_cases="\n".join(nargs_cases),
        )

    def _complete(self, ctx: click.Context, *args: str) -> str:
        cond = _quote(f"{self.slug}_using {_quote(ctx.command_path)}")
        return " ".join(("complete -c", _quote(self.name), "-n", cond) + args)

    def _option_lines(self, ctx: click.Context) -> t.Generator[str, None, None]:
        for o in visible_options(ctx):
            args: t.List[str] = []
            args += [f"-s {x[1:]}" for x in short_opts(o)]
            args += [f"-l {x[2:]}" for x in long_opts(o)]
            args += [f"-o {x[1:]}" for x in old_style_opts(o)]
            help_ = option_help(o)
            if help_:
                args.append(f"-d {_quote(help_)}")
            values = choices(o)
            if values:
                args.append("-r -f -a " + _quote(" ".join(values)))
            elif compute_nargs(o) > 0:
                args.append("-r")
            yield self._complete(ctx, *args)

    def cmd_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._option_lines(ctx)

    def group_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        for n, cmd in visible_subcommands(ctx.command).items():
            yield self._complete(
                ctx, "-f -a", _quote(n), "-d", _quote(command_help(cmd))
            )
        yield from self._option_lines(ctx)
