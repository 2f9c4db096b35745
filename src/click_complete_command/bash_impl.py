import shlex
import typing as t

import click

from ._common import (
    Completer,
    choices,
    compute_nargs,
    opt_strs,
    slamopts,
    visible_options,
    visible_subcommands,
)


class BashCompleter(Completer):
    """Static completions for bash (4.0 or later, for associative arrays).

    Each command path gets an entry in a handful of associative arrays. A
    single completion function walks the words before the cursor through
    those tables to find the current command and any pending option value.
    """

    FILE_NAME_FMT = "{name}.bash"

    TABLES = ("subcmds", "opts", "opt_nargs", "slamopts", "opt_choices")

    EPILOGUE_FMT = """
{x.slug}_parse_line() {{
  local cword=$1
  local curcmd="{x.name}" curopt="" word opt
  local i toskip=0 nomoreopts=0
  for ((i = 1; i < cword; i++)); do
    word=${{COMP_WORDS[i]}}

    if [[ $word == -- ]]; then
      curopt=""
      nomoreopts=1
      continue
    fi

    if ((toskip > 0)); then
      toskip=$((toskip - 1))
      continue
    fi

    if ((nomoreopts == 0)) && [[ $word == -* ]]; then
      # a "slammed" option like `-Ftext` carries its own value
      for opt in ${{{x.slug}_slamopts["$curcmd"]}}; do
        if [[ $word != "$opt" && $word == "$opt"* ]]; then
          continue 2
        fi
      done
      curopt=$word
      toskip=${{{x.slug}_opt_nargs["$curcmd $word"]:-0}}
      continue
    fi

    for opt in ${{{x.slug}_subcmds["$curcmd"]}}; do
      if [[ $word == "$opt" ]]; then
        curcmd="$curcmd $word"
        continue 2
      fi
    done

    # unrecognized word, stop at the last known command
    break
  done
  ((toskip > 0)) || curopt=""
  printf '%s\\n' "$curcmd" "$curopt" "$toskip"
}}

{x.slug}_bash() {{
  local cur=${{COMP_WORDS[COMP_CWORD]}}
  local parsed curcmd curopt toskip values
  readarray -t parsed < <({x.slug}_parse_line "$COMP_CWORD")
  curcmd=${{parsed[0]}}
  curopt=${{parsed[1]}}
  toskip=${{parsed[2]}}

  COMPREPLY=()
  if ((toskip > 0)); then
    values=${{{x.slug}_opt_choices["$curcmd $curopt"]}}
    if [[ -n $values ]]; then
      COMPREPLY=($(compgen -W "$values" -- "$cur"))
    else
      compopt -o default
    fi
  elif [[ $cur == -* ]]; then
    COMPREPLY=($(compgen -W "${{{x.slug}_opts["$curcmd"]}}" -- "$cur"))
  else
    COMPREPLY=($(compgen -W "${{{x.slug}_subcmds["$curcmd"]}}" -- "$cur"))
  fi
}}

complete -F {x.slug}_bash {quoted_name}"""

    @property
    def prologue(self) -> str:
        return "".join(f"declare -A {self.slug}_{table}\n" for table in self.TABLES)

    @property
    def epilogue(self) -> str:
        return self.EPILOGUE_FMT.format(x=self, quoted_name=shlex.quote(self.name))

    def _entry(self, table: str, key: str, value: t.Any) -> str:
        return f'{self.slug}_{table}["{key}"]="{value}"'

    def _tables(
        self, ctx: click.Context, subcommands: t.Iterable[str]
    ) -> t.Generator[str, None, None]:
        path = ctx.command_path
        options = visible_options(ctx)
        yield self._entry("subcmds", path, " ".join(subcommands))
        yield self._entry(
            "opts", path, " ".join(s for o in options for s in opt_strs(o))
        )
        yield self._entry(
            "slamopts", path, " ".join(s for o in options for s in slamopts(o))
        )
        for o in options:
            nargs = compute_nargs(o)
            values = " ".join(choices(o))
            for s in opt_strs(o):
                yield self._entry("opt_nargs", f"{path} {s}", nargs)
                if values:
                    yield self._entry("opt_choices", f"{path} {s}", values)

    def cmd_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._tables(ctx, ())

    def group_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._tables(ctx, visible_subcommands(ctx.command))
