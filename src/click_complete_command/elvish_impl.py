import typing as t

import click

from ._common import (
    Completer,
    command_help,
    opt_strs,
    option_help,
    visible_options,
    visible_subcommands,
)


def _quote(s: str) -> str:
    return "'" + s.replace("'", "''") + "'"


class ElvishCompleter(Completer):
    FILE_NAME_FMT = "{name}.elv"

    PROLOGUE_FMT = """\
use str

set edit:completion:arg-completer[{name}] = {{|@words|
    fn cand {{|text desc|
        edit:complex-candidate $text &display=$text' '$desc
    }}
    var command = {name}
    for word $words[1..-1] {{
        if (str:has-prefix $word '-') {{
            break
        }}
        set command = $command';'$word
    }}
    var completions = ["""

    EPILOGUE = """\
    ]
    if (has-key $completions $command) {
        $completions[$command]
    }
}"""

    @property
    def prologue(self) -> str:
        return self.PROLOGUE_FMT.format(name=_quote(self.name))

    @property
    def epilogue(self) -> str:
        return self.EPILOGUE

    def _entry(
        self, ctx: click.Context, subcommands: t.Dict[str, click.Command]
    ) -> t.Generator[str, None, None]:
        yield f"        &{_quote(ctx.command_path.replace(' ', ';'))}= {{"
        for o in visible_options(ctx):
            for s in opt_strs(o):
                yield f"            cand {_quote(s)} {_quote(option_help(o))}"
        for n, cmd in subcommands.items():
            yield f"            cand {_quote(n)} {_quote(command_help(cmd))}"
        yield "        }"

    def cmd_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._entry(ctx, {})

    def group_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._entry(ctx, visible_subcommands(ctx.command))
