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


class PowerShellCompleter(Completer):
    FILE_NAME_FMT = "_{name}.ps1"

    PROLOGUE_FMT = """\
using namespace System.Management.Automation
using namespace System.Management.Automation.Language

Register-ArgumentCompleter -Native -CommandName {name} -ScriptBlock {{
    param($wordToComplete, $commandAst, $cursorPosition)

    $commandElements = $commandAst.CommandElements
    $command = @(
        {name}
        for ($i = 1; $i -lt $commandElements.Count; $i++) {{
            $element = $commandElements[$i]
            if ($element -isnot [StringConstantExpressionAst] -or
                $element.StringConstantType -ne [StringConstantType]::BareWord -or
                $element.Value.StartsWith('-') -or
                $element.Value -eq $wordToComplete) {{
                break
            }}
            $element.Value
        }}) -join ';'

    $completions = @(switch ($command) {{"""

    EPILOGUE = """\
    })

    $completions.Where{ $_.CompletionText -like "$wordToComplete*" } |
        Sort-Object -Property ListItemText
}"""

    @property
    def prologue(self) -> str:
        return self.PROLOGUE_FMT.format(name=_quote(self.name))

    @property
    def epilogue(self) -> str:
        return self.EPILOGUE

    def _result(self, text: str, kind: str, tooltip: str) -> str:
        # CompletionResult rejects an empty tooltip
        return (
            f"[CompletionResult]::new({_quote(text)}, {_quote(text.lstrip('-'))}, "
            f"[CompletionResultType]::{kind}, {_quote(tooltip or text)})"
        )

    def _case(
        self, ctx: click.Context, subcommands: t.Dict[str, click.Command]
    ) -> t.Generator[str, None, None]:
        yield f"        {_quote(ctx.command_path.replace(' ', ';'))} {{"
        for o in visible_options(ctx):
            for s in opt_strs(o):
                yield "            " + self._result(s, "ParameterName", option_help(o))
        for n, cmd in subcommands.items():
            yield "            " + self._result(n, "ParameterValue", command_help(cmd))
        yield "            break"
        yield "        }"

    def cmd_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._case(ctx, {})

    def group_completer(self, ctx: click.Context) -> t.Generator[str, None, None]:
        yield from self._case(ctx, visible_subcommands(ctx.command))
