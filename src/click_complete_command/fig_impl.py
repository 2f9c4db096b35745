import json
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


class FigCompleter(Completer):
    """Completion spec for Fig.

    Fig reads a TypeScript module exporting a ``Fig.Spec`` object. The object
    is the JSON rendering of the whole command tree, so unlike the shell
    generators this one builds a nested structure instead of one block per
    command.
    """

    FILE_NAME_FMT = "{name}.ts"

    def _option_spec(self, o: click.Option) -> t.Dict[str, t.Any]:
        names = opt_strs(o)
        spec: t.Dict[str, t.Any] = {"name": names[0] if len(names) == 1 else names}
        help_ = option_help(o)
        if help_:
            spec["description"] = help_
        if is_repeatable(o):
            spec["isRepeatable"] = True
        if o.required:
            spec["isRequired"] = True
        nargs = compute_nargs(o)
        if nargs > 0:
            arg: t.Dict[str, t.Any] = {"name": o.name or names[0].lstrip("-")}
            values = choices(o)
            if values:
                arg["suggestions"] = values
            spec["args"] = arg if nargs == 1 else [arg] * nargs
        return spec

    def _arg_spec(self, a: click.Argument) -> t.Dict[str, t.Any]:
        spec: t.Dict[str, t.Any] = {"name": a.human_readable_name}
        if not a.required:
            spec["isOptional"] = True
        if compute_nargs(a) == -1:
            spec["isVariadic"] = True
        values = choices(a)
        if values:
            spec["suggestions"] = values
        return spec

    def _command_spec(self, ctx: click.Context) -> t.Dict[str, t.Any]:
        spec: t.Dict[str, t.Any] = {"name": ctx.info_name}
        description = command_help(ctx.command)
        if description:
            spec["description"] = description

        subcommands = [
            self._command_spec(click.Context(cmd, info_name=n, parent=ctx))
            for n, cmd in visible_subcommands(ctx.command).items()
        ]
        if subcommands:
            spec["subcommands"] = subcommands

        options = [self._option_spec(o) for o in visible_options(ctx)]
        if options:
            spec["options"] = options

        args = [self._arg_spec(a) for a in positional_args(ctx)]
        if args:
            spec["args"] = args[0] if len(args) == 1 else args
        return spec

    def _gen_completion(self) -> t.Generator[str, None, None]:
        root_ctx = click.Context(self.root_cmd, info_name=self.name)
        body = json.dumps(self._command_spec(root_ctx), indent=2, ensure_ascii=False)
        yield f"const completion: Fig.Spec = {body};"
        yield ""
        yield "export default completion;"
