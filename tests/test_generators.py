import json

import click
import pytest

from click_complete_command import (
    BashCompleter,
    ElvishCompleter,
    FigCompleter,
    FishCompleter,
    PowerShellCompleter,
    Shell,
    ZshCompleter,
    generate_completion,
)


@pytest.mark.parametrize(
    "shell, expected",
    [
        (Shell.BASH, "mycli.bash"),
        (Shell.ELVISH, "mycli.elv"),
        (Shell.FIG, "mycli.ts"),
        (Shell.FISH, "mycli.fish"),
        (Shell.POWERSHELL, "_mycli.ps1"),
        (Shell.ZSH, "_mycli"),
    ],
)
def test_file_names(shell: Shell, expected: str) -> None:
    assert shell.to_generator().file_name("mycli") == expected


@pytest.mark.parametrize("shell", Shell.variants(), ids=str)
def test_scripts_cover_visible_commands(cli: click.Group, shell: Shell) -> None:
    script = shell.to_generator()(cli).gen_completion()

    for word in ("mycli", "deploy", "config", "get", "set", "verbose", "dry-run"):
        assert word in script
    assert "secret" not in script
    assert "token" not in script


def test_bash(cli: click.Group) -> None:
    script = BashCompleter(cli).gen_completion()

    assert script.startswith("declare -A __mycli__comp_subcmds\n")
    assert '__mycli__comp_subcmds["mycli"]="deploy config"' in script
    assert '__mycli__comp_subcmds["mycli config"]="get set"' in script
    assert '__mycli__comp_subcmds["mycli deploy"]=""' in script
    assert '__mycli__comp_slamopts["mycli"]="-F"' in script
    assert '__mycli__comp_opt_nargs["mycli --format"]="1"' in script
    assert '__mycli__comp_opt_nargs["mycli -v"]="0"' in script
    assert '__mycli__comp_opt_choices["mycli -F"]="json text"' in script
    assert script.endswith("complete -F __mycli__comp_bash mycli")


def test_bash_custom_name(cli: click.Group) -> None:
    script = BashCompleter(cli, command_name="my-tool").gen_completion()

    assert '__my_tool__comp_subcmds["my-tool"]="deploy config"' in script
    assert script.endswith("complete -F __my_tool__comp_bash my-tool")


def test_bash_name_with_dot(cli: click.Group) -> None:
    script = BashCompleter(cli, command_name="tool.py").gen_completion()

    assert "declare -A __tool_py__comp_subcmds\n" in script
    assert '__tool_py__comp_subcmds["tool.py"]="deploy config"' in script
    assert 'local curcmd="tool.py"' in script
    assert script.endswith("complete -F __tool_py__comp_bash tool.py")


def test_zsh_name_with_dot(cli: click.Group) -> None:
    script = ZshCompleter(cli, command_name="tool.py").gen_completion()

    assert "__tool_py__comp_cmd_tool_py() {" in script
    assert "__tool_py__comp_cmd_tool_py_config_get() {" in script
    assert "  compdef __tool_py__comp_cmd_tool_py tool.py" in script


def test_zsh(cli: click.Group) -> None:
    script = ZshCompleter(cli).gen_completion()

    assert script.startswith("#compdef mycli\n")
    assert "  compdef __mycli__comp_cmd_mycli mycli" in script
    assert '    "deploy:Deploy to a target."' in script
    assert '    "config") __mycli__comp_cmd_mycli_config ;;' in script
    assert "__mycli__comp_cmd_mycli_config_get() {" in script
    assert '"*-v[Increase verbosity.]"' in script
    assert '"(-F --format)-F+[Output format.]: :(json text)"' in script
    assert '"(-F --format)--format=[Output format.]: :(json text)"' in script
    assert '"(--help - :)--help[Show this message and exit.]"' in script
    assert '"1:TARGET:"' in script


def test_zsh_eager_exit_options(cli: click.Group) -> None:
    script = ZshCompleter(cli, options_causing_eager_exit=()).gen_completion()

    assert '"(--help)--help[Show this message and exit.]"' in script


def test_zsh_command_without_arguments() -> None:
    cmd = click.Command("bare", add_help_option=False)
    script = ZshCompleter(cmd).gen_completion()

    assert "__bare__comp_cmd_bare() {\n  _nothing\n}" in script


def test_fish(cli: click.Group) -> None:
    script = FishCompleter(cli).gen_completion()

    assert "    case 'mycli'\n      printf '%s\\n' 'deploy' 'config'" in script
    assert "    case 'mycli config'\n      printf '%s\\n' 'get' 'set'" in script
    assert (
        "complete -c 'mycli' -n '__mycli__comp_using \\'mycli\\'' "
        "-f -a 'deploy' -d 'Deploy to a target.'"
    ) in script
    assert (
        "complete -c 'mycli' -n '__mycli__comp_using \\'mycli\\'' "
        "-s F -l format -d 'Output format.' -r -f -a 'json text'"
    ) in script
    assert (
        "complete -c 'mycli' -n '__mycli__comp_using \\'mycli deploy\\'' "
        "-l dry-run -d 'Only print what would happen.'"
    ) in script


def test_fish_skips_option_values(cli: click.Group) -> None:
    script = FishCompleter(cli).gen_completion()

    assert "    case 'mycli -F' 'mycli --format'\n      echo 1" in script
    assert "    case '*'\n      echo 0" in script
    assert '        set toskip (__mycli__comp_opt_nargs "$curcmd $word")' in script
    # flags take no value and get no entry
    assert "'mycli --verbose'" not in script
    assert "'mycli deploy --dry-run'" not in script


def test_powershell(cli: click.Group) -> None:
    script = PowerShellCompleter(cli).gen_completion()

    assert "Register-ArgumentCompleter -Native -CommandName 'mycli' -ScriptBlock {" in script
    assert "        'mycli;config;get' {" in script
    assert (
        "[CompletionResult]::new('deploy', 'deploy', "
        "[CompletionResultType]::ParameterValue, 'Deploy to a target.')"
    ) in script
    assert (
        "[CompletionResult]::new('--verbose', 'verbose', "
        "[CompletionResultType]::ParameterName, 'Increase verbosity.')"
    ) in script


def test_powershell_quotes(cli: click.Group) -> None:
    script = PowerShellCompleter(cli, command_name="it's").gen_completion()

    assert "-CommandName 'it''s'" in script


def test_elvish(cli: click.Group) -> None:
    script = ElvishCompleter(cli).gen_completion()

    assert "set edit:completion:arg-completer['mycli'] = {|@words|" in script
    assert "        &'mycli;config'= {" in script
    assert "            cand 'get' 'Print a setting.'" in script
    assert "            cand '-F' 'Output format.'" in script


def _fig_spec(script: str) -> dict:
    prefix = "const completion: Fig.Spec = "
    suffix = ";\n\nexport default completion;"
    assert script.startswith(prefix)
    assert script.endswith(suffix)
    return json.loads(script[len(prefix) : -len(suffix)])


def test_fig(cli: click.Group) -> None:
    spec = _fig_spec(FigCompleter(cli).gen_completion())

    assert spec["name"] == "mycli"
    assert spec["description"] == "An example program."
    assert [s["name"] for s in spec["subcommands"]] == ["deploy", "config"]

    verbose, fmt, help_ = spec["options"]
    assert verbose == {
        "name": ["-v", "--verbose"],
        "description": "Increase verbosity.",
        "isRepeatable": True,
    }
    assert fmt["args"] == {"name": "fmt", "suggestions": ["json", "text"]}
    assert help_["name"] == "--help"

    deploy, config = spec["subcommands"]
    assert deploy["args"] == {"name": "TARGET"}
    config_set = config["subcommands"][1]
    assert config_set["name"] == "set"
    assert config_set["args"] == [{"name": "KEY"}, {"name": "VALUE"}]


def test_generate_completion_picks_shell_from_env(
    cli: click.Group, monkeypatch
) -> None:
    monkeypatch.setenv("SHELL", "/bin/zsh")

    assert generate_completion(cli) == ZshCompleter(cli).gen_completion()
    assert generate_completion(cli, "fish") == FishCompleter(cli).gen_completion()
