from collections.abc import Sequence


def _ps_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def get_powershell_registration_script(
    commands: Sequence[str], program: str = "wslinterop"
) -> str:
    """
    Build the PowerShell snippet that makes each of commands run in WSL through
    `wslinterop run` and complete through `wslinterop _complete`.

    Usage: wslinterop import ls grep sed | Out-String | Invoke-Expression
    """

    command_list = ", ".join(_ps_string(command) for command in commands)
    program = _ps_string(program)

    return "\n".join(
        (
            "function global:Invoke-WslInteropCommand {",
            "    $command = $MyInvocation.InvocationName",
            "    if ($MyInvocation.ExpectingInput) {",
            f"        $input | & {program} run --stdin $command @args",
            "    } else {",
            f"        & {program} run $command @args",
            "    }",
            "}",
            "",
            f"@({command_list}) | ForEach-Object {{",
            "    Set-Alias -Name $_ -Value Invoke-WslInteropCommand"
            " -Scope Global -Force",
            "}",
            "",
            f"Register-ArgumentCompleter -Native -CommandName @({command_list})"
            " -ScriptBlock {",
            "    param($wordToComplete, $commandAst, $cursorPosition)",
            "    $line = $commandAst.Extent.Text",
            "    $cursor = $cursorPosition - $commandAst.Extent.StartOffset",
            "    $tokens = @($commandAst.CommandElements | ForEach-Object {"
            " $_.Extent.Text })",
            f"    & {program} _complete $line $cursor @tokens 2>$null |",
            "        ForEach-Object {",
            "            $text, $display = $_ -split \"`t\", 2",
            "            [System.Management.Automation.CompletionResult]::new(",
            "                $text, $display, 'ParameterName', $text",
            "            )",
            "        }",
            "}",
        )
    )
