import pytest

from wslinterop.completion import (
    CompletionBridge,
    CompletionCandidate,
    CompletionFunctionResolver,
    locate_tokens,
    resolve_cursor,
)
from wslinterop.completion.protocol import disambiguate, parse_candidates

FRAMEWORK = "/usr/share/bash-completion/bash_completion"


@pytest.fixture
def completer(fake_bridge, memory_cache, io):
    memory_cache.put("ls", "_longopt")
    resolver = CompletionFunctionResolver(
        fake_bridge, memory_cache, framework=FRAMEWORK, io=io
    )
    return CompletionBridge(fake_bridge, resolver, framework=FRAMEWORK, io=io)


def _complete(completer, line, texts, cursor=None):
    return completer.complete(
        line, locate_tokens(line, texts), len(line) if cursor is None else cursor
    )


def test_parse_candidates_groups_case_variants():
    assert parse_candidates("-a\n-A\n--all\n--almost-all\n\n-a\n") == [
        "--all",
        "--almost-all",
        "-a",
        "-A",
    ]


def test_parse_candidates_sorts_lowercase_first():
    assert parse_candidates("B\nb\nA\na\n") == ["a", "A", "b", "B"]


def test_disambiguate_marks_case_variants():
    candidates = [
        CompletionCandidate(text, text) for text in parse_candidates("Ab\naB\nab\n")
    ]

    assert disambiguate(candidates) == [
        CompletionCandidate("ab", "ab"),
        CompletionCandidate("aB", "aB "),
        CompletionCandidate("Ab", "Ab  "),
    ]


def test_disambiguate_leaves_distinct_candidates_alone():
    candidates = [CompletionCandidate("-a", "-a"), CompletionCandidate("-b", "-b")]

    assert disambiguate(candidates) == candidates


def test_candidates_for_partial_option(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "-a\n-A\n--all\n--almost-all\n")

    assert _complete(completer, "ls -", ["ls", "-"]) == [
        CompletionCandidate("--all", "--all"),
        CompletionCandidate("--almost-all", "--almost-all"),
        CompletionCandidate("-a", "-a"),
        CompletionCandidate("-A", "-A "),
    ]


def test_completion_request(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "-a\n")

    _complete(completer, "ls -", ["ls", "-"])

    assert len(fake_bridge.calls) == 1
    assert fake_bridge.calls[0].words == (
        f". {FRAMEWORK} 2>/dev/null;",
        "__load_completion ls 2>/dev/null;",
        "COMP_LINE='ls -';",
        "COMP_WORDS=(ls -);",
        "COMP_CWORD=1;",
        "COMP_POINT=4;",
        'bind "set completion-ignore-case on" 2>/dev/null;',
        "_longopt",
        "ls",
        "-",
        "ls",
        "2>/dev/null;",
        "IFS=$'\\n';",
        'echo "${COMPREPLY[*]}"',
    )


def test_completion_request_for_new_word(completer, fake_bridge):
    _complete(completer, "ls -a ", ["ls", "-a"])

    words = fake_bridge.calls[0].words
    assert "COMP_WORDS=(ls -a '');" in words
    assert "COMP_CWORD=2;" in words
    assert "COMP_POINT=6;" in words
    assert words[7:12] == ("_longopt", "ls", "''", "-a", "2>/dev/null;")


def test_unregistered_command_uses_resolved_function(fake_bridge, io, memory_cache):
    resolver = CompletionFunctionResolver(
        fake_bridge, memory_cache, framework=FRAMEWORK, io=io
    )
    completer = CompletionBridge(fake_bridge, resolver, framework=FRAMEWORK, io=io)
    fake_bridge.respond("complete -p", "", returncode=1)

    _complete(completer, "sed ", ["sed"])

    assert len(fake_bridge.calls) == 2
    assert "_minimal" in fake_bridge.calls[1].words


def test_option_value_keeps_option_prefix(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "always\nauto\nnever\n")

    assert _complete(completer, "ls --color=a", ["ls", "--color=a"]) == [
        CompletionCandidate("--color=always", "always"),
        CompletionCandidate("--color=auto", "auto"),
        CompletionCandidate("--color=never", "never"),
    ]


def test_words_present_elsewhere_are_excluded(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "-a\n-A\n-l\n")

    assert _complete(completer, "ls -a -l -", ["ls", "-a", "-l", "-"]) == [
        CompletionCandidate("-A", "-A"),
    ]


def test_word_being_edited_is_not_excluded(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "-a\n")

    assert _complete(completer, "ls -a", ["ls", "-a"]) == [
        CompletionCandidate("-a", "-a"),
    ]


def test_candidates_are_escaped_for_the_command_line(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "Program Files\nfoo;bar\n")

    assert _complete(completer, "ls ", ["ls"]) == [
        CompletionCandidate("foo`;bar", "foo`;bar"),
        CompletionCandidate("'Program Files'", "'Program Files'"),
    ]


def test_no_candidates(completer, fake_bridge):
    fake_bridge.respond("COMPREPLY", "\n")

    assert _complete(completer, "ls -z", ["ls", "-z"]) == []


def test_quoted_path_is_completed_as_one_word(completer, fake_bridge):
    line = "ls '/mnt/c/Program Files'/Win"
    fake_bridge.respond("COMPREPLY", "/mnt/c/Program Files/Windows\n")

    candidates = _complete(completer, line, ["ls", "'/mnt/c/Program Files'", "/Win"])

    words = fake_bridge.calls[0].words
    assert "COMP_WORDS=(ls '/mnt/c/Program Files/Win');" in words
    assert "COMP_CWORD=1;" in words
    assert candidates == [
        CompletionCandidate(
            "'/mnt/c/Program Files/Windows'", "'/mnt/c/Program Files/Windows'"
        )
    ]


def test_build_request_serializes_once(completer):
    context = resolve_cursor("ls -", locate_tokens("ls -", ["ls", "-"]), 4)

    request = completer.build_request(context, "_longopt")

    assert request.serialize().endswith(
        "_longopt ls - ls 2>/dev/null; IFS=$'\\n'; echo \"${COMPREPLY[*]}\""
    )
