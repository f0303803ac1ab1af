"""Shared test fixtures — a deterministic fake analyzer, a scripted UI, sample sources."""

from __future__ import annotations

import re
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from lintstep.corrector.base import CollaboratorFailure
from lintstep.diagnostics.catalog import DiagnosticCatalog
from lintstep.files import read_source
from lintstep.session.controller import SessionStats, Step

STRING_LITERALS = "Style/StringLiterals"
TRAILING_WHITESPACE = "Layout/TrailingWhitespace"
METHOD_NAME = "Naming/MethodName"

_DOUBLE_QUOTED = re.compile(r'"([^"#\\]*)"')
_TRAILING = re.compile(r"[ \t]+$")
_BAD_METHOD = re.compile(r"^\s*def ([A-Z]\w*)")
_DISABLE = "# rubocop:disable "
_ENABLE = "# rubocop:enable "


def _offense(rule: str, line: int, column: int, length: int, **extra: Any) -> Dict[str, Any]:
    return {
        "cop_name": rule,
        "message": f"{rule} offense",
        "severity": "convention",
        "correctable": rule != METHOD_NAME,
        "location": {"start_line": line, "start_column": column, "length": length},
        **extra,
    }


def analyze(text: str) -> List[Dict[str, Any]]:
    """Report offenses for the three toy rules, in line then column order.

    Honors ``# rubocop:disable Rule`` at the end of a line and
    ``# rubocop:disable`` / ``# rubocop:enable`` comment lines around a block.
    """
    offenses: List[Tuple[int, int, Dict[str, Any]]] = []
    blocked: set = set()
    for line_no, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if stripped.startswith(_DISABLE):
            blocked.add(stripped[len(_DISABLE):].strip())
            continue
        if stripped.startswith(_ENABLE):
            blocked.discard(stripped[len(_ENABLE):].strip())
            continue
        silenced = set(blocked)
        if _DISABLE in line:
            code, _, rule = line.partition(_DISABLE)
            silenced.add(rule.strip())
            line = code.rstrip()

        found = []
        for m in _DOUBLE_QUOTED.finditer(line):
            found.append((STRING_LITERALS, m.start() + 1, len(m.group(0))))
        m = _TRAILING.search(line)
        if m:
            found.append((TRAILING_WHITESPACE, m.start() + 1, len(m.group(0))))
        m = _BAD_METHOD.search(line)
        if m:
            found.append((METHOD_NAME, m.start(1) + 1, len(m.group(1))))
        for rule, column, length in found:
            if rule not in silenced:
                offenses.append((line_no, column, _offense(rule, line_no, column, length)))
    offenses.sort(key=lambda o: (o[0], o[1]))
    return [o[2] for o in offenses]


def correct(text: str, rule: str) -> str:
    """Whole-file correction for one rule, like a real autocorrector."""
    out = []
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\n")
        ending = line[len(body):]
        if rule == STRING_LITERALS:
            body = _DOUBLE_QUOTED.sub(lambda m: f"'{m.group(1)}'", body)
        elif rule == TRAILING_WHITESPACE:
            body = _TRAILING.sub("", body)
        out.append(body + ending)
    return "".join(out)


class FakeApplier:
    """CorrectionApplier double over real files, recording every call."""

    def __init__(self, failing_rules: Tuple[str, ...] = (), fail_rescan: bool = False) -> None:
        self.calls: List[Tuple[str, str, int]] = []
        self.rescans: List[str] = []
        self._failing_rules = failing_rules
        self._fail_rescan = fail_rescan

    def apply(self, file_path: str, rule_id: str, target_line: int) -> Optional[str]:
        self.calls.append((file_path, rule_id, target_line))
        if rule_id in self._failing_rules:
            raise CollaboratorFailure(f"unknown rule {rule_id}")
        original = read_source(file_path)
        corrected = correct(original, rule_id)
        return None if corrected == original else corrected

    def rescan(self, file_path: str) -> List[Dict[str, Any]]:
        self.rescans.append(file_path)
        if self._fail_rescan:
            raise CollaboratorFailure("analyzer crashed")
        return analyze(read_source(file_path))

    def collection(self, *paths: Path) -> Dict[str, Any]:
        return {
            "files": [
                {"path": str(p), "offenses": analyze(p.read_text(encoding="utf-8"))}
                for p in paths
            ]
        }


class FakeUI:
    """SessionUI double returning scripted action tokens."""

    def __init__(self, responses: Optional[List[str]] = None) -> None:
        self._responses = list(responses or [])
        self.steps: List[Step] = []
        self.prompts = 0
        self.errors: List[Exception] = []
        self.patches: List[Any] = []
        self.stats: Optional[SessionStats] = None

    def show_step(self, step: Step) -> None:
        self.steps.append(step)

    def read_action(self, step: Step) -> str:
        self.prompts += 1
        return self._responses.pop(0) if self._responses else "skip"

    def show_patch(self, window) -> None:
        self.patches.append(window)

    def show_error(self, error) -> None:
        self.errors.append(error)

    def show_stats(self, stats: SessionStats) -> None:
        self.stats = stats


def write_source(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


@pytest.fixture
def applier() -> FakeApplier:
    return FakeApplier()


@pytest.fixture
def strings_file(tmp_path: Path) -> Path:
    """Three string literal offenses on lines 4, 5 and 6."""
    return write_source(tmp_path / "strings.rb", """\
        # frozen_string_literal: true

        def foo
          x = "first"
          y = "second"
          z = "third"
          puts x, y, z
        end
    """)


@pytest.fixture
def mixed_file(tmp_path: Path) -> Path:
    """String literals, trailing whitespace and a non-correctable method name."""
    return write_source(tmp_path / "mixed.rb", (
        "# frozen_string_literal: true\n"
        "\n"
        "def Foo\n"
        "  a = \"one\"   \n"
        "  b = 2\n"
        "end\n"
    ))


@pytest.fixture
def other_file(tmp_path: Path) -> Path:
    return write_source(tmp_path / "other.rb", """\
        puts "other"
        puts "again"
    """)


@pytest.fixture
def make_catalog(applier: FakeApplier):
    def _make(*paths: Path, unsafe_rules=()) -> DiagnosticCatalog:
        return DiagnosticCatalog.parse(applier.collection(*paths), unsafe_rules=unsafe_rules)
    return _make


_FAKE_RUBOCOP = """\
#!/bin/sh
# Stand-in analyzer: one Style/StringLiterals offense while the file has a double quote.
for last; do :; done
if [ "$FAKE_RUBOCOP_EXIT" = "2" ]; then
  echo "boom" >&2
  exit 2
fi
if [ "$1" = "--autocorrect-all" ]; then
  sed "s/\\"/'/g" "$last" > "$last.tmp" && mv "$last.tmp" "$last"
  exit 0
fi
if grep -q '"' "$last"; then
  printf '{"files":[{"path":"%s","offenses":[{"cop_name":"Style/StringLiterals","message":"Prefer single-quoted strings.","severity":"convention","correctable":true,"location":{"start_line":1,"start_column":6,"length":7}}]}]}' "$last"
  exit 1
fi
printf '{"files":[{"path":"%s","offenses":[]}]}' "$last"
"""


@pytest.fixture
def fake_rubocop(tmp_path: Path) -> Path:
    """Executable shell script speaking the analyzer's CLI contract."""
    script = tmp_path / "bin" / "fake-rubocop"
    script.parent.mkdir()
    script.write_text(_FAKE_RUBOCOP)
    script.chmod(0o755)
    return script


@pytest.fixture
def hello_file(tmp_path: Path) -> Path:
    return write_source(tmp_path / "hello.rb", 'puts "hello"\n')


@pytest.fixture
def sample_collection() -> Dict[str, Any]:
    return {
        "files": [
            {
                "path": "app/a.rb",
                "offenses": [
                    _offense(STRING_LITERALS, 3, 7, 5),
                    _offense(TRAILING_WHITESPACE, 9, 12, 2),
                ],
            },
            {"path": "app/b.rb", "offenses": []},
            {
                "path": "app/c.rb",
                "offenses": [
                    {
                        "rule_id": METHOD_NAME,
                        "message": "Use snake_case for method names.",
                        "severity": "convention",
                        "correctable": False,
                        "location": {"start_line": 1, "start_column": 5, "length": 3},
                    },
                ],
            },
        ]
    }
