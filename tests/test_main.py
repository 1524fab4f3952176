from __future__ import annotations

import io
import re
import sys

import pytest
import yaml

from cmatch.config.palette import build_palette
from cmatch.highlight.render import LineRenderer
from cmatch.main import main, process_stream
from cmatch.utils.exceptions import InputError

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _run(argv, text):
    out = io.StringIO()
    code = main(argv, stdin=io.StringIO(text), stdout=out)
    return code, out.getvalue()


def test_plain_passthrough_without_color(tmp_path):
    code, out = _run(["-c", str(tmp_path / "none.yml"), "-r", "ERROR", "--color", "never"],
                     "ERROR: x\nplain\n\n")
    assert code == 0
    assert out == "ERROR: x\nplain\n\n"


def test_colors_matches_when_forced(tmp_path):
    code, out = _run(["-c", str(tmp_path / "none.yml"), "-r", "ERROR", "--color", "always"],
                     "ERROR: x\nplain\n")
    assert code == 0
    first, second = out.split("\n")[:2]
    assert "\x1b[" in first
    assert ANSI_RE.sub("", first) == "ERROR: x"
    assert second == "plain"


def test_config_file_drives_colors(write_config):
    path = write_config("""
        palette:
          - fg: "#ff0000"
            regexp: [ERROR]
        """)
    code, out = _run(["-c", path, "--color", "always"], "an ERROR here\n")
    assert code == 0
    assert "\x1b[" in out
    assert ANSI_RE.sub("", out) == "an ERROR here\n"


def test_unterminated_last_line_is_emitted(tmp_path):
    code, out = _run(["-c", str(tmp_path / "none.yml"), "--color", "never"], "a\nb")
    assert code == 0
    assert out == "a\nb\n"


def test_directory_config_fails_before_output(tmp_path, capsys):
    code, out = _run(["-c", str(tmp_path), "--color", "never"], "line\n")
    assert code == 1
    assert out == ""
    assert "unreadable" in capsys.readouterr().err


def test_invalid_regexp_fails(tmp_path, capsys):
    code, out = _run(["-c", str(tmp_path / "none.yml"), "-r", "("], "line\n")
    assert code == 1
    assert out == ""
    assert "invalid regexp '('" in capsys.readouterr().err


class _FailingInput(io.StringIO):
    def readline(self, *args):
        raise OSError("device gone")


def test_read_error_is_fatal(tmp_path, capsys):
    out = io.StringIO()
    code = main(["-c", str(tmp_path / "none.yml"), "--color", "never"], stdin=_FailingInput(), stdout=out)
    assert code == 1
    assert "device gone" in capsys.readouterr().err


def test_process_stream_raises_input_error():
    renderer = LineRenderer(build_palette(None), None)
    with pytest.raises(InputError):
        process_stream(_FailingInput(), io.StringIO(), renderer)


def test_process_stream_counts_lines():
    renderer = LineRenderer(build_palette(None), None)
    out = io.StringIO()
    assert process_stream(io.StringIO("x\ny\nz\n"), out, renderer) == 3
    assert out.getvalue() == "x\ny\nz\n"


class _ClosedPipe(io.StringIO):
    def write(self, s):
        raise BrokenPipeError()


def test_closed_output_pipe_ends_quietly(tmp_path):
    code = main(["-c", str(tmp_path / "none.yml"), "--color", "never"],
                stdin=io.StringIO("a\n"), stdout=_ClosedPipe())
    assert code == 0


def test_print_config(tmp_path):
    code, out = _run(["-c", str(tmp_path / "none.yml"), "-r", "foo", "--print-config"], "ignored\n")
    assert code == 0
    doc = yaml.safe_load(out)
    assert len(doc["palette"]) == 22
    assert doc["palette"][0] == {"bg": "#089400", "regexp": ["foo"]}
    assert doc["fallback_color"] == "#ff3333"


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as ei:
        main(["--version"])
    assert ei.value.code == 0
    assert capsys.readouterr().out.startswith("cmatch ")


class _CountingOutput(io.StringIO):
    def __init__(self):
        super().__init__()
        self.flushes = []

    def flush(self):
        self.flushes.append(self.getvalue())
        super().flush()


def test_each_line_is_flushed_as_written():
    renderer = LineRenderer(build_palette(None), None)
    out = _CountingOutput()
    process_stream(io.StringIO("one\ntwo\n"), out, renderer)
    assert out.flushes[:2] == ["one\n", "one\ntwo\n"]


def test_undecodable_bytes_pass_through(tmp_path, monkeypatch):
    raw_out = io.BytesIO()
    stdin = io.TextIOWrapper(io.BytesIO(b"\xff ERROR \xfe\nok\n"), encoding="utf-8")
    stdout = io.TextIOWrapper(raw_out, encoding="utf-8")
    monkeypatch.setattr(sys, "stdin", stdin)
    monkeypatch.setattr(sys, "stdout", stdout)
    code = main(["-c", str(tmp_path / "none.yml"), "-r", "ERROR", "--color", "never"])
    stdout.flush()
    assert code == 0
    assert raw_out.getvalue() == b"\xff ERROR \xfe\nok\n"
