"""Unit tests for comment extractor adapters."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

from workflow_converter.adapters.comment_extractors import (
    COMMENTS_MODULE,
    DisabledCommentExtractor,
    ScriptCommentExtractor,
)
from workflow_converter.errors import ExternalToolError


class _FakeProcess:
    def __init__(self, returncode: int, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.returncode = returncode
        self._stdout = stdout
        self._stderr = stderr

    async def communicate(self, input: bytes | None = None) -> tuple[bytes, bytes]:
        del input
        return self._stdout, self._stderr


def test_script_extractor_runs_comment_module(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, ...]] = []

    async def _fake_exec(*args: str, **kwargs: object) -> _FakeProcess:
        del kwargs
        calls.append(args)
        return _FakeProcess(0, stdout=b"# one\n# two\n")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _fake_exec)

    comments = asyncio.run(ScriptCommentExtractor().extract(Path("ci.yml")))

    assert comments == "# one\n# two\n"
    assert calls == [(sys.executable, "-m", COMMENTS_MODULE, "ci.yml")]


def test_script_extractor_failure_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _fake_exec(*args: str, **kwargs: object) -> _FakeProcess:
        del args, kwargs
        return _FakeProcess(1, stderr=b"MalformedMarkupError: bad")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _fake_exec)

    with pytest.raises(ExternalToolError, match="MalformedMarkupError: bad") as info:
        asyncio.run(ScriptCommentExtractor().extract(Path("ci.yml")))
    assert "exit code 1" in str(info.value)


def test_script_extractor_missing_interpreter() -> None:
    extractor = ScriptCommentExtractor(python="/nonexistent/python-for-tests")

    with pytest.raises(ExternalToolError, match="Unable to start"):
        asyncio.run(extractor.extract(Path("ci.yml")))


def test_disabled_extractor_returns_empty() -> None:
    assert asyncio.run(DisabledCommentExtractor().extract(Path("ci.yml"))) == ""


def test_script_extractor_requests_utf8_output(monkeypatch: pytest.MonkeyPatch) -> None:
    environments: list[object] = []

    async def _fake_exec(*args: str, **kwargs: object) -> _FakeProcess:
        del args
        environments.append(kwargs.get("env"))
        return _FakeProcess(0, stdout="# café\n".encode())

    monkeypatch.setenv("PYTHONIOENCODING", "latin-1")
    monkeypatch.setattr(asyncio, "create_subprocess_exec", _fake_exec)

    comments = asyncio.run(ScriptCommentExtractor().extract(Path("ci.yml")))

    assert comments == "# café\n"
    env = environments[0]
    assert isinstance(env, dict) and env["PYTHONIOENCODING"] == "utf-8"


def test_script_extractor_rejects_undecodable_output(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _fake_exec(*args: str, **kwargs: object) -> _FakeProcess:
        del args, kwargs
        return _FakeProcess(0, stdout=b"# caf\xe9\n")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _fake_exec)

    with pytest.raises(ExternalToolError, match="invalid UTF-8"):
        asyncio.run(ScriptCommentExtractor().extract(Path("ci.yml")))
