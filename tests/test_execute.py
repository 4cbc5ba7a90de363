from __future__ import annotations

import os
import stat
import subprocess
from pathlib import Path

import pytest

from cosmic_core.errors import ExecuteProcessFailed
from cosmic_core.package import DistributionType, Package
from cosmic_core.pipeline import ExecutableVerifier, set_executable_permission


def _package(kind: DistributionType, paths: tuple[str, ...], args: tuple[str, ...] = ()) -> Package:
    return Package(
        name="tool",
        url="https://downloads.example.invalid/tool",
        version="1.0.0",
        hash="0" * 64,
        distribution_type=kind,
        executable_paths=paths,
        test_args=args,
    )


def _script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    os.chmod(path, 0o644)
    return path


def test_set_executable_permission_adds_all_execute_bits(tmp_path: Path) -> None:
    target = _script(tmp_path / "tool", "exit 0")
    set_executable_permission(target)
    mode = stat.S_IMODE(target.stat().st_mode)
    assert mode == 0o755


def test_execute_passes_test_args_and_runs_from_unpack_root(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _script(root / "k9s", '[ "$1" = version ] && [ "$2" = --short ] && [ -f sibling.txt ]')
    (root / "sibling.txt").write_text("resource", encoding="utf-8")

    ExecutableVerifier().execute(_package(DistributionType.ARCHIVE, ("/k9s",), ("version", "--short")), root)
    assert os.access(root / "k9s", os.X_OK)


def test_execute_binary_uses_downloaded_file(tmp_path: Path) -> None:
    artifact = _script(tmp_path / "dl" / "tool", "exit 0")
    ExecutableVerifier().execute(_package(DistributionType.BINARY, ("",)), artifact)
    assert os.access(artifact, os.X_OK)


def test_every_executable_must_exit_zero(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _script(root / "bin" / "a", "exit 0")
    _script(root / "bin" / "b", "exit 3")
    _script(root / "bin" / "c", "touch ran-c")

    with pytest.raises(ExecuteProcessFailed) as excinfo:
        ExecutableVerifier().execute(_package(DistributionType.ARCHIVE, ("bin/a", "bin/b", "bin/c")), root)
    assert excinfo.value.returncode == 3
    assert excinfo.value.path.endswith("b")
    assert not (root / "ran-c").exists()


def test_first_executable_failing_is_not_masked_by_later_success(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _script(root / "a", "exit 2")
    _script(root / "b", "exit 0")
    with pytest.raises(ExecuteProcessFailed):
        ExecutableVerifier().execute(_package(DistributionType.ARCHIVE, ("a", "b")), root)


def test_spawn_failure_is_execute_process_failed(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "garbage").write_bytes(b"\x00\x01\x02 not an executable format")
    with pytest.raises(ExecuteProcessFailed, match="failed to spawn"):
        ExecutableVerifier().execute(_package(DistributionType.ARCHIVE, ("garbage",)), root)


def test_timeout_is_execute_process_failed(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    root = tmp_path / "root"
    _script(root / "slow", "exit 0")

    def _fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs.get("timeout"))

    monkeypatch.setattr(subprocess, "run", _fake_run)
    with pytest.raises(ExecuteProcessFailed, match="timed out"):
        ExecutableVerifier(timeout_seconds=1).execute(_package(DistributionType.ARCHIVE, ("slow",)), root)


def test_missing_executable(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    with pytest.raises(ExecuteProcessFailed, match="does not exist") as excinfo:
        ExecutableVerifier().execute(_package(DistributionType.ARCHIVE, ("nope",)), root)
    assert excinfo.value.path == str((root / "nope").resolve())
    assert excinfo.value.returncode is None
