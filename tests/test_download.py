from __future__ import annotations

from pathlib import Path

import pytest
import requests

from cosmic_core.errors import DownloadFailed
from cosmic_core.package import DistributionType, Package
from cosmic_core.pipeline import Downloader


def _package(url: str = "https://downloads.example.invalid/releases/tool_linux.tar.gz") -> Package:
    return Package(
        name="tool",
        url=url,
        version="1.0.0",
        hash="0" * 64,
        distribution_type=DistributionType.ARCHIVE,
        executable_paths=("tool",),
    )


class _FakeResponse:
    def __init__(self, status_code: int, chunks: list[bytes] | None = None, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.chunks = chunks or []
        self.error = error
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        del chunk_size
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True


class _FakeSession:
    def __init__(self, response: _FakeResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def test_download_streams_body_to_scoped_temp_file(tmp_path: Path) -> None:
    response = _FakeResponse(200, [b"abc", b"", b"def"])
    session = _FakeSession(response)
    path = Downloader(session, timeout_seconds=7, temp_root=tmp_path).download(_package())

    assert path.read_bytes() == b"abcdef"
    assert path.name == "tool_linux.tar.gz"
    assert path.parent.parent == tmp_path
    assert path.parent.name.startswith("cosmic-tool-download-")
    assert session.calls[0][1]["stream"] is True
    assert session.calls[0][1]["timeout"] == 7
    assert response.closed


def test_download_falls_back_to_package_name(tmp_path: Path) -> None:
    session = _FakeSession(_FakeResponse(200, [b"x"]))
    path = Downloader(session, temp_root=tmp_path).download(_package("https://downloads.example.invalid/"))
    assert path.name == "tool"


@pytest.mark.parametrize("url", ["not a url", "ftp://downloads.example.invalid/tool", "https:///tool"])
def test_download_rejects_malformed_urls(url: str, tmp_path: Path) -> None:
    session = _FakeSession(_FakeResponse(200))
    with pytest.raises(DownloadFailed, match="malformed package URL"):
        Downloader(session, temp_root=tmp_path).download(_package(url))
    assert session.calls == []


def test_download_non_200_is_terminal(tmp_path: Path) -> None:
    session = _FakeSession(_FakeResponse(404))
    with pytest.raises(DownloadFailed, match="status=404"):
        Downloader(session, temp_root=tmp_path).download(_package())
    assert len(session.calls) == 1


def test_download_interrupted_transfer(tmp_path: Path) -> None:
    response = _FakeResponse(200, [b"partial"], error=requests.ConnectionError("reset"))
    with pytest.raises(DownloadFailed, match="did not complete"):
        Downloader(_FakeSession(response), temp_root=tmp_path).download(_package())
    assert response.closed


def test_download_connection_error(tmp_path: Path) -> None:
    class _BrokenSession:
        def get(self, url: str, **kwargs):
            raise requests.ConnectionError("offline")

    with pytest.raises(DownloadFailed, match="could not download"):
        Downloader(_BrokenSession(), temp_root=tmp_path).download(_package())
