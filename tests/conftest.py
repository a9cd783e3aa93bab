"""Shared fixtures for bore-cli tests."""

from __future__ import annotations

import io
import os
import sys
import tarfile
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import pytest

IS_WINDOWS = sys.platform == "win32"

# Script used as a fake bore client: echoes its arguments, exits with
# STUB_EXIT_CODE (default 7).
STUB_SCRIPT = """\
import os
import sys

print("stub-args:" + "|".join(sys.argv[1:]))
sys.stdout.flush()
sys.exit(int(os.environ.get("STUB_EXIT_CODE", "7")))
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch) -> Path:
    """Keep tests away from the real home directory and package bin/."""
    home = tmp_path_factory.mktemp("bore-cli-home")
    monkeypatch.setenv("BORE_CLI_HOME", str(home))
    for name in ("BORE_VERSION", "BORE_RELEASE_HOST", "BORE_REPOSITORY"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def standard_umask() -> Iterator[None]:
    """Run with umask 022 so created modes are predictable."""
    previous = os.umask(0o022)
    try:
        yield
    finally:
        os.umask(previous)


def build_tarball(members: Dict[str, bytes], mode: int = 0o755) -> bytes:
    """Build a gzip tarball in memory from a name -> content mapping."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def release_tarball() -> Callable[..., bytes]:
    """Factory for release archives shaped like the upstream ones."""

    def _make(
        binary: Optional[bytes] = b"bore-binary",
        companion: Optional[bytes] = b"bore-server-binary",
        windows: bool = False,
        extra: Optional[Dict[str, bytes]] = None,
    ) -> bytes:
        suffix = ".exe" if windows else ""
        members: Dict[str, bytes] = {}
        if binary is not None:
            members[f"bore{suffix}"] = binary
        if companion is not None:
            members[f"bore-server{suffix}"] = companion
        members["LICENSE"] = b"MIT"
        members.update(extra or {})
        return build_tarball(members)

    return _make


@pytest.fixture
def stub_script() -> str:
    return STUB_SCRIPT


@pytest.fixture
def stub_executable(tmp_path: Path) -> Path:
    """An executable that behaves like a minimal bore client (POSIX only)."""
    if IS_WINDOWS:
        pytest.skip("shebang stubs are POSIX only")
    path = tmp_path / "stub-bin" / "bore"
    path.parent.mkdir(parents=True)
    path.write_text(f"#!{sys.executable}\n{STUB_SCRIPT}", encoding="utf-8")
    path.chmod(0o755)
    return path


Route = Tuple[int, Dict[str, str], bytes]


@dataclass
class ArtifactServer:
    """Local HTTP server with a static route table."""

    base_url: str
    routes: Dict[str, Route] = field(default_factory=dict)
    requests: List[str] = field(default_factory=list)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def add(self, path: str, status: int = 200, body: bytes = b"", headers: Optional[Dict[str, str]] = None) -> None:
        self.routes[path] = (status, headers or {}, body)

    def add_redirect_chain(self, start: str, hops: int, final: str, status: int = 302) -> None:
        """Register `hops` redirects starting at `start` and ending at `final`."""
        current = start
        for i in range(hops):
            target = final if i == hops - 1 else f"/hop/{i + 1}"
            self.add(current, status=status, headers={"Location": target})
            current = target


@pytest.fixture
def artifact_server() -> Iterator[ArtifactServer]:
    state: Dict[str, ArtifactServer] = {}

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            server_state = state["server"]
            server_state.requests.append(self.path)
            status, headers, body = server_state.routes.get(self.path, (404, {}, b"not found"))
            self.send_response(status)
            for name, value in headers.items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args) -> None:  # noqa: A002
            return

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    host, port = httpd.server_address[:2]
    state["server"] = ArtifactServer(base_url=f"http://{host}:{port}")
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield state["server"]
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=5)
