import io
import tarfile
from typing import Dict, Optional

import httpx
import pytest


def make_tarball(
    files: Dict[str, str],
    root: str = 'repo-HEAD',
    leading_slash: bool = False,
    symlinks: Optional[Dict[str, str]] = None
) -> bytes:
    """Build a gzip tarball whose entries sit under one synthetic root directory."""

    buffer = io.BytesIO()
    prefix = f"/{root}" if leading_slash else root
    with tarfile.open(fileobj=buffer, mode='w:gz') as archive:
        root_info = tarfile.TarInfo(prefix + '/')
        root_info.type = tarfile.DIRTYPE
        root_info.mode = 0o755
        archive.addfile(root_info)

        directories = set()
        for path in files:
            parts = path.split('/')[:-1]
            for i in range(1, len(parts) + 1):
                directories.add('/'.join(parts[:i]))

        for directory in sorted(directories):
            info = tarfile.TarInfo(f"{prefix}/{directory}/")
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            archive.addfile(info)

        for path, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(f"{prefix}/{path}")
            info.size = len(data)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(data))

        for path, link in (symlinks or {}).items():
            info = tarfile.TarInfo(f"{prefix}/{path}")
            info.type = tarfile.SYMTYPE
            info.linkname = link
            archive.addfile(info)

    return buffer.getvalue()


def tarball_transport(body: bytes, status_code: int = 200, seen: Optional[list] = None) -> httpx.MockTransport:
    """Transport answering every request with ``body``."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, content=body)

    return httpx.MockTransport(handler)


FIXTURE_FILES = {
    'README.md': '# readme',
    'src/index.js': 'console.log(1)',
    '.claude/x.json': '{}',
    'CLAUDE.md': '# claude',
}


@pytest.fixture
def repo_tarball() -> bytes:
    return make_tarball(FIXTURE_FILES)


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    """Point the system temp dir at a per-test directory."""

    scratch = tmp_path / 'scratch'
    scratch.mkdir()
    monkeypatch.setattr('tempfile.tempdir', str(scratch))
    return scratch
