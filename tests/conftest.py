# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import hashlib
from datetime import date, datetime, time
from pathlib import Path, PurePosixPath

import pytest

from recsync.core.clock import Clock
from recsync.core.error import RemoteCommandError, RemoteDispatchError
from recsync.core.settings import Settings
from recsync.remote import RemoteExecutor


class FakeRemote(RemoteExecutor):
    """In-memory remote host recording every operation performed on it."""

    def __init__(self):
        self.dirs: set[PurePosixPath] = set()
        self.files: dict[PurePosixPath, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.unreachable = False
        self.fail_copy = False
        # applied to the content of every copied file
        self.corrupt_on_copy = None

    def listDirectory(self, directory: PurePosixPath) -> list[str]:
        self.calls.append(("list", str(directory)))
        self._checkReachable()
        if directory not in self.dirs:
            raise RemoteCommandError(f"ls: cannot access '{directory}'")
        return sorted(p.name for p in self.files if p.parent == directory)

    def digestFile(self, file: PurePosixPath) -> str:
        self.calls.append(("digest", str(file)))
        self._checkReachable()
        if file not in self.files:
            raise RemoteCommandError(f"sha256sum: {file}: No such file or directory")
        return f"{hashlib.sha256(self.files[file]).hexdigest()}  {file}\n"

    def copyTree(self, local_dir: Path, remote_dir: PurePosixPath) -> None:
        self.calls.append(("copy", str(local_dir)))
        self._checkReachable()
        if self.fail_copy:
            raise RemoteCommandError("scp: lost connection")

        target = remote_dir / local_dir.name
        self.dirs.add(target)
        for file in sorted(local_dir.rglob("*")):
            if file.is_file():
                content = file.read_bytes()
                if self.corrupt_on_copy:
                    content = self.corrupt_on_copy(content)
                self.files[target / file.relative_to(local_dir).as_posix()] = content

    def put(self, folder: PurePosixPath, files: dict[str, bytes]) -> None:
        self.dirs.add(folder)
        for name, content in files.items():
            self.files[folder / name] = content

    def callsOf(self, kind: str) -> list[str]:
        return [target for k, target in self.calls if k == kind]

    def _checkReachable(self) -> None:
        if self.unreachable:
            raise RemoteDispatchError("ssh: connect to host pi port 22: No route to host")


class FakeClock(Clock):
    """Clock with a fixed date that stops itself after a number of sleeps."""

    def __init__(self, today: date, max_sleeps: int = 1):
        super().__init__()
        self.current = today
        self.sleeps: list[float] = []
        self._max_sleeps = max_sleeps

    def now(self) -> datetime:
        return datetime.combine(self.current, time(12, 0, 0))

    def sleep(self, seconds: float) -> bool:
        self.sleeps.append(seconds)
        if len(self.sleeps) >= self._max_sleeps:
            self.stop()
        return self.isStopped()


def make_folder(root: Path, name: str, files: dict[str, bytes]) -> Path:
    folder = root / name
    folder.mkdir(parents=True)
    for file_name, content in files.items():
        (folder / file_name).write_bytes(content)
    return folder


@pytest.fixture
def settings(tmp_path) -> Settings:
    local_root = tmp_path / "recordings"
    local_root.mkdir()
    return Settings(
        local_root=local_root,
        remote_host="pi",
        remote_root=PurePosixPath("/srv/recordings"),
    )


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def env(settings, monkeypatch) -> Settings:
    """Export the deployment settings into the environment."""
    monkeypatch.setenv("LOCAL_DIR", str(settings.local_root))
    monkeypatch.setenv("REMOTE_HOST", settings.remote_host)
    monkeypatch.setenv("REMOTE_HOST_DIR", str(settings.remote_root))
    return settings
