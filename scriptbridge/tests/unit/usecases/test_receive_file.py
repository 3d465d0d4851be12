import base64
from pathlib import Path
from typing import List

import pytest

from scriptbridge.adapters.notifier_log import LogNotifier
from scriptbridge.adapters.workspace_fs import FilesystemWorkspace
from scriptbridge.domain.errors import DecodeError, NoWorkspaceOpenError, UnsafePathError
from scriptbridge.domain.ports import UseCaseError
from scriptbridge.usecases.receive_file import ReceiveFile, decode_transfer

PNG = b"\x89PNG\r\n\x1a\n" + bytes(range(32))


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def test_writes_decoded_bytes_into_nested_folder(tmp_path):
    opened: List[Path] = []
    workspace = FilesystemWorkspace([tmp_path], opener=opened.append)
    notifier = LogNotifier()

    path = ReceiveFile(workspace, notifier)("screenshots/deep/shot.png", _b64(PNG))

    assert path == tmp_path / "screenshots" / "deep" / "shot.png"
    assert path.read_bytes() == PNG
    assert opened == [path]
    assert notifier.messages == ["Screenshot saved: screenshots/deep/shot.png"]


def test_overwrites_existing_file(tmp_path):
    (tmp_path / "a.png").write_bytes(b"old")
    ReceiveFile(FilesystemWorkspace([tmp_path]), LogNotifier())("a.png", _b64(b"new"))
    assert (tmp_path / "a.png").read_bytes() == b"new"


def test_no_workspace_writes_nothing(tmp_path):
    with pytest.raises(NoWorkspaceOpenError):
        ReceiveFile(FilesystemWorkspace(), LogNotifier())("a.png", _b64(PNG))


def test_invalid_base64(tmp_path):
    with pytest.raises(DecodeError) as info:
        ReceiveFile(FilesystemWorkspace([tmp_path]), LogNotifier())("a.png", "not*base64!")
    assert info.value.code == "DECODE_FAILED"
    assert not (tmp_path / "a.png").exists()


def test_path_outside_workspace_rejected(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    with pytest.raises(UnsafePathError):
        ReceiveFile(FilesystemWorkspace([root]), LogNotifier())("../escape.png", _b64(PNG))
    assert not (tmp_path / "escape.png").exists()


def test_write_failure_maps_to_save_failed(tmp_path):
    (tmp_path / "blocker").write_text("file, not a folder")
    with pytest.raises(UseCaseError) as info:
        ReceiveFile(FilesystemWorkspace([tmp_path]), LogNotifier())("blocker/a.png", _b64(PNG))
    assert info.value.code == "SAVE_FAILED"


def test_decode_ignores_line_breaks():
    wrapped = "\n".join(_b64(PNG)[i:i + 8] for i in range(0, len(_b64(PNG)), 8))
    assert decode_transfer("a.png", wrapped).content == PNG


def test_double_slash_name_stays_inside_workspace(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    outside = tmp_path / "outside" / "pwned.png"

    path = ReceiveFile(FilesystemWorkspace([root]), LogNotifier())(f"/{outside}", _b64(PNG))

    assert path == root.joinpath(*outside.parts[1:])
    assert path.read_bytes() == PNG
    assert not outside.exists()


@pytest.mark.parametrize(
    "name, relative",
    [("/screenshots/x.png", "screenshots/x.png"), ("shots/../x.png", "x.png")],
)
def test_rooted_and_dotted_names_land_under_workspace(tmp_path, name, relative):
    path = ReceiveFile(FilesystemWorkspace([tmp_path]), LogNotifier())(name, _b64(PNG))
    assert path == tmp_path.joinpath(*relative.split("/"))
    assert path.read_bytes() == PNG
