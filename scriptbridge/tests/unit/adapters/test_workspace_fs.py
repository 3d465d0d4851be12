from scriptbridge.adapters.workspace_fs import FilesystemWorkspace


def test_write_bytes_creates_parents(tmp_path):
    workspace = FilesystemWorkspace([tmp_path])
    target = tmp_path / "a" / "b" / "c.bin"

    workspace.write_bytes(target, b"\x00\x01")

    assert target.read_bytes() == b"\x00\x01"


def test_watch_close_is_idempotent(tmp_path):
    workspace = FilesystemWorkspace()
    watch = workspace.watch_folder(tmp_path)
    watch.close()
    watch.close()
    assert watch.closed
    assert workspace.watches == [watch]


def test_open_file_uses_opener(tmp_path):
    opened = []
    FilesystemWorkspace(opener=opened.append).open_file(tmp_path / "x.png")
    assert opened == [tmp_path / "x.png"]
