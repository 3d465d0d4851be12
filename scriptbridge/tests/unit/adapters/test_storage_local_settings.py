import pytest

from scriptbridge.adapters.storage_local import StorageLocal
from scriptbridge.viewmodels.settings_vm import SettingsVM


def test_user_settings_round_trip(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path / "cfg"))
    vm = SettingsVM()
    vm.server_port = 9500
    vm.host_address = "10.1.1.1"

    storage.save_user_settings(vm.to_dict())
    restored = SettingsVM()
    restored.apply_dict(storage.load_user_settings())

    assert restored.to_dict() == vm.to_dict()


def test_missing_file_returns_none(tmp_path):
    assert StorageLocal(root_dir=str(tmp_path)).load_user_settings() is None


def test_non_object_rejected(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path))
    (tmp_path / "user_settings.json").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        storage.load_user_settings()
