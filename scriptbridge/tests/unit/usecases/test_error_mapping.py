from scriptbridge.domain.errors import NoDevicesError
from scriptbridge.usecases.error_mapping import map_error


def test_use_case_errors_pass_through():
    err = NoDevicesError()
    assert map_error(err, default_code="X") is err


def test_timeout_maps_to_timeout_code():
    mapped = map_error(TimeoutError(), default_code="SEND_FAILED")
    assert mapped.code == "TIMEOUT"
    assert mapped.message == "Request timed out."


def test_os_error_includes_filename():
    exc = PermissionError(13, "Permission denied", "/w/a.png")
    mapped = map_error(exc, default_code="SAVE_FAILED", default_message="Failed to save file")
    assert mapped.code == "SAVE_FAILED"
    assert mapped.message == "Failed to save file: Permission denied (/w/a.png)"


def test_unexpected_error_uses_class_name_when_blank():
    mapped = map_error(RuntimeError(), default_code="UNEXPECTED")
    assert mapped.message == "Unexpected error: RuntimeError"
