from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from ..domain.naming import DEFAULT_SCREENSHOT_DIR
from ..domain.ports import UseCaseError
from ..usecases.capture_screen import validate_host, validate_port
from ..utils.logging import env_forces_debug

DEFAULT_SERVER_PORT = 9317


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    server_port: int = DEFAULT_SERVER_PORT
    host_address: str = ""
    announce_delay_ms: int = 1000
    rerun_delay_ms: int = 1000
    screenshot_dir: str = DEFAULT_SCREENSHOT_DIR
    api_key: str = ""


def _default_debug_logging() -> bool:
    return env_forces_debug()


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def server_port(self) -> int:
        return self.config.server_port

    @server_port.setter
    def server_port(self, value: Any) -> None:
        self.config = replace(self.config, server_port=self._coerce_port(value))

    @property
    def host_address(self) -> str:
        return self.config.host_address

    @host_address.setter
    def host_address(self, value: Any) -> None:
        self.config = replace(self.config, host_address=self._coerce_host(value))

    @property
    def announce_delay_ms(self) -> int:
        return self.config.announce_delay_ms

    @announce_delay_ms.setter
    def announce_delay_ms(self, value: Any) -> None:
        coerced = self._coerce_int("announce_delay_ms", value, allow_negative=False)
        self.config = replace(self.config, announce_delay_ms=coerced)

    @property
    def rerun_delay_ms(self) -> int:
        return self.config.rerun_delay_ms

    @rerun_delay_ms.setter
    def rerun_delay_ms(self, value: Any) -> None:
        coerced = self._coerce_int("rerun_delay_ms", value, allow_negative=False)
        self.config = replace(self.config, rerun_delay_ms=coerced)

    @property
    def screenshot_dir(self) -> str:
        return self.config.screenshot_dir

    @screenshot_dir.setter
    def screenshot_dir(self, value: Any) -> None:
        self.config = replace(self.config, screenshot_dir=self._coerce_dir(value))

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @api_key.setter
    def api_key(self, value: Any) -> None:
        self.config = replace(self.config, api_key=self._coerce_optional_str(value))

    # ------------------------------------------------------------------
    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_keys = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: Dict[str, Any] = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    def cmd_save(self) -> None:
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "server_port":
            return self._coerce_port(raw)
        if key == "host_address":
            return self._coerce_host(raw)
        if key in {"announce_delay_ms", "rerun_delay_ms"}:
            return self._coerce_int(key, raw, allow_negative=False)
        if key == "screenshot_dir":
            return self._coerce_dir(raw)
        if key == "api_key":
            return self._coerce_optional_str(raw)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_port(value: Any) -> int:
        try:
            return validate_port(value)
        except UseCaseError as exc:
            raise ValueError("server_port must be an integer between 1 and 65535.") from exc

    @staticmethod
    def _coerce_host(value: Any) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            return ""
        try:
            validate_host(text)
        except UseCaseError as exc:
            raise ValueError(f"host_address is not an IP address or host name: {text!r}") from exc
        return text

    @staticmethod
    def _coerce_dir(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("screenshot_dir must be a string path.")
        normalized = value.strip().strip("/")
        if ".." in normalized.split("/"):
            raise ValueError("screenshot_dir must stay inside the workspace.")
        return normalized or DEFAULT_SCREENSHOT_DIR

    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, allow_negative: bool = True) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if not allow_negative and coerced < 0:
            raise ValueError(f"{name} must be non-negative.")
        return coerced


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()
