# src/testely/lib/config.py
import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Generic, List, Optional, Protocol, Type, TypeVar

from testely.lib.domain import LocationStrategy, SuffixConvention
from testely.lib.errors import ConfigurationError, ConfigurationNotSet

logger = logging.getLogger(__name__)

EXTENSION_CONFIG_KEY = "testely"
SETTINGS_FILE = ".testely.json"

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


class Chooser(Protocol):
    def choose(self, title: str, options: List[str]) -> Optional[str]: ...


@dataclass(frozen=True)
class ConfigChangeEvent:
    """Keys whose value changed in one reload of the settings file"""
    keys: FrozenSet[str]

    def affects(self, section: str) -> bool:
        return any(key == section or key.startswith(f"{section}.") for key in self.keys)


class ConfigStore:
    """Workspace-scoped settings persisted as flat JSON.

    Keys are "<section>.<key>", e.g. "testely.typescript.location".
    """

    def __init__(self, workspace_root: Path) -> None:
        self.settings_file = workspace_root / SETTINGS_FILE
        self._listeners: List[Callable[[ConfigChangeEvent], None]] = []
        self._valid = True
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        self._valid = True
        if not self.settings_file.exists():
            return {}
        try:
            data = json.loads(self.settings_file.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read {self.settings_file}: {e}")
            self._valid = False
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self.settings_file}: expected a JSON object")
            self._valid = False
            return {}
        return data

    def get(self, section: str, key: str) -> Optional[Any]:
        return self._data.get(f"{section}.{key}")

    def set(self, section: str, key: str, value: Any) -> None:
        if not self._valid:
            raise ConfigurationError(
                f"Refusing to overwrite unreadable settings file {self.settings_file}"
            )
        full_key = f"{section}.{key}"
        data = {**self._data, full_key: value}
        logger.debug(f"Writing {full_key}={value!r} to {self.settings_file}")
        try:
            self.settings_file.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n")
        except OSError as e:
            raise ConfigurationError(f"Failed to write {self.settings_file}: {e}") from e
        self._data = data

    def on_change(self, listener: Callable[[ConfigChangeEvent], None]) -> None:
        self._listeners.append(listener)

    def reload(self) -> ConfigChangeEvent:
        """Re-read the settings file and notify listeners about changed keys"""
        old = self._data
        self._data = self._read()
        changed = frozenset(
            key for key in set(old) | set(self._data) if old.get(key) != self._data.get(key)
        )
        event = ConfigChangeEvent(keys=changed)
        if changed:
            logger.debug(f"Settings changed: {sorted(changed)}")
            for listener in self._listeners:
                listener(event)
        return event


class ConfigValue(Generic[T]):
    """A single setting, cached until renewed.

    An environment variable named after the key (TESTELY_TYPESCRIPT_LOCATION
    for testely / typescript.location) takes precedence over the store.
    """

    def __init__(self, store: ConfigStore, section: str, key: str) -> None:
        self.store = store
        self.section = section
        self.key = key
        self.value: Optional[T] = self._get_config_value()

    @property
    def env_var(self) -> str:
        return f"{self.section}_{self.key}".replace(".", "_").upper()

    def _get_config_value(self) -> Optional[T]:
        if env_value := os.getenv(self.env_var):
            return env_value  # type: ignore[return-value]
        return self.store.get(self.section, self.key)

    def renew(self) -> None:
        self.value = self._get_config_value()

    def get(self) -> Optional[T]:
        return self.value

    def get_key(self) -> str:
        return f"{self.section}.{self.key}"

    def set(self, value: T) -> None:
        self.store.set(self.section, self.key, value)
        self.value = value


class OptionConfigValue(ConfigValue[str]):
    """A setting restricted to a fixed set of string options"""

    def __init__(self, store: ConfigStore, section: str, key: str, options: List[str]) -> None:
        self.options = options
        super().__init__(store, section, key)

    def _get_config_value(self) -> Optional[str]:
        value = super()._get_config_value()
        if value is not None and value not in self.options:
            logger.warning(f"Ignoring invalid value {value!r} for {self.get_key()}")
            return None
        return value


class RequiredOptionConfigValue(OptionConfigValue):
    """An option setting that prompts the user when no value is stored.

    Gives up with ConfigurationNotSet after `max_attempts` dismissed prompts.
    """

    def __init__(
        self,
        store: ConfigStore,
        section: str,
        key: str,
        options: List[str],
        prompt: str,
        *,
        chooser: Chooser,
        max_attempts: int = 3
    ) -> None:
        super().__init__(store, section, key, options)
        self.prompt = prompt
        self.chooser = chooser
        self.max_attempts = max_attempts

    def get(self) -> str:
        value = super().get()
        attempts = 0

        while value is None and attempts < self.max_attempts:
            logger.info(f"No value found for {self.get_key()}, prompting user...")
            attempts += 1
            value = self.chooser.choose(self.prompt, self.options)

            if value is not None:
                logger.info(f"Setting {self.get_key()} to {value}")
                self.set(value)

        if value is None:
            raise ConfigurationNotSet(f"No value selected for {self.get_key()}")
        return value


def _option_value(enum_type: Type[E], store: ConfigStore, section: str, key: str,
                  prompt: str, chooser: Chooser) -> RequiredOptionConfigValue:
    return RequiredOptionConfigValue(
        store, section, key, [member.value for member in enum_type], prompt, chooser=chooser
    )


class TypescriptConfiguration:
    """Settings for TypeScript projects"""

    def __init__(self, store: ConfigStore, chooser: Chooser) -> None:
        self.key = f"{EXTENSION_CONFIG_KEY}.typescript"
        self.test_location = _option_value(
            LocationStrategy, store, EXTENSION_CONFIG_KEY, "typescript.location",
            "Select a test location strategy for this project.", chooser,
        )
        self.test_extension = _option_value(
            SuffixConvention, store, EXTENSION_CONFIG_KEY, "typescript.extension",
            "Select a test file extension for this project.", chooser,
        )

    def renew(self) -> None:
        self.test_location.renew()
        self.test_extension.renew()

    def get_location_strategy(self) -> LocationStrategy:
        return LocationStrategy(self.test_location.get())

    def get_test_file_extension(self) -> SuffixConvention:
        return SuffixConvention(self.test_extension.get())

    def set_location_strategy(self, strategy: LocationStrategy) -> None:
        self.test_location.set(strategy.value)

    def set_test_file_extension(self, suffix: SuffixConvention) -> None:
        self.test_extension.set(suffix.value)


class Configuration:
    """All language configurations, renewed when the store reports changes"""

    def __init__(self, store: ConfigStore, chooser: Chooser) -> None:
        self.store = store
        self.typescript = TypescriptConfiguration(store, chooser)
        self.configs = [self.typescript]
        store.on_change(self.on_config_change)

    def on_config_change(self, event: ConfigChangeEvent) -> None:
        for config in self.configs:
            if event.affects(config.key):
                logger.debug(f"Renewing {config.key}")
                config.renew()

    def get_typescript_configuration(self) -> TypescriptConfiguration:
        return self.typescript
