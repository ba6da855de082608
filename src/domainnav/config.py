"""Configuration management for domainnav.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from domainnav.core.breadcrumbs import DEFAULT_COLLAPSE_THRESHOLD
from domainnav.core.models import DEFAULT_SUPPORTED_COUNTRIES
from domainnav.core.sections import DEFAULT_FALLBACK_TITLE

CONFIG_FILENAME = "domainnav.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class StoreConfig:
    """Content store configuration."""

    data_file: Path = field(default_factory=lambda: Path("content.json"))


@dataclass
class CountriesConfig:
    """Viewer country configuration."""

    supported: list[str] = field(default_factory=lambda: list(DEFAULT_SUPPORTED_COUNTRIES))
    default: str = "US"
    cookie_name: str = "user-country"
    header_name: str = "X-Country"


@dataclass
class NavigationConfig:
    """Navigation rendering configuration."""

    breadcrumb_collapse_threshold: int = DEFAULT_COLLAPSE_THRESHOLD
    fallback_section_title: str = DEFAULT_FALLBACK_TITLE


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    store: StoreConfig
    countries: CountriesConfig
    navigation: NavigationConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for domainnav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(
            server=ServerConfig(),
            store=StoreConfig(),
            countries=CountriesConfig(),
            navigation=NavigationConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            store=cls._parse_store(data.get("store"), config_dir),
            countries=cls._parse_countries(data.get("countries")),
            navigation=cls._parse_navigation(data.get("navigation")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_store(cls, data: object, config_dir: Path) -> StoreConfig:
        """Parse store configuration section.

        Args:
            data: Raw store section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            StoreConfig instance
        """
        if data is None:
            return StoreConfig(data_file=config_dir / "content.json")

        if not isinstance(data, dict):
            raise ValueError("store section must be a dictionary")

        data_file = data.get("data_file", "content.json")
        if not isinstance(data_file, str):
            raise ValueError("store.data_file must be a string")

        return StoreConfig(data_file=config_dir / data_file)

    @classmethod
    def _parse_countries(cls, data: object) -> CountriesConfig:
        """Parse countries configuration section.

        Codes are upper-cased. The default country must be one of the
        supported ones.

        Args:
            data: Raw countries section data

        Returns:
            CountriesConfig instance
        """
        if data is None:
            return CountriesConfig()

        if not isinstance(data, dict):
            raise ValueError("countries section must be a dictionary")

        supported_raw = data.get("supported", list(DEFAULT_SUPPORTED_COUNTRIES))
        if not isinstance(supported_raw, list):
            raise ValueError("countries.supported must be a list")
        supported: list[str] = []
        for item in supported_raw:
            if not isinstance(item, str):
                raise ValueError("countries.supported items must be strings")
            supported.append(item.strip().upper())
        if not supported:
            raise ValueError("countries.supported must not be empty")

        default = data.get("default", "US")
        if not isinstance(default, str):
            raise ValueError("countries.default must be a string")
        default = default.strip().upper()
        if default not in supported:
            raise ValueError(f"countries.default {default} is not a supported country")

        cookie_name = data.get("cookie_name", "user-country")
        if not isinstance(cookie_name, str):
            raise ValueError("countries.cookie_name must be a string")

        header_name = data.get("header_name", "X-Country")
        if not isinstance(header_name, str):
            raise ValueError("countries.header_name must be a string")

        return CountriesConfig(
            supported=supported,
            default=default,
            cookie_name=cookie_name,
            header_name=header_name,
        )

    @classmethod
    def _parse_navigation(cls, data: object) -> NavigationConfig:
        if data is None:
            return NavigationConfig()

        if not isinstance(data, dict):
            raise ValueError("navigation section must be a dictionary")

        threshold = data.get("breadcrumb_collapse_threshold", DEFAULT_COLLAPSE_THRESHOLD)
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise ValueError("navigation.breadcrumb_collapse_threshold must be an integer")
        if threshold < 2:
            raise ValueError("navigation.breadcrumb_collapse_threshold must be at least 2")

        fallback_title = data.get("fallback_section_title", DEFAULT_FALLBACK_TITLE)
        if not isinstance(fallback_title, str):
            raise ValueError("navigation.fallback_section_title must be a string")

        return NavigationConfig(
            breadcrumb_collapse_threshold=threshold,
            fallback_section_title=fallback_title,
        )

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        return LiveReloadConfig(enabled=enabled)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        data_file: Path | None = None,
        default_country: str | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            data_file: Override store.data_file
            default_country: Override countries.default
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied

        Raises:
            ValueError: If the default country is not a supported one
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        store = self.store
        if data_file is not None:
            store = replace(self.store, data_file=data_file)

        countries = self.countries
        if default_country is not None:
            default = default_country.strip().upper()
            if default not in self.countries.supported:
                raise ValueError(f"Default country {default} is not a supported country")
            countries = replace(self.countries, default=default)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            store=store,
            countries=countries,
            live_reload=live_reload,
        )
