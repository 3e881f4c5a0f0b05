"""Configuration management for hostmetrics agent."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

DEFAULT_CONFIG_PATH = "/etc/hostmetrics/agent.conf"
DEFAULT_EXTENSIONS_DIR = "/etc/hostmetrics/extensions.d"

# Environment variables that take precedence over the config file
ENV_OVERRIDES = {
    "HOSTMETRICS_HOST": "host",
    "HOSTMETRICS_PORT": "port",
    "HOSTMETRICS_TIMEOUT": "timeout",
}


class ConfigurationMissing(Exception):
    """Remote endpoint is not configured (or not usable)."""
    pass


@dataclass(frozen=True)
class AgentConfig:
    """Agent configuration."""

    remote_host: str
    remote_port: int
    timeout: int = 5  # seconds, per send
    verbose: bool = False
    dry_run: bool = False
    hostname: Optional[str] = None
    extensions_dir: str = DEFAULT_EXTENSIONS_DIR
    extension_timeout: int = 30
    command_timeout: int = 30


def _parse_int(key: str, value: str) -> int:
    """Parse a positive integer setting."""
    try:
        number = int(value)
    except ValueError:
        raise ConfigurationMissing(f"Invalid value for {key.upper()}: {value!r}")

    if number <= 0:
        raise ConfigurationMissing(f"{key.upper()} must be a positive integer, got {number}")

    return number


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


class ConfigManager:
    """Manages agent configuration."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH, environ: Optional[Mapping[str, str]] = None):
        self.config_path = Path(config_path)
        self.environ = os.environ if environ is None else environ

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def read_file(self) -> Dict[str, str]:
        """
        Read the key=value config file.

        The file has no section headers, so one is supplied before handing
        the text to configparser. Keys come back lower-cased. Leading
        whitespace is stripped so indented lines are never continuations.

        Raises:
            ConfigurationMissing: File is unreadable or not key=value
        """
        if not self.exists():
            return {}

        parser = configparser.ConfigParser(interpolation=None, strict=False)

        try:
            lines = self.config_path.read_text(encoding="utf-8").splitlines()
            text = "\n".join(line.lstrip() for line in lines)
            parser.read_string("[agent]\n" + text, source=str(self.config_path))
        except (configparser.Error, OSError, UnicodeDecodeError) as e:
            raise ConfigurationMissing(f"Cannot read {self.config_path}: {e}") from e

        return {key: _unquote(value) for key, value in parser.items("agent")}

    def load(self) -> AgentConfig:
        """
        Load configuration from file and environment.

        Raises:
            ConfigurationMissing: HOST or PORT is absent, or not usable
        """
        data = self.read_file()

        for env_key, key in ENV_OVERRIDES.items():
            if self.environ.get(env_key):
                data[key] = self.environ[env_key]

        host = data.get("host", "")
        port = data.get("port", "")
        if not host or not port:
            raise ConfigurationMissing(
                f"HOST and PORT must be set in {self.config_path} "
                f"(or via HOSTMETRICS_HOST / HOSTMETRICS_PORT)"
            )

        remote_port = _parse_int("port", port)
        if remote_port > 65535:
            raise ConfigurationMissing(f"PORT out of range: {remote_port}")

        kwargs = {
            "remote_host": host,
            "remote_port": remote_port,
        }

        for key in ("timeout", "extension_timeout", "command_timeout"):
            if data.get(key):
                kwargs[key] = _parse_int(key, data[key])

        if data.get("hostname"):
            kwargs["hostname"] = data["hostname"]
        if data.get("extensions_dir"):
            kwargs["extensions_dir"] = data["extensions_dir"]

        return AgentConfig(**kwargs)
