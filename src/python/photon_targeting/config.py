import os
import json
from dataclasses import dataclass
from typing import Optional

from .logger import LogLevel, ConsoleLogger, get_logger, set_logger

ENV_LOG_LEVEL = "PHOTON_LOG_LEVEL"
ENV_PACKET_DUMP = "PHOTON_PACKET_DUMP"

_packet_dump = False


@dataclass
class TargetingConfig:
    log_level: LogLevel = LogLevel.INFO
    packet_dump: bool = False


def parse_level(name: str) -> LogLevel:
    key = name.strip().upper()
    if key == "WARNING":
        key = "WARN"
    try:
        return LogLevel[key]
    except KeyError:
        raise ValueError(f"Unknown log level '{name}'. Expected one of {[l.name for l in LogLevel]}") from None


def load_config(path: Optional[str] = None) -> TargetingConfig:
    """
    Build a TargetingConfig from an optional JSON file, then apply environment
    overrides.

    File layout:
        { "logging": { "level": "WARN" }, "packet_dump": true }

    Environment:
        PHOTON_LOG_LEVEL    level name (DEBUG, INFO, WARN, ERROR)
        PHOTON_PACKET_DUMP  "1" to log a hexdump of every encoded/decoded target
    """
    config = TargetingConfig()

    if path:
        try:
            with open(path, 'r') as f: data = json.load(f)
        except (OSError, ValueError) as e:
            get_logger().log(LogLevel.ERROR, "Config", f"Failed to load config from {path}: {e}")
            data = {}
        if not isinstance(data, dict) or not isinstance(data.get("logging", {}), dict):
            get_logger().log(LogLevel.ERROR, "Config", f"Ignoring config {path}: expected a JSON object with an object 'logging' section")
            data = {}
        level = data.get("logging", {}).get("level")
        if level:
            config.log_level = parse_level(level)
        if "packet_dump" in data:
            config.packet_dump = bool(data["packet_dump"])

    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        config.log_level = parse_level(env_level)
    if ENV_PACKET_DUMP in os.environ:
        config.packet_dump = os.environ[ENV_PACKET_DUMP] == "1"

    return config


def configure(config: TargetingConfig):
    """Install a ConsoleLogger at the configured level and set the dump flag."""
    global _packet_dump
    set_logger(ConsoleLogger(min_level=config.log_level))
    _packet_dump = config.packet_dump


def set_packet_dump(enabled: bool):
    global _packet_dump
    _packet_dump = enabled


def is_packet_dump_enabled() -> bool:
    return _packet_dump
