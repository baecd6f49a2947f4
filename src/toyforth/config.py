"""Load ToyForth configuration"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Union

import toml

from .config_classes import MachineConfig, ReplConfig
from .exceptions import UserResolvableError

LOG = logging.getLogger(__name__)

TOYFORTH_DIST_DATA = Path(__file__).parent / "dist_data"
DEFAULT_CONFIG_FILEPATH = Path("toyforth.toml")


class ConfigError(UserResolvableError):
    """Error loading configuration"""


@dataclass
class Config:
    config_file: Union[Path, None]
    repl: ReplConfig = field(default_factory=ReplConfig)
    machine: MachineConfig = field(default_factory=MachineConfig)


def _section(config_file, data: dict, name: str, cls):
    section = data.pop(name, {})
    if not isinstance(section, dict):
        raise ConfigError(
            f"`{name}' in {config_file} is not a table",
            f"Use a [{name}] section.",
        )
    types = {f.name: f.type for f in fields(cls)}
    known = set(types)
    unknown = set(section) - known
    if unknown:
        raise ConfigError(
            f"Unknown key(s) in [{name}] of {config_file}: {', '.join(sorted(unknown))}",
            f"Valid keys are: {', '.join(sorted(known))}",
        )
    for key, value in section.items():
        if not isinstance(value, types[key]):
            raise ConfigError(
                f"Bad value for {key} in [{name}] of {config_file}: {value!r}",
                f"{key} must be a {types[key].__name__}.",
            )
    return cls(**section)


def load(args: dict) -> Config:
    """Load the configuration

    The default config file is optional, but one given with --config must exist.
    """
    explicit = bool(args.get("--config"))
    config_file = Path(args["--config"]) if explicit else DEFAULT_CONFIG_FILEPATH

    try:
        data = toml.load(config_file)
    except FileNotFoundError:
        if explicit:
            raise ConfigError(
                f"{config_file} not found",
                f"Check the path, or look at {TOYFORTH_DIST_DATA / DEFAULT_CONFIG_FILEPATH} "
                "for an example.",
            )
        LOG.debug("No %s, using defaults", config_file)
        return Config(config_file=None)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Can't parse {config_file}", str(exc))

    LOG.info("Loaded %s", config_file)
    repl = _section(config_file, data, "repl", ReplConfig)
    machine = _section(config_file, data, "machine", MachineConfig)

    if data:
        raise ConfigError(
            f"Unknown section(s) in {config_file}: {', '.join(sorted(data))}",
            "Valid sections are [repl] and [machine].",
        )

    return Config(config_file=config_file, repl=repl, machine=machine)
