"""ToyForth configuration data, usually stored in toyforth.toml"""

from dataclasses import dataclass

# Constants
DEFAULT_PROMPT = ""
BANNER = "ToyForth started"


@dataclass(frozen=True)
class ReplConfig:
    prompt: str = DEFAULT_PROMPT
    banner: bool = True
    # Print " ok" / " compiled" after each line
    acknowledge: bool = True


@dataclass(frozen=True)
class MachineConfig:
    trace: bool = False
