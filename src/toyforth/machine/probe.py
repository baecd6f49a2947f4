"""Machine Probe"""

import datetime
from dataclasses import dataclass


def now_str() -> str:
    return datetime.datetime.now().isoformat()


@dataclass(frozen=True)
class ProbeEvent:
    time: str
    event: str
    data: dict


class Probe:
    """A small interface for recording machine events

    Disabled probes drop everything, so a machine can always call event().
    """

    def __init__(self, enabled=True):
        self.enabled = enabled
        self.events = []

    def event(self, etype: str, **data):
        if self.enabled:
            self.events.append(ProbeEvent(time=now_str(), event=etype, data=data))
