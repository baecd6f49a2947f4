"""The word dictionary"""

import logging
from collections import UserDict
from typing import Dict

from .instruction import Instruction
from .instructionset import UserWord

LOG = logging.getLogger(__name__)


class Dictionary(UserDict):
    """Map word names to Instructions

    Names are case-sensitive. Defining a name again replaces the old entry, but
    words compiled earlier keep the instruction they were compiled with.
    """

    def define(self, name: str, instr: Instruction):
        if name in self.data:
            LOG.info("Redefining %s", name)
        else:
            LOG.debug("Defining %s", name)
        self.data[name] = instr

    def user_words(self) -> Dict[str, UserWord]:
        """The words defined with `:', in order of first definition"""
        return {k: v for k, v in self.data.items() if isinstance(v, UserWord)}
