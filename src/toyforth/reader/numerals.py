"""Recognise integer literals"""

import re
from typing import Optional

from ..exceptions import UnexpectedError

# Plain decimal digits only. There is no sign: "-5" is not a numeral.
NUMERAL = re.compile(r"[0-9]+")


def parse_numeral(token: str) -> Optional[int]:
    """Parse token as a non-negative integer, or return None if it isn't one"""
    if not token:
        raise UnexpectedError("Empty token passed to numeral parser")
    if NUMERAL.fullmatch(token):
        return int(token)
    return None
