"""ToyForth: a tiny Forth-like stack language"""

__version__ = "0.1.0"
