from .lexer import ForthLexer, index_column, tokenize
from .numerals import parse_numeral
