# Common utilities
from .text_utils import parse_leading_float, parse_leading_int, strip_markup
