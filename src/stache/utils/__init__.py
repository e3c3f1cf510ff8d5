"""Stache utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- encoding: UTF-8 conversion between str and template bytes
"""

from stache.utils.encoding import decode_str, encode_str
from stache.utils.logging import get_logger, setup_logging

__all__ = [
    "decode_str",
    "encode_str",
    "get_logger",
    "setup_logging",
]
