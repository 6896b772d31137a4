"""
Deterministic cleaning rules.

This file exists to keep the fixed patterns and defaults in one place.
The patterns are heuristics, not a lexer: comment delimiters inside string
literals, URLs and attribute values are matched like any other text.
"""

import re

DEFAULT_EXTENSIONS = (".vue", ".js", ".ts", ".jsx", ".tsx")
BACKUP_SUFFIX = ".backup"

# Unclosed openers run to end of input.
MARKUP_COMMENT_RE = re.compile(r"<!--.*?(?:-->|\Z)", re.DOTALL)
BLOCK_COMMENT_RE = re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)
# Stops before \r so CRLF endings survive.
LINE_COMMENT_RE = re.compile(r"//[^\r\n]*")

STYLE_OPEN_RE = re.compile(r"<style[^>]*>")
