from __future__ import annotations
import re

# Hack symbols: letters, digits, '_', '.', '$', ':' and not starting with a digit
SYMBOL_RE = re.compile(r"^[A-Za-z_.$:][A-Za-z0-9_.$:]*$")
INDEX_RE = re.compile(r"^\d+$")
# Return-address labels are "<scope>$ret.<line>"; user labels may not take that form
RESERVED_LABEL_RE = re.compile(r"^ret\.\d+$")

def strip_comment(line: str) -> str:
    """Remove a '//' comment and surrounding whitespace."""
    i = line.find("//")
    if i >= 0:
        line = line[:i]
    return line.strip()

def split_words(line: str):
    """Return (keyword, args) with the keyword lowercased."""
    parts = line.split()
    if not parts:
        return "", []
    return parts[0].lower(), parts[1:]

def is_symbol(token: str) -> bool:
    return bool(SYMBOL_RE.match(token))

def is_index(token: str) -> bool:
    return bool(INDEX_RE.match(token))

def is_reserved_label(token: str) -> bool:
    return bool(RESERVED_LABEL_RE.match(token))
