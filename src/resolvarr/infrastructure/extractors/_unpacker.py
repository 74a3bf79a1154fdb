"""Dean Edwards packer (``eval(function(p,a,c,k,e,d)…)``) reversal.

The packer replaces every word of a script with its index into a
dictionary, written in radix *a* (2..62).  Unpacking maps each token
back through the dictionary.  Nothing is evaluated: the algorithm is a
bounded string substitution.
"""

from __future__ import annotations

import re

import structlog

log = structlog.get_logger(__name__)

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

_PACKED_ARGS_RE = re.compile(
    r"}\s*\(\s*'((?:[^'\\]|\\.)*)'\s*,\s*(\d+|\[\])\s*,\s*(\d+)\s*,"
    r"\s*'([^']*)'\s*\.split\(\s*'\|'\s*\)",
    re.DOTALL,
)
_PACKED_START_RE = re.compile(
    r"eval\s*\(\s*function\s*\(\s*p\s*,\s*a\s*,\s*c\s*,\s*k\s*,\s*e\s*,\s*[dr]\s*\)"
)
_SCRIPT_TAG_RE = re.compile(r"</?script[^>]*>", re.IGNORECASE)
_WORD_RE = re.compile(r"\b\w+\b")
_ESCAPE_RE = re.compile(r"\\([\\'])")

# Upper bound on how much text after ``eval(function(p,a,c,k,e,d)`` is
# searched for the argument list.
_MAX_BLOCK = 262_144


def to_radix(num: int, radix: int) -> str:
    """Encode *num* the way the packer's ``e(c)`` function does."""
    if not 2 <= radix <= len(_ALPHABET):
        raise ValueError(f"unsupported radix: {radix}")
    if num < radix:
        return _ALPHABET[num]
    return to_radix(num // radix, radix) + _ALPHABET[num % radix]


def from_radix(token: str, radix: int) -> int:
    """Decode a packer token; raises ``ValueError`` for foreign characters."""
    if radix <= 36:
        return int(token, radix)
    value = 0
    for ch in token:
        digit = _ALPHABET.find(ch)
        if digit < 0 or digit >= radix:
            raise ValueError(f"invalid digit {ch!r} for radix {radix}")
        value = value * radix + digit
    return value


def is_packed(text: str) -> bool:
    return _PACKED_START_RE.search(text) is not None


def find_packed_blocks(html: str) -> list[str]:
    """Return every packer invocation in *html*, in document order."""
    blocks: list[str] = []
    starts = [m.start() for m in _PACKED_START_RE.finditer(html)]
    for i, start in enumerate(starts):
        end = starts[i + 1] if i + 1 < len(starts) else len(html)
        blocks.append(html[start : min(end, start + _MAX_BLOCK)])
    return blocks


def unpack_p_a_c_k(packed: str) -> str | None:
    """Unpack Dean Edwards packed JavaScript.

    Format: eval(function(p,a,c,k,e,d){...}('payload',radix,count,'dict'.split('|'),0,{}))

    Returns ``None`` when *packed* holds no packer arguments or uses an
    unsupported radix.
    """
    match = _PACKED_ARGS_RE.search(packed)
    if not match:
        return None

    payload = _ESCAPE_RE.sub(r"\1", match.group(1))
    radix = 62 if match.group(2) == "[]" else int(match.group(2))
    count = int(match.group(3))
    keywords = match.group(4).split("|")

    if not 2 <= radix <= len(_ALPHABET):
        log.debug("unpack_unsupported_radix", radix=radix)
        return None

    if len(keywords) < count:
        keywords.extend([""] * (count - len(keywords)))

    def _replace_word(m: re.Match[str]) -> str:
        word = m.group(0)
        try:
            index = from_radix(word, radix)
        except ValueError:
            return word
        if index < len(keywords) and keywords[index]:
            return keywords[index]
        return word

    return _WORD_RE.sub(_replace_word, payload)


def safe_unpack(text: str) -> str:
    """Strip script tags and unpack the first packed block, if any.

    Text without a packed block is returned with only the script tags
    removed, so the function is idempotent on already-unpacked code.
    """
    cleaned = _SCRIPT_TAG_RE.sub("", text)
    for block in find_packed_blocks(cleaned):
        unpacked = unpack_p_a_c_k(block)
        if unpacked is not None:
            return unpacked
    return cleaned


def unpack_all(html: str) -> list[str]:
    """Unpack every packed block of *html*; undecodable blocks are skipped."""
    results: list[str] = []
    for block in find_packed_blocks(html):
        unpacked = unpack_p_a_c_k(block)
        if unpacked:
            results.append(unpacked)
    return results


def pack_p_a_c_k(source: str, radix: int = 36) -> str:
    """Pack *source* with the packer convention :func:`unpack_p_a_c_k` reverses.

    Every distinct word gets an index in first-seen order; words equal to
    their own token keep an empty dictionary slot, like the reference
    packer does.
    """
    words: dict[str, int] = {}
    for m in _WORD_RE.finditer(source):
        words.setdefault(m.group(0), len(words))

    def _encode(m: re.Match[str]) -> str:
        return to_radix(words[m.group(0)], radix)

    payload = _WORD_RE.sub(_encode, source)
    payload = payload.replace("\\", "\\\\").replace("'", "\\'")
    dictionary = [
        "" if to_radix(index, radix) == word else word
        for word, index in words.items()
    ]
    return (
        "eval(function(p,a,c,k,e,d){e=function(c){return c.toString(a)};"
        "if(!''.replace(/^/,String)){while(c--)d[c.toString(a)]=k[c]||"
        "c.toString(a);k=[function(e){return d[e]}];e=function(){return'\\\\w+'};"
        "c=1};while(c--)if(k[c])p=p.replace(new RegExp('\\\\b'+e(c)+'\\\\b','g'),"
        f"k[c]);return p}}('{payload}',{radix},{len(words)},"
        f"'{'|'.join(dictionary)}'.split('|'),0,{{}}))"
    )


def extract_variable_value(code: str, variable_name: str) -> str | None:
    """Read a quoted string assigned to *variable_name* (case-insensitive)."""
    m = re.search(
        rf"{re.escape(variable_name)}\s*=\s*[\"']([^\"']+)[\"']",
        code,
        re.IGNORECASE,
    )
    return m.group(1) if m else None


def extract_function_result(code: str, pattern: re.Pattern[str]) -> str | None:
    """First capture group of *pattern* in *code*, if any."""
    m = pattern.search(code)
    return m.group(1) if m else None
