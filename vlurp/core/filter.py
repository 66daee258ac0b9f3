"""
Glob-based include/exclude filtering of repository-relative paths.
"""

import functools
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Pattern, Tuple

from ..models import FilterSpec


MATCH_EVERYTHING = '**/*'


####
##      GLOB TRANSLATION
#####
def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` alternations, innermost first.

    A brace group without a top-level comma is kept literally.
    """

    depth = 0
    start = None
    escaped = False
    for index, char in enumerate(pattern):
        if escaped:
            escaped = False
            continue
        if char == '\\':
            escaped = True
            continue
        if char == '{':
            if depth == 0:
                start = index
            depth += 1
        elif char == '}' and depth:
            depth -= 1
            if depth == 0 and start is not None:
                options = _split_top_level(pattern[start + 1:index])
                if len(options) < 2:
                    continue
                head, tail = pattern[:start], pattern[index + 1:]
                expanded: List[str] = []
                for option in options:
                    expanded.extend(expand_braces(head + option + tail))
                return expanded
    return [pattern]


def _split_top_level(body: str) -> List[str]:
    parts, depth, current = [], 0, []
    for char in body:
        if char == ',' and depth == 0:
            parts.append(''.join(current))
            current = []
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
        current.append(char)
    parts.append(''.join(current))
    return parts


def _translate_segment(segment: str) -> str:
    """Translate one path segment; no wildcard here crosses a ``/``."""

    out = []
    i, n = 0, len(segment)
    while i < n:
        char = segment[i]
        i += 1
        if char == '\\' and i < n:
            out.append(re.escape(segment[i]))
            i += 1
        elif char == '*':
            # Runs of stars inside a segment behave like one
            while i < n and segment[i] == '*':
                i += 1
            out.append('[^/]*')
        elif char == '?':
            out.append('[^/]')
        elif char == '[':
            j = i
            if j < n and segment[j] in '!^':
                j += 1
            if j < n and segment[j] == ']':
                j += 1
            while j < n and segment[j] != ']':
                j += 1
            if j >= n:
                out.append(re.escape(char))
                continue
            body = segment[i:j]
            i = j + 1
            negated = body[0] in '!^'
            if negated:
                body = body[1:]
            body = body.replace('\\', '\\\\').replace('[', '\\[').replace(']', '\\]')
            if negated:
                out.append(f'[^/{body}]')
            else:
                out.append(f'[{body}]')
        else:
            out.append(re.escape(char))
    return ''.join(out)


def translate(pattern: str) -> str:
    """Translate a single brace-free glob into a regular expression."""

    segments = pattern.split('/')
    out = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == '**':
            out.append('.*' if index == last else '(?:[^/]+/)*')
        else:
            out.append(_translate_segment(segment) + ('' if index == last else '/'))
    return ''.join(out)


def _normalize_pattern(pattern: str) -> str:
    while pattern.startswith('./'):
        pattern = pattern[2:]
    return pattern


@functools.lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Tuple[Pattern[str], bool]:
    """
    Compile a glob into a regex.

    Returns:
        Tuple of (regex, match_base); ``match_base`` is True when the
        pattern has no ``/`` and is tested against basenames
    """

    pattern = _normalize_pattern(pattern)
    alternatives = expand_braces(pattern)
    match_base = all('/' not in alt for alt in alternatives)
    regex = '|'.join(f'(?:{translate(alt)})' for alt in alternatives)
    return re.compile(regex), match_base


def match_glob(path: str, pattern: str) -> bool:
    """Case-sensitive glob match of a repository-relative path."""

    regex, match_base = compile_pattern(pattern)
    if regex.fullmatch(path):
        return True
    if match_base:
        return regex.fullmatch(path.rsplit('/', 1)[-1]) is not None
    return False


####
##      FILTER RESULT MODEL
#####
@dataclass
class FilterResult:
    """Outcome of filtering a set of paths."""

    included: List[str] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)

    @property
    def total_paths(self) -> int:
        return len(self.included) + len(self.excluded)

    @property
    def selected_count(self) -> int:
        return len(self.included)


####
##      FILTER ENGINE
#####
class FilterEngine:
    """
    Applies a FilterSpec to repository-relative file paths.

    Exclusion always wins: a path is selected only if some include
    matches and no exclude matches.
    """

    def __init__(self, spec: FilterSpec):
        self.spec = spec
        self.includes = spec.includes or [MATCH_EVERYTHING]
        self.excludes = spec.excludes

    def matches(self, path: str) -> bool:
        """Check whether a single path should be materialized."""

        path = path.lstrip('/')
        if not path:
            return False
        if any(match_glob(path, pattern) for pattern in self.excludes):
            return False
        return any(match_glob(path, pattern) for pattern in self.includes)

    def filter_paths(self, paths: Iterable[str]) -> FilterResult:
        result = FilterResult()
        for path in sorted(set(paths)):
            if self.matches(path):
                result.included.append(path)
            else:
                result.excluded.append(path)
        return result

    def select(self, paths: Iterable[str]) -> List[str]:
        """Return the sorted subset of ``paths`` to materialize."""

        return self.filter_paths(paths).included


__all__ = [
    "MATCH_EVERYTHING",
    "FilterEngine",
    "FilterResult",
    "compile_pattern",
    "expand_braces",
    "match_glob",
    "translate",
]
