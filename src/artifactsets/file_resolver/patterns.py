"""Classification of path specifiers and brace expansion for glob patterns."""

from __future__ import annotations

# Characters that indicate a path is a glob pattern rather than a literal path.
_GLOB_CHARS = frozenset("*?[]{}()!")


def is_glob_pattern(pattern: str) -> bool:
    """True if `pattern` contains any wildcard syntax, false for a literal path."""
    return any(c in _GLOB_CHARS for c in pattern)


def expand_braces(pattern: str) -> list[str]:
    """
    Expand `{a,b}` alternations into separate patterns, left to right, including
    nested groups. Groups without a top-level comma or without a closing brace
    are kept literally. Order is preserved and duplicates are dropped.

        >>> expand_braces("src/{a,b}/*.py")
        ['src/a/*.py', 'src/b/*.py']
    """
    group = _find_brace_group(pattern)
    if group is None:
        return [pattern]

    start, end, options = group
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for option in options:
        for candidate in expand_braces(prefix + option + suffix):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def _find_brace_group(pattern: str) -> tuple[int, int, list[str]] | None:
    """
    Locate the first brace group with at least one top-level comma. Returns the
    index of `{`, the index of the matching `}`, and the comma-separated options.
    """
    for start, char in enumerate(pattern):
        if char != "{":
            continue
        depth = 0
        options: list[str] = []
        option_start = start + 1
        for i in range(start, len(pattern)):
            c = pattern[i]
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    if options:
                        options.append(pattern[option_start:i])
                        return start, i, options
                    break
            elif c == "," and depth == 1:
                options.append(pattern[option_start:i])
                option_start = i + 1
    return None
