"""
Compat specification model for compatkeeper.

A compat entry in a registry is a comma-separated union of version ranges.
Each term becomes a :class:`CompatRange` over :class:`semver.Version`, so
membership follows semantic-version precedence: a prerelease sorts below
the release with the same major.minor.patch, and build metadata is ignored.

Supported terms::

    1.2.3, ^1.2.3   caret   [1.2.3, 2.0.0)   first non-zero component is bumped
    ~1.2.3          tilde   [1.2.3, 1.3.0)
    =1.2.3, =1.2    exact   1.2.3 only / any 1.2.x
    >= 1.2, ≥1.2    lower   [1.2.0, ∞)
    < 1.2           upper   [0, 1.2.0)
    <= 1.2, ≤1.2    upper   [0, 1.3.0)
    1.2 - 2         hyphen  [1.2.0, 3.0.0)
    1.*, 1.2.x, *   wildcard

An exclusive upper bound is compared against the release numbers only, so
``2.0.0-rc1`` is outside ``[1.0.0, 2.0.0)`` like ``2.0.0`` itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from semver import Version

from compatkeeper.exceptions import ParseError

CompatValue = Union[str, Sequence[str]]

_NUMBERS = r"v?(\d+(?:\.\d+){0,2})"
_HYPHEN_RE = re.compile(rf"^{_NUMBERS}\s+-\s+{_NUMBERS}$")
_OPERATOR_RE = re.compile(rf"^(\^|~|=|>=|≥|<=|≤|<)?\s*{_NUMBERS}$")
_WILDCARD_RE = re.compile(r"^v?((?:\d+\.){0,2})[*xX]$")


@dataclass(frozen=True)
class CompatRange:
    """One union term: an inclusive lower bound and an optional upper bound.

    ``None`` leaves a side unbounded.
    """

    lower: Optional[Version] = None
    upper: Optional[Version] = None
    upper_inclusive: bool = False

    def contains(self, version: Version) -> bool:
        if self.lower is not None and version < self.lower:
            return False
        if self.upper is None:
            return True
        if self.upper_inclusive:
            return version <= self.upper
        return version.finalize_version() < self.upper


def _components(text: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in text.split("."))


def _padded(parts: Sequence[int]) -> Version:
    full = list(parts) + [0] * (3 - len(parts))
    return Version(*full)


def _bump(parts: Sequence[int], index: int) -> Version:
    """Return the first version above every version with this prefix."""
    bumped = list(parts[: index + 1])
    bumped[index] += 1
    return _padded(bumped)


def _prefix(parts: Sequence[int]) -> CompatRange:
    """Every version whose release numbers start with ``parts``."""
    if not parts:
        return CompatRange()
    return CompatRange(_padded(parts), _bump(parts, len(parts) - 1))


def _caret(parts: Tuple[int, ...]) -> CompatRange:
    nonzero = [i for i, p in enumerate(parts) if p != 0]
    index = nonzero[0] if nonzero else len(parts) - 1
    return CompatRange(_padded(parts), _bump(parts, index))


def _tilde(parts: Tuple[int, ...]) -> CompatRange:
    if len(parts) == 1:
        index = 0
    elif len(parts) == 3 and parts[0] == 0 and parts[1] == 0:
        index = 2
    else:
        index = 1
    return CompatRange(_padded(parts), _bump(parts, index))


def _up_to(parts: Tuple[int, ...], lower: Optional[Version] = None) -> CompatRange:
    # A partial upper bound covers its whole prefix: "<= 1.2" admits 1.2.9
    if len(parts) == 3:
        return CompatRange(lower, _padded(parts), upper_inclusive=True)
    return CompatRange(lower, _bump(parts, len(parts) - 1))


def _translate(term: str) -> CompatRange:
    """Translate one compat term into a range."""
    match = _HYPHEN_RE.match(term)
    if match:
        lower = _padded(_components(match.group(1)))
        return _up_to(_components(match.group(2)), lower)

    match = _WILDCARD_RE.match(term)
    if match:
        prefix = match.group(1).rstrip(".")
        return _prefix(_components(prefix) if prefix else ())

    match = _OPERATOR_RE.match(term)
    if not match:
        raise ParseError(f"Invalid compat term {term!r}", key=term)

    operator, parts = match.group(1), _components(match.group(2))
    if operator in (None, "^"):
        return _caret(parts)
    if operator == "~":
        return _tilde(parts)
    if operator == "=":
        if len(parts) == 3:
            exact = _padded(parts)
            return CompatRange(exact, exact, upper_inclusive=True)
        return _prefix(parts)
    if operator in (">=", "≥"):
        return CompatRange(lower=_padded(parts))
    if operator in ("<=", "≤"):
        return _up_to(parts)
    return CompatRange(upper=_padded(parts))


@dataclass(frozen=True)
class CompatSpec:
    """A compat bound declared by one package for one dependency.

    Two specs compare equal when their declared text is equal.

    Attributes:
        text: The declared compat string, list entries joined with ``", "``.
        ranges: One range per union term.
    """

    text: str
    ranges: Tuple[CompatRange, ...] = field(compare=False, repr=False)

    @classmethod
    def parse(cls, value: CompatValue) -> "CompatSpec":
        """Parse a compat string, or a list of compat strings, into a spec.

        Raises:
            ParseError: A term is not a recognized range expression or the
                spec is empty.
        """
        terms: List[str] = []
        items = [value] if isinstance(value, str) else list(value)
        for item in items:
            if not isinstance(item, str):
                raise ParseError(f"Compat entry must be a string, got {item!r}")
            terms.extend(t.strip() for t in item.split(","))

        terms = [t for t in terms if t]
        if not terms:
            raise ParseError(f"Empty compat specification {value!r}")

        return cls(text=", ".join(terms), ranges=tuple(_translate(t) for t in terms))

    def satisfies(self, version: Version) -> bool:
        """Return True when ``version`` falls inside any of the ranges."""
        return any(r.contains(version) for r in self.ranges)

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.satisfies(version)

    def __str__(self) -> str:
        return self.text
