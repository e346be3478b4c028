"""Label matcher evaluation against stored series."""
import functools
import logging
import re
from typing import Iterable, Sequence

from readmock.errors import InvalidMatcherError, UnsupportedMatcherError
from readmock.series import Series
from readmock.wire import LabelMatcher, MatcherType

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a matcher regex once per distinct pattern."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidMatcherError(f"invalid matcher regex {pattern!r}: {exc}") from exc


def check_matchers(matchers: Iterable[LabelMatcher]) -> None:
    """Fail on any matcher the double cannot evaluate.

    Only regex matchers are supported; every other kind is rejected outright,
    whatever the series being evaluated.
    """
    for matcher in matchers:
        if matcher.kind != MatcherType.RE:
            raise UnsupportedMatcherError(
                f"unsupported label matcher {matcher.kind!r} on {matcher.name!r}, only RE is supported"
            )
        compile_pattern(matcher.pattern)


def matches(series: Series, matchers: Sequence[LabelMatcher]) -> bool:
    """Return True iff every matcher naming one of the series' labels finds its pattern in the value.

    The regex may match anywhere in the value. Matchers naming labels the
    series does not carry impose no constraint.
    """
    check_matchers(matchers)
    for name, value in series.labels:
        for matcher in matchers:
            if matcher.name != name:
                continue
            if compile_pattern(matcher.pattern).search(value) is None:
                logger.debug(f"Series {{{series.label_key()}}} excluded by {name}=~{matcher.pattern!r}")
                return False
    return True
