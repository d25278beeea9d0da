"""FTS5 query strings for free-text statute search."""

import re
from typing import NamedTuple, Optional

# Runs of Unicode letters or digits; underscores and punctuation split tokens
_TOKEN_RE = re.compile(r"[^\W_]+")


class QueryVariants(NamedTuple):
    """A conjunctive primary query and its disjunctive fallback.

    Run ``primary`` first. ``fallback`` only widens recall and is meant for
    the case where ``primary`` matched nothing. Both are ``None`` when the
    input had no searchable tokens.
    """

    primary: Optional[str]
    fallback: Optional[str]


def tokenize(query: str) -> list[str]:
    return _TOKEN_RE.findall(query or "")


def quote_token(token: str) -> str:
    """Quote a token as an FTS5 string so AND/OR/NOT/NEAR and ``*`` stay literal."""
    return '"' + token.replace('"', '""') + '"'


def build_variants(query: str) -> QueryVariants:
    tokens = [quote_token(token) for token in tokenize(query)]
    if not tokens:
        return QueryVariants(None, None)
    return QueryVariants(" AND ".join(tokens), " OR ".join(tokens))
