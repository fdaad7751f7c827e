# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

from fmtbridge.dispatch import TAG_TO_PARSER

__all__ = [
    "formatter_options",
    "project_roots",
    "unknown_tags",
    "workspace_ids",
]


def workspace_ids() -> st.SearchStrategy[int | None]:
    """Ids a host may pass in a request, including absent, zero and negative ones."""
    return st.one_of(st.none(), st.integers(min_value=-(2**31), max_value=2**31))


def unknown_tags() -> st.SearchStrategy[str]:
    return st.text(max_size=12).filter(lambda tag: tag not in TAG_TO_PARSER)


def project_roots(max_size: int = 6) -> st.SearchStrategy[list[str]]:
    """Return a strategy yielding lists of non-empty, non-existent project roots."""
    segment = st.from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True)
    return st.lists(segment.map(lambda name: f"/nonexistent/{name}"), min_size=1, max_size=max_size)


def formatter_options() -> st.SearchStrategy[dict[str, object]]:
    """Option mappings with JSON-like scalar values, sometimes carrying ``parser``/``filepath``."""
    scalars = st.one_of(st.booleans(), st.integers(), st.text(max_size=8), st.none())
    keys = st.one_of(st.sampled_from(["parser", "filepath"]), st.text(min_size=1, max_size=8))
    return st.dictionaries(keys, scalars, max_size=6)
