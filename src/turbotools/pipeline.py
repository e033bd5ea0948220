"""Tokenizer -> serializer pipelines, selected by category and direction."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .formatting import FormatOpts, Mode
from .html_serialize import serialize_html
from .html_tokenizer import tokenize_html
from .json_serialize import serialize_json
from .json_tokenizer import tokenize_json

logger = logging.getLogger(__name__)

Tokenize = Callable[[Any], list[Any]]
Serialize = Callable[[list[Any], Mode, FormatOpts | None], str]

CATEGORIES = ("html", "json")
DIRECTIONS = ("minify", "unminify")


@dataclass(frozen=True, slots=True)
class Pipeline:
    """One fixed (tokenizer, serializer, mode) triple."""

    category: str
    tokenize: Tokenize
    serialize: Serialize
    mode: Mode

    def run(self, data: str | bytes, opts: FormatOpts | None = None) -> str:
        tokens = self.tokenize(data)
        logger.debug("%s: %d tokens from %d input units", self.category, len(tokens), len(data))
        output = self.serialize(tokens, self.mode, opts)
        logger.debug("%s: %s output is %d characters", self.category, self.mode.value, len(output))
        return output


PIPELINES: dict[tuple[str, str], Pipeline] = {
    ("json", "minify"): Pipeline("json", tokenize_json, serialize_json, Mode.COMPACT),
    ("json", "unminify"): Pipeline("json", tokenize_json, serialize_json, Mode.PRETTY),
    ("html", "minify"): Pipeline("html", tokenize_html, serialize_html, Mode.COMPACT),
    ("html", "unminify"): Pipeline("html", tokenize_html, serialize_html, Mode.PRETTY),
}


def get_pipeline(category: str, direction: str) -> Pipeline:
    try:
        return PIPELINES[(category, direction)]
    except KeyError:
        raise ValueError(f"No pipeline for category {category!r} and direction {direction!r}") from None


def transform(category: str, direction: str, data: str | bytes, opts: FormatOpts | None = None) -> str:
    """Run the ``category``/``direction`` pipeline over ``data``."""
    return get_pipeline(category, direction).run(data, opts)


def minify_json(data: str | bytes) -> str:
    return transform("json", "minify", data)


def unminify_json(data: str | bytes, opts: FormatOpts | None = None) -> str:
    return transform("json", "unminify", data, opts)


def minify_html(data: str | bytes) -> str:
    return transform("html", "minify", data)


def unminify_html(data: str | bytes, opts: FormatOpts | None = None) -> str:
    return transform("html", "unminify", data, opts)
