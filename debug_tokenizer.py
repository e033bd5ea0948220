#!/usr/bin/env python3
"""Dump the token stream and both serializations for one input, to inspect a misbehaving document."""

import sys
from pathlib import Path

from turbotools import MalformedInput, Mode, UnbalancedStructure
from turbotools.html_serialize import serialize_html
from turbotools.html_tokenizer import tokenize_html
from turbotools.json_serialize import serialize_json
from turbotools.json_tokenizer import tokenize_json

TOOLS = {
    "html": (tokenize_html, serialize_html),
    "json": (tokenize_json, serialize_json),
}


def debug_input(category, text):
    tokenize, serialize = TOOLS[category]
    print(f"=== {category} input ({len(text)} characters) ===")
    print(repr(text))

    try:
        tokens = tokenize(text)
    except MalformedInput as e:
        print(f"\n!!! Tokenizer failed: {e} !!!")
        return

    print(f"\nTokens ({len(tokens)}):")
    for i, tok in enumerate(tokens):
        print(f"  {i:4d}  {tok!r}")

    for mode in Mode:
        try:
            output = serialize(tokens, mode)
        except UnbalancedStructure as e:
            print(f"\n!!! {mode.value} serialization failed: {e} !!!")
            continue
        print(f"\n{mode.value}:")
        print(output)

        again = serialize(tokenize(output), mode)
        if again != output:
            print(f"\n!!! {mode.value} output is not stable on a second pass !!!")
            print(again)


if __name__ == "__main__":
    if len(sys.argv) < 3 or sys.argv[1] not in TOOLS:
        print("Usage: python debug_tokenizer.py <html|json> <file | ->")
        print("Example: python debug_tokenizer.py html page.html")
        sys.exit(1)

    source = sys.argv[2]
    data = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    debug_input(sys.argv[1], data)
