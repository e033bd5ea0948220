"""
Build script for turbotools.

Set TURBOTOOLS_USE_MYPYC=1 to compile the tokenizers and serializers with mypyc;
MYPYC_OPT_LEVEL and MYPYC_DEBUG_LEVEL are passed through.
"""

import os
import sys
from pathlib import Path

from setuptools import setup

# The CLI and input layer stay interpreted.
MYPYC_MODULES = [
    "src/turbotools/json_tokenizer.py",
    "src/turbotools/json_serialize.py",
    "src/turbotools/html_tokenizer.py",
    "src/turbotools/html_serialize.py",
    "src/turbotools/formatting.py",
]


def mypyc_extensions() -> list:
    if os.environ.get("TURBOTOOLS_USE_MYPYC", "0") != "1":
        return []
    try:
        from mypyc.build import mypycify
    except ImportError:
        sys.exit("TURBOTOOLS_USE_MYPYC=1 needs mypyc: pip install turbotools[mypyc]")

    missing = [path for path in MYPYC_MODULES if not Path(path).exists()]
    if missing:
        sys.exit(f"mypyc module(s) not found: {', '.join(missing)}")

    return mypycify(
        MYPYC_MODULES,
        opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"),
        debug_level=os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    setup(ext_modules=mypyc_extensions())
