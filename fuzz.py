#!/usr/bin/env python3
"""
Random fuzzer for the turbotools pipelines.
Generates malformed HTML and JSON and checks that every failure is a typed
error and that every output is stable under a second pass.
"""

import argparse
import json
import random
import string
import sys
import time
import traceback

from turbotools import TurboToolsError, minify_html, minify_json, unminify_html, unminify_json

TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "th", "ul", "ol", "li",
    "form", "input", "button", "select", "option", "textarea", "script", "style",
    "head", "body", "html", "title", "meta", "link", "br", "hr", "pre", "dl", "dt", "dd",
]

RAW_TEXT_TAGS = ["script", "style", "textarea", "pre", "title"]

ATTRIBUTES = ["id", "class", "style", "href", "src", "alt", "title", "data-x", "disabled", "checked"]

SPECIAL_CHARS = [
    "\x00", "\x0b", "\x0c", "\x7f",  # Control chars
    "\ufffd",  # Replacement character
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b",  # Zero-width space
    "\ufeff",  # BOM
]

JSON_SCALARS = [
    "0", "-0", "1", "-1.5", "1e10", "1E-5", "0.0", "123456789012345678901234567890",
    "true", "false", "null", '""', '"x"', '"\\u00e9"', '"a\\"b"', '"\\\\"', '"\\/"',
]

JSON_BROKEN = [
    "01", "1.", ".5", "+1", "-", "1e", "tru", "nul", "NaN", "Infinity",
    '"\\x"', '"\\u12"', '"\x01"', '"open', "'single'", ",", ":", "]", "}",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\r", "\f", ""]
    return "".join(random.choices(ws, k=random.randint(0, 5)))


# ---------------------
# HTML
# ---------------------


def fuzz_attribute():
    name = random.choice([random.choice(ATTRIBUTES), random_string(1, 8), "=", "<", '"'])
    value = random.choice([random_string(0, 30), "<!-- x -->", "a\"b'c", "&amp;", "", random.choice(SPECIAL_CHARS)])
    quote_start, quote_end = random.choice([('="', '"'), ("='", "'"), ("=", ""), ("", ""), ('="', ""), ("==", "")])
    if not quote_start:
        return name
    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    tag = random.choice([random.choice(TAGS), random.choice(TAGS).upper(), random_string(1, 6)])
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    close = random.choice([">", "/>", " >", "", " / >"])
    return f"<{tag}{random_whitespace()}{attrs}{close}"


def fuzz_close_tag():
    tag = random.choice(TAGS)
    return random.choice([f"</{tag}>", f"</{tag.upper()} >", f"</{tag} junk>", "</>", f"</{tag}"])


def fuzz_comment():
    return random.choice([
        f"<!--{random_string()}-->",
        f"<!-- {random_whitespace()} -->",
        "<!---->",
        "<!-->",
        f"<!--{random_string()}",  # Unclosed
        f"<!-- <div> -->",
    ])


def fuzz_declaration():
    return random.choice([
        "<!DOCTYPE html>",
        "<!doctype html>",
        "<!DOCTYPE",  # Unclosed
        f"<![CDATA[{random_string()}]]>",
        "<![CDATA[",  # Unclosed
        '<?xml version="1.0"?>',
        "<?php echo 1",  # Unclosed
    ])


def fuzz_raw_text():
    tag = random.choice(RAW_TEXT_TAGS)
    body = random.choice([
        "if (a < b) { x = '</div>'; }",
        "<!-- not a comment -->",
        f"  {random_string()}\n   {random_string()}  ",
        f"</{tag}",  # Partial close
        "",
    ])
    close = random.choice([f"</{tag}>", f"</{tag.upper()}>", f"</{tag} >", ""])
    return f"<{tag}>{body}{close}"


def fuzz_text():
    return random.choice([
        random_string(0, 40),
        random_whitespace() + random_string() + random_whitespace(),
        "a < b",
        "x <3 y",
        "&lt;&amp;&gt;",
        random.choice(SPECIAL_CHARS) * random.randint(1, 4),
        "<",
        "</ ",
    ])


def fuzz_nested_structure(depth=0, max_depth=8):
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()
    tag = random.choice(TAGS)
    children = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))
    close = f"</{tag}>" if random.random() < 0.8 else ""
    return f"<{tag}>{random_whitespace()}{children}{random_whitespace()}{close}"


def generate_fuzzed_html():
    strategies = [
        fuzz_open_tag,
        fuzz_close_tag,
        fuzz_comment,
        fuzz_declaration,
        fuzz_raw_text,
        fuzz_text,
        fuzz_nested_structure,
    ]
    parts = [random.choice(strategies)() for _ in range(random.randint(1, 20))]
    return random_whitespace().join(parts)


# ---------------------
# JSON
# ---------------------


def fuzz_json_value(depth=0, max_depth=6):
    if depth >= max_depth or random.random() < 0.4:
        return random.choice(JSON_SCALARS)
    ws = random_whitespace if random.random() < 0.5 else lambda: ""
    if random.random() < 0.5:
        items = [fuzz_json_value(depth + 1, max_depth) for _ in range(random.randint(0, 4))]
        return "[" + ws() + ("," + ws()).join(items) + ws() + "]"
    members = [
        f"{json.dumps(random_string(0, 6))}{ws()}:{ws()}{fuzz_json_value(depth + 1, max_depth)}"
        for _ in range(random.randint(0, 4))
    ]
    return "{" + ws() + ("," + ws()).join(members) + ws() + "}"


def generate_fuzzed_json():
    text = fuzz_json_value()
    if random.random() < 0.5:
        return text
    # Break a valid document
    mutation = random.choice(["truncate", "insert", "delete", "duplicate"])
    pos = random.randint(0, len(text))
    if mutation == "truncate":
        return text[:pos]
    if mutation == "insert":
        return text[:pos] + random.choice(JSON_BROKEN + SPECIAL_CHARS) + text[pos:]
    if mutation == "delete":
        return text[:pos] + text[pos + 1 :]
    return text + text


# The last field says whether minify(unminify(x)) == minify(x) must hold.
# For HTML it does not when a comment sits between two text runs.
FORMATS = {
    "html": (generate_fuzzed_html, minify_html, unminify_html, False),
    "json": (generate_fuzzed_json, minify_json, unminify_json, True),
}


def check_document(minify, unminify, document, round_trip=True):
    """Run both directions; raise AssertionError when an output is not stable."""
    compact = minify(document)
    assert minify(compact) == compact, "minify is not idempotent"
    pretty = unminify(document)
    assert unminify(pretty) == pretty, "unminify is not idempotent"
    if round_trip:
        assert minify(pretty) == compact, "minify(unminify(x)) != minify(x)"


def run_fuzzer(fmt, num_tests, seed=None, verbose=False, save_failures=False):
    generate, minify, unminify, round_trip = FORMATS[fmt]
    if seed is not None:
        random.seed(seed)

    crashes = []
    unstable = []
    hangs = []
    rejected = 0
    successes = 0

    print(f"Fuzzing {fmt} with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        document = generate()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            check_document(minify, unminify, document, round_trip)
            elapsed = time.perf_counter() - start

            # Check for hangs (>5 seconds)
            if elapsed > 5.0:
                hangs.append({"test_num": i, "input": document, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            else:
                successes += 1

        except TurboToolsError:
            rejected += 1
        except AssertionError as e:
            unstable.append({"test_num": i, "input": document, "error": str(e), "traceback": traceback.format_exc()})
            if verbose:
                print(f"  UNSTABLE: Test {i}: {e}")
        except Exception as e:
            crashes.append({"test_num": i, "input": document, "error": repr(e), "traceback": traceback.format_exc()})
            if verbose:
                print(f"  CRASH: Test {i}: {e!r}")

    elapsed_total = time.time() - start_time

    # Report results
    print(f"\n{'=' * 60}")
    print(f"FUZZING RESULTS: {fmt}")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Rejected:       {rejected}")
    print(f"Unstable:       {len(unstable)}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests / elapsed_total:.1f}")

    failures = crashes + unstable
    if failures:
        print(f"\n{'=' * 60}")
        print("FAILURE DETAILS:")
        print(f"{'=' * 60}")
        for failure in failures[:10]:  # Show first 10
            print(f"\nTest #{failure['test_num']}:")
            print(f"  Input: {failure['input'][:200]!r}...")
            print(f"  Error: {failure['error']}")
        if len(failures) > 10:
            print(f"\n... and {len(failures) - 10} more failures")

    if hangs:
        print(f"\n{'=' * 60}")
        print("HANG DETAILS:")
        print(f"{'=' * 60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  Input: {hang['input'][:200]!r}...")

    if save_failures and (failures or hangs):
        filename = f"fuzz_failures_{fmt}_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Fuzzing results for {fmt}\n")
            f.write(f"Seed: {seed}\n\n")
            for failure in failures:
                f.write(f"=== FAILURE #{failure['test_num']} ===\n")
                f.write(f"Input:\n{failure['input']}\n")
                f.write(f"Error: {failure['error']}\n")
                f.write(f"Traceback:\n{failure['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"Input:\n{hang['input']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not failures and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the turbotools minifiers with malformed input")
    parser.add_argument(
        "--format", "-f",
        choices=sorted(FORMATS),
        default="html",
        help="Input format to fuzz (default: html)",
    )
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed documents (no processing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        generate = FORMATS[args.format][0]
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate())
            print()
        return

    success = run_fuzzer(
        args.format,
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
