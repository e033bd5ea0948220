#!/usr/bin/env python3
"""
Performance benchmark for the turbotools minifiers against other implementations.
Reads documents from a directory of plain or zstd-compressed files (*.html,
*.html.zst, *.json, *.json.zst), or generates a synthetic corpus when no
directory is given. Compressed files are decompressed in memory.
"""

# ruff: noqa: PLC0415, BLE001
from __future__ import annotations

import argparse
import gc
import json
import multiprocessing
import os
import pathlib
import random
import sys
import threading
import time

import psutil
import zstandard as zstd


# Lightweight RSS monitor using psutil
class MemoryMonitor:
    def __init__(self, pid: int | None = None, sample_interval: float = 0.01):
        """
        pid: process ID to monitor (default: current process).
        sample_interval: seconds between samples (default 10ms).
        """
        self.sample_interval = sample_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._proc = psutil.Process(pid if pid is not None else os.getpid())
        self.start_rss = None
        self.end_rss = None
        self.peak_rss = None
        self.last_rss = None
        self.samples = 0

    def _get_rss(self) -> int | None:
        try:
            return self._proc.memory_info().rss
        except psutil.Error:
            return None

    def start(self):
        self.start_rss = self._get_rss()
        self.peak_rss = self.start_rss
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.is_set():
            rss = self._get_rss()
            if rss is not None:
                self.last_rss = rss
                if self.peak_rss is None or rss > self.peak_rss:
                    self.peak_rss = rss
                self.samples += 1
            self._stop.wait(self.sample_interval)

    def stop(self):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)

        # Try to get current RSS, if fail (process dead), use last seen
        current = self._get_rss()
        self.end_rss = current if current else self.last_rss

    def to_dict(self) -> dict:
        def mb(x):
            return (x or 0) / (1024 * 1024)

        start_mb = mb(self.start_rss)
        end_mb = mb(self.end_rss)
        delta_mb = end_mb - start_mb if (self.end_rss is not None and self.start_rss is not None) else 0.0
        return {
            "rss_start_mb": start_mb,
            "rss_end_mb": end_mb,
            "rss_delta_mb": delta_mb,
            "rss_peak_mb": mb(self.peak_rss),
            "mem_samples": self.samples,
        }


def load_documents(directory: pathlib.Path, fmt: str, limit: int | None = None) -> list[tuple[str, str]]:
    """
    Load documents of one format from ``directory``.
    Returns list of (filename, content) tuples.
    """
    if not directory.exists():
        print(f"ERROR: Directory not found at {directory}")
        sys.exit(1)
    paths = sorted([*directory.glob(f"*.{fmt}"), *directory.glob(f"*.{fmt}.zst")])
    if limit:
        paths = paths[:limit]
    dctx = zstd.ZstdDecompressor()
    results = []
    for path in paths:
        data = path.read_bytes()
        if path.suffix == ".zst":
            try:
                data = dctx.decompressobj().decompress(data)
            except zstd.ZstdError as e:
                print(f"Warning: Failed to decompress {path.name}: {e}")
                continue
        results.append((path.name, data.decode("utf-8", errors="replace")))
    return results


def synthetic_documents(fmt: str, count: int, seed: int = 0) -> list[tuple[str, str]]:
    """Generate ``count`` pretty-printed documents so minification has work to do."""
    rng = random.Random(seed)
    results = []
    for i in range(count):
        rows = rng.randint(50, 500)
        if fmt == "json":
            value = [
                {"id": n, "name": f"item {n}", "tags": ["a", "b"][: rng.randint(0, 2)], "price": n * 1.25, "ok": True}
                for n in range(rows)
            ]
            content = json.dumps(value, indent=4)
        else:
            body = "\n".join(
                f'    <tr class="row">\n      <td> {n} </td>\n      <td>  cell   {n}  </td>\n    </tr>'
                for n in range(rows)
            )
            content = (
                "<!DOCTYPE html>\n<html>\n  <head>\n    <title>Doc</title>\n"
                "    <script>\n      if (a < b) { run(); }\n    </script>\n  </head>\n"
                f"  <body>\n  <!-- rows -->\n  <table>\n{body}\n  </table>\n  </body>\n</html>\n"
            )
        results.append((f"synthetic-{i}.{fmt}", content))
    return results


def _timed(fn, documents: list, iterations: int) -> dict:
    all_times = []
    errors = 0
    error_files = []
    output_bytes = 0
    # Warm up
    if documents:
        try:
            fn(documents[0][1])
        except Exception:
            pass
    for _ in range(iterations):
        for filename, content in documents:
            try:
                start = time.perf_counter()
                output = fn(content)
                elapsed = time.perf_counter() - start
                all_times.append(elapsed)
                output_bytes += len(output)
            except Exception as e:
                errors += 1
                error_files.append((filename, str(e)))
    return {
        "total_time": sum(all_times),
        "mean_time": sum(all_times) / len(all_times) if all_times else 0,
        "min_time": min(all_times) if all_times else 0,
        "max_time": max(all_times) if all_times else 0,
        "errors": errors,
        "success_count": len(all_times),
        "error_files": error_files,
        "output_chars": output_bytes // max(iterations, 1),
    }


def benchmark_turbotools_html(documents: list, iterations: int = 1) -> dict:
    from turbotools import minify_html

    return _timed(minify_html, documents, iterations)


def benchmark_minify_html(documents: list, iterations: int = 1) -> dict:
    try:
        import minify_html
    except ImportError:
        return {"error": "minify-html not installed"}
    return _timed(minify_html.minify, documents, iterations)


def benchmark_turbotools_json(documents: list, iterations: int = 1) -> dict:
    from turbotools import minify_json

    return _timed(minify_json, documents, iterations)


def benchmark_stdlib_json(documents: list, iterations: int = 1) -> dict:
    def minify(content):
        return json.dumps(json.loads(content), separators=(",", ":"), ensure_ascii=False)

    return _timed(minify, documents, iterations)


BENCHMARKS = {
    "html": {
        "turbotools": benchmark_turbotools_html,
        "minify-html": benchmark_minify_html,
    },
    "json": {
        "turbotools": benchmark_turbotools_json,
        "json": benchmark_stdlib_json,
    },
}


def _benchmark_worker(bench_fn, documents, iterations, queue):
    """Worker function to run benchmark in a separate process."""
    try:
        queue.put(bench_fn(documents, iterations))
    except Exception as e:
        queue.put({"error": str(e)})


def run_benchmark_isolated(bench_fn, documents, iterations, args):
    """Run benchmark in a separate process to isolate memory usage."""
    if args.no_mem:
        return bench_fn(documents, iterations)

    gc.collect()

    queue = multiprocessing.Queue()
    p = multiprocessing.Process(target=_benchmark_worker, args=(bench_fn, documents, iterations, queue))
    p.start()

    # Monitor the child process
    mon = MemoryMonitor(pid=p.pid, sample_interval=max(0.0005, args.mem_sample_ms / 1000.0))
    mon.start()

    res = None
    try:
        res = queue.get()
    finally:
        mon.stop()
        p.join()

    if res and "error" not in res:
        res.update(mon.to_dict())
    return res


def print_results(results: dict, fmt: str, file_count: int, total_chars: int, iterations: int = 1):
    """Pretty print benchmark results."""
    print("\n" + "=" * 100)
    if iterations > 1:
        print(f"BENCHMARK RESULTS ({file_count} {fmt} files x {iterations} iterations)")
    else:
        print(f"BENCHMARK RESULTS ({file_count} {fmt} files)")
    print("=" * 100)

    header = (
        f"\n{'Minifier':<15} {'Total (s)':<10} {'Mean (ms)':<10} {'Peak (MB)':<10} {'Delta (MB)':<10} "
        f"{'Ratio':<8} {'Errors':<8}"
    )
    print(header)
    print("-" * 100)

    baseline = results.get("turbotools", {}).get("total_time", 0)

    for name, result in results.items():
        if "error" in result:
            print(f"{name:<15} {result['error']}")
            continue

        total = result["total_time"]
        mean_ms = result["mean_time"] * 1000
        ratio = result["output_chars"] / total_chars if total_chars else 0
        mem_str = (
            f"{result['rss_peak_mb']:>10.1f} {result['rss_delta_mb']:>10.1f}"
            if "rss_peak_mb" in result
            else f"{'n/a':>10} {'n/a':>10}"
        )

        speedup = ""
        if name != "turbotools" and baseline > 0 and total > 0:
            speedup = f" ({total / baseline:.2f}x)"

        print(f"{name:<15} {total:<10.3f} {mean_ms:<10.3f} {mem_str} {ratio:<8.3f} {result['errors']:<8}{speedup}")

    print("\n" + "=" * 100)

    # Error details
    for name, result in results.items():
        error_files = result.get("error_files", [])
        if error_files:
            print(f"\nErrors for {name}:")
            for filename, error_msg in error_files:
                print(f"  {filename}: {error_msg}")
            print()


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark turbotools minifiers against other implementations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--format", "-f", choices=sorted(BENCHMARKS), default="html", help="Document format")
    parser.add_argument("--dir", type=pathlib.Path, help="Directory with documents (*.html[.zst] or *.json[.zst])")
    parser.add_argument(
        "--limit", type=int, default=100, help="Limit number of files to test (default: 100, use 0 for all)",
    )
    parser.add_argument(
        "--iterations", type=int, default=5, help="Number of iterations to run for averaging (default: 5)",
    )
    parser.add_argument(
        "--minifiers",
        nargs="+",
        help="Minifiers to benchmark (default: all for the format)",
    )
    parser.add_argument("--no-mem", action="store_true", help="Disable memory measurement (RSS sampling)")
    parser.add_argument(
        "--mem-sample-ms", type=float, default=10.0, help="Memory sampling interval in milliseconds (default: 10ms)",
    )

    args = parser.parse_args()

    available = BENCHMARKS[args.format]
    names = args.minifiers or list(available)
    unknown = [name for name in names if name not in available]
    if unknown:
        parser.error(f"unknown minifier(s) for {args.format}: {', '.join(unknown)}")

    limit = args.limit if args.limit > 0 else None
    if args.dir:
        print(f"Loading {args.format} files from {args.dir}...")
        documents = load_documents(args.dir, args.format, limit)
    else:
        print("Generating synthetic documents...")
        documents = synthetic_documents(args.format, limit or 100)
    if not documents:
        print("ERROR: No documents loaded")
        sys.exit(1)
    print(f"Loaded {len(documents)} {args.format} files")

    total_chars = sum(len(content) for _, content in documents)
    print(f"Total size: {total_chars / 1024 / 1024:.2f} MB")

    results = {}
    for name in names:
        print(f"\nBenchmarking {name}...", end="", flush=True)
        res = run_benchmark_isolated(available[name], documents, args.iterations, args)
        results[name] = res
        if "error" in res:
            print(f" SKIPPED ({res['error']})")
        else:
            print(
                f" DONE ({res['total_time']:.3f}s"
                + (f", peak RSS {res['rss_peak_mb']:.1f} MB" if "rss_peak_mb" in res else "")
                + ")",
            )

    print_results(results, args.format, len(documents), total_chars, args.iterations)


if __name__ == "__main__":
    main()
