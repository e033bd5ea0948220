#!/usr/bin/env python3
"""Profile the turbotools pipelines to find performance bottlenecks."""

import cProfile
import io
import json
import pstats
import sys

from turbotools import minify_html, minify_json, unminify_html, unminify_json

# Sample HTML
html = """
<!DOCTYPE html>
<html>
<head><title>Test</title><style> body { margin: 0 } </style></head>
<body>
    <!-- layout -->
    <div class="container">
        <p>Paragraph 1</p>
        <p>Paragraph   2 with <b>bold</b> text</p>
        <table>
            <tr><td>Cell 1</td><td>Cell 2</td></tr>
            <tr><td>Cell 3</td><td>Cell 4</td></tr>
        </table>
        <script>if (a < b) { run(); }</script>
    </div>
</body>
</html>
""" * 100  # Repeat for more meaningful results

# Sample JSON
document = json.dumps(
    [{"id": i, "name": f"item {i}", "tags": ["a", "b"], "price": i * 1.5, "active": i % 2 == 0} for i in range(2000)],
    indent=2,
)

target = sys.argv[1] if len(sys.argv) > 1 else "all"

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    if target in ("all", "html"):
        unminify_html(minify_html(html))
    if target in ("all", "json"):
        unminify_json(minify_json(document))

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
