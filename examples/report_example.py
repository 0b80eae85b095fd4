import tempfile
import webbrowser
from pathlib import Path

from cov_visualizer import ReportVisualizer, SummaryVisualizer

source = (
    "main =\n"
    "    if x then\n"
    "        1\n"
    "    else\n"
    "        2\n"
)

# Decoded coverage payload: module -> coverage kind -> regions
coverage = {
    "Main": {
        "declarations": [
            {"from": {"line": 1, "column": 1}, "to": {"line": 5, "column": 10}, "count": 1},
        ],
        "ifElseBranches": [
            {"from": {"line": 3, "column": 9}, "to": {"line": 3, "column": 10}, "count": 1},
            {"from": {"line": 5, "column": 9}, "to": {"line": 5, "column": 10}, "count": 0},
        ],
    },
}

report = ReportVisualizer(page=True)
# Optional: relabel a kind or give it a different accent color
report.add_kind("ifElseBranches", label="Branches", color="orangered")

html = report.visualize(coverage, {"Main": source})
summary = SummaryVisualizer().visualize(coverage, output_format="html")

# Render HTML in Browser
with tempfile.NamedTemporaryFile('w', delete=False, suffix='.html', encoding='utf-8') as f:
    f.write(html.replace("</body>", summary + "\n</body>"))
    url = Path(f.name).as_uri()
webbrowser.open(url)
