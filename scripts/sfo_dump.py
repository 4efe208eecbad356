"""Print every key/value pair of a PARAM.SFO file.

Runnable from the `scripts/` directory; the real implementation lives in the
`sfokit` package, so the project root is put on sys.path before importing it.
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
	sys.path.insert(0, str(PROJECT_ROOT))

from sfokit.cli import app  # noqa: E402

if __name__ == "__main__":
	app(["show", *sys.argv[1:]])
