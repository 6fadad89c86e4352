"""Run mixerctl from a source checkout: `python main.py rule get global svc`."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from cli.main import run  # noqa: E402

if __name__ == "__main__":
    run(sys.argv[1:])
