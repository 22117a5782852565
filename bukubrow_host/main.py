"""Main entry point for the bookmarks native messaging host.

The browser launches this script from the native messaging manifest and
passes the calling extension's origin as an argument, which is ignored.
"""
import sys
from pathlib import Path

# Add project root to Python path for absolute imports
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import asyncio
from bukubrow_host.host import main


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
