#!/usr/bin/env python3
"""suivm entry point"""

import sys

try:
    import aiohttp  # noqa
    import aiofiles  # noqa
    import click  # noqa
    import pydantic  # noqa
except ImportError as e:
    print(f"Critical import failed: {e}")
    print("Please run: pip install -e .")
    sys.exit(1)

if __name__ == "__main__":
    sys.dont_write_bytecode = True
    from suivm.cli import main

    main()
