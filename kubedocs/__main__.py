"""Entry point for `python -m kubedocs`.

Usage:
    python -m kubedocs
    uv run python -m kubedocs
"""

from __future__ import annotations

import asyncio

from kubedocs.app import main

asyncio.run(main())
