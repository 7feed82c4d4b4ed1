"""Run the demo tenant seed: `python -m scripts`."""

import asyncio

from scripts.seed import _run_seed

asyncio.run(_run_seed())
