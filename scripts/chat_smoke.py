"""
Manual smoke test for a running deployment.

Logs in with an existing account, sends one ordinary message through the
relay and one crisis message that must be answered locally.

Usage:
    python scripts/chat_smoke.py http://localhost:3000 <name> <password>
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from alliswell.core.logging import setup_logging  # noqa: E402
from alliswell.libs.chat_client import ChatClientError, WellnessChatClient  # noqa: E402


async def run(base_url: str, name: str, password: str) -> int:
    async with WellnessChatClient(base_url) as client:
        try:
            await client.login(name, password)
        except ChatClientError as exc:
            print(f"Login failed: {exc}")
            return 1

        outcome = await client.send("I had a long day and want to unwind.")
        print(f"Relay reply: {outcome.reply}")

        outcome = await client.send("Sometimes I feel like I can't go on.")
        print(f"Intercepted locally: {outcome.intercepted}")
        for resource in outcome.resources:
            print(f"  - {resource['name']}: {resource['contact']}")
        return 0 if outcome.intercepted else 1


def main() -> None:
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    setup_logging()
    sys.exit(asyncio.run(run(sys.argv[1], sys.argv[2], sys.argv[3])))


if __name__ == "__main__":
    main()
