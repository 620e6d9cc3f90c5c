"""Report which Web3 data providers the bot can reach with the current settings.

Exits non-zero when a configured provider is unreachable.
"""

from __future__ import annotations

import asyncio
import sys

from routerbot.integrations import ProviderStatus, check_providers
from routerbot.monitoring.logging import configure_logging


def describe(status: ProviderStatus) -> str:
    if not status.configured:
        return f"-- {status.provider}: {status.detail}"
    if status.reachable:
        return f"OK {status.provider}: {status.detail}"
    extras = []
    if status.status_code is not None:
        extras.append(f"HTTP {status.status_code}")
    if status.retryable:
        extras.append("retryable")
    suffix = f" ({', '.join(extras)})" if extras else ""
    return f"!! {status.provider}: {status.detail}{suffix}"


def main() -> int:
    configure_logging()
    statuses = asyncio.run(check_providers())
    for status in statuses:
        print(describe(status))
    return 0 if all(status.ok for status in statuses) else 1


if __name__ == "__main__":
    sys.exit(main())
