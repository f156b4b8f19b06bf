#!/usr/bin/env python3
"""
Local address lookup harness (no HTTP server).

Usage:
  python3 scripts/lookup_local.py 01310100
  python3 scripts/lookup_local.py 01310100 --session local_user_1 --mock

What it does:
- Restores the session from the configured storage (SESSION_STORE_PROVIDER)
- Stores the postal code and runs it through the same AddressResolutionPipeline the API uses
- Prints the outcome and the resulting selection
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from product_page.application.use_cases.resolve_address import AddressResolutionPipeline
from product_page.infrastructure.address.mock_lookup import MockAddressLookup
from product_page.wiring.dependencies import get_address_lookup, get_session_cache


async def run(postal_code: str, session_id: str, use_mock: bool) -> int:
    cache = get_session_cache(session_id)
    lookup = MockAddressLookup() if use_mock else get_address_lookup()
    pipeline = AddressResolutionPipeline(lookup=lookup)

    cache.set_postal_code(postal_code)
    outcome = await pipeline.submit(cache)

    print(f"session_id: {session_id}")
    print(f"status: {outcome.status.value}")
    if outcome.error:
        print(f"error: {outcome.error}")
    address = cache.state.resolved_address
    if address:
        parts = [address.street, address.neighborhood, address.city, address.state]
        print("address: " + ", ".join(p for p in parts if p))
    print(f"quantity: {cache.state.quantity}  size: {cache.state.selected_size or '-'}  color: {cache.state.selected_color or '-'}")
    return 0 if outcome.ok else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Resolve a postal code for a local session")
    parser.add_argument("postal_code")
    parser.add_argument("--session", default="local_user_1")
    parser.add_argument("--mock", action="store_true", help="Use the in-process mock lookup instead of ViaCEP")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.postal_code, args.session, args.mock)))


if __name__ == "__main__":
    main()
