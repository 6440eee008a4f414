"""Fetch the latest final block from mainnet and print its height."""

import asyncio

from nearrpc import new_client
from nearrpc.types import BlockReference


async def main() -> None:
    async with new_client("mainnet") as client:
        block = await client.block(BlockReference.final())
        print(f"block {block.header.height}")


if __name__ == "__main__":
    asyncio.run(main())
