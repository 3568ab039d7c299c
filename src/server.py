"""Protean Engine runner for the storefront domain.

With ``PROTEAN_ENV=production`` events are processed asynchronously, and
this Engine is what delivers them to event handlers such as the redeem point
awarder.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


async def run():
    from storefront.domain import storefront

    storefront.init()
    await Engine(storefront).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
