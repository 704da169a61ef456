from typing import List
import argparse
import aiohttp
import asyncio
import logging

import sentry_sdk

from social.graze.did.config import Settings
from social.graze.did.resolve.web import WebResolver

logger = logging.getLogger(__name__)


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="resolve", description="Resolve DID documents"
    )
    parser.add_argument("url", nargs="+", help="The DID document URL(s) to fetch.")
    parser.add_argument(
        "--download-max",
        type=int,
        default=None,
        help="The upper boundary for document sizes in bytes. Negative disables.",
    )
    parser.add_argument(
        "--meta", action="store_true", help="Print resolution metadata too."
    )

    args = vars(parser.parse_args())

    settings = Settings()  # type: ignore
    if args.get("download_max") is not None:
        settings = Settings(download_max=args.get("download_max"))  # type: ignore

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn)

    urls: List[str] = args.get("url", [])

    async with aiohttp.ClientSession() as session:
        resolver = WebResolver(session, settings)
        for url in urls:
            try:
                document, meta = await resolver.fetch(url)
                print(document.to_json())
                if args.get("meta"):
                    print(meta.model_dump_json(by_alias=True, exclude_none=True))
            except Exception:
                logging.exception("Exception resolving DID document %s", url)


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
