"""
Write the product feed to a build artifact so it can be served statically.
"""

import sys
import asyncio
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from sokohub_feed.config import get_settings
from sokohub_feed.core.feed.service import CatalogReader, FeedUnavailableError, generate_feed
from sokohub_feed.core.supabase_client import SupabaseCatalogClient

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Pre-render the Google Merchant Center feed")
    parser.add_argument(
        "--output",
        "-o",
        default=settings.prerender_output_path,
        help=f"Output file (default: {settings.prerender_output_path})",
    )
    return parser.parse_args(argv)


async def prerender(output: Path, catalog: Optional[CatalogReader] = None) -> int:
    """
    Generate the feed once and write it to output.

    Args:
        output: Destination file
        catalog: Catalog reader; a Supabase client from settings when omitted

    Returns:
        Number of feed items written

    Raises:
        FeedUnavailableError: If the catalog cannot be read or is empty
    """
    settings = get_settings()
    owns_client = catalog is None
    if catalog is None:
        catalog = SupabaseCatalogClient(
            base_url=settings.supabase_url,
            api_key=settings.supabase_key,
            timeout=settings.supabase_timeout,
            page_size=settings.supabase_page_size,
        )

    try:
        result = await generate_feed(catalog, settings.to_feed_config())
    finally:
        if owns_client:
            await catalog.close()

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.xml, encoding="utf-8")
    logger.info(f"Wrote {result.items_count} feed items to {output}")
    return result.items_count


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    logging.basicConfig(level=get_settings().log_level.upper(), format="%(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        count = asyncio.run(prerender(Path(args.output)))
    except FeedUnavailableError as e:
        print(f"❌ Feed unavailable: {e}", file=sys.stderr)
        return 1

    print(f"✅ Wrote {count} feed items to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
