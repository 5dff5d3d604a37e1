import argparse
import logging
import os
import signal
import sys

from septa_crawler.config import DATA_DIR, DEBUG
from septa_crawler.crawler import SeptaCrawler
from septa_crawler.errors import CrawlerError
from septa_crawler.model import Credential
from septa_crawler.state import BidStore
from septa_crawler.storage import Storage


def _terminate(signum, frame):
    # Unwind through the session's context manager so the browser is closed
    raise SystemExit(128 + signum)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Collect open bids from the SEPTA vendor portal")
    parser.add_argument("--debug", action="store_true", default=DEBUG, help="save checkpoint screenshots")
    parser.add_argument("--test-connection", action="store_true", help="only check that login works")
    parser.add_argument("--no-login", action="store_true", help="crawl without authenticating")
    parser.add_argument("--output-dir", default=DATA_DIR)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    signal.signal(signal.SIGTERM, _terminate)

    logger = logging.getLogger("Main")
    logger.info("Starting SEPTA bid crawler")

    crawler = SeptaCrawler(
        credentials=Credential.from_env(),
        debug=args.debug,
        require_login=not args.no_login,
    )

    if args.test_connection:
        return 0 if crawler.test_connection() else 1

    try:
        bids = crawler.run()
    except CrawlerError as e:
        logger.error(f"Crawler failed: {e}")
        return 1

    logger.info(f"Crawling finished. Collected {len(bids)} items.")
    store = BidStore(os.path.join(args.output_dir, "bids.json"))
    store.upsert(bids)
    store.save_state()

    Storage.save_json(bids, os.path.join(args.output_dir, "results.json"))
    Storage.save_csv(bids, os.path.join(args.output_dir, "results.csv"))
    try:
        Storage.save_excel(bids, os.path.join(args.output_dir, "results.xlsx"))
    except Exception as e:
        logger.error(f"Failed to save Excel: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
