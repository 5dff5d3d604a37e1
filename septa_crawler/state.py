import json
import os
import logging
from dataclasses import dataclass
from typing import Dict, Iterable

from .model import ExtractedBid

logger = logging.getLogger(__name__)

# Fields whose change makes a re-scraped bid worth rewriting
TRACKED_FIELDS = ('link', 'description', 'documents')


@dataclass
class UpsertResult:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0


class BidStore:
    """JSON-file bid store keyed by (portal, title_hash)."""

    def __init__(self, state_file: str = "data/bids.json"):
        self.state_file = state_file
        self.records: Dict[str, dict] = {}
        self.load_state()

    @staticmethod
    def key_for(portal: str, title_hash: str) -> str:
        return f"{portal}:{title_hash}"

    def load_state(self):
        if os.path.exists(self.state_file):
            try:
                with open(self.state_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                    self.records = data.get('bids', {})
                logger.info(f"Loaded {len(self.records)} stored bids from state.")
            except Exception as e:
                logger.error(f"Failed to load state: {e}")
        else:
            logger.info("No existing state found. Starting fresh.")

    def save_state(self):
        directory = os.path.dirname(self.state_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            with open(self.state_file, 'w', encoding='utf-8') as f:
                json.dump({'bids': self.records}, f, ensure_ascii=False, indent=2)
            logger.info("State saved.")
        except Exception as e:
            logger.error(f"Failed to save state: {e}")

    def __contains__(self, bid: ExtractedBid) -> bool:
        return self.key_for(bid.portal, bid.title_hash) in self.records

    def __len__(self):
        return len(self.records)

    def upsert(self, bids: Iterable[ExtractedBid]) -> UpsertResult:
        result = UpsertResult()
        for bid in bids:
            key = self.key_for(bid.portal, bid.title_hash)
            record = bid.to_dict()
            existing = self.records.get(key)

            if existing is None:
                self.records[key] = record
                result.inserted += 1
                logger.info(f"Inserted new bid: {bid.title}")
            elif any(existing.get(f) != record[f] for f in TRACKED_FIELDS):
                self.records[key] = record
                result.updated += 1
                logger.info(f"Updated bid: {bid.title}")
            else:
                result.skipped += 1

        logger.info(f"Upsert complete: {result.inserted} inserted, {result.updated} updated, {result.skipped} unchanged")
        return result
