import csv
import json
import os
from typing import List
from .model import ExtractedBid
import pandas as pd
from openpyxl.utils import get_column_letter

import logging
logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    'external_id', 'title', 'posted_date', 'due_date', 'amount', 'quantity',
    'status', 'link', 'portal', 'title_hash', 'description',
]


def _ensure_dir(filename: str):
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)


def _flat_row(item: ExtractedBid) -> dict:
    row = item.to_dict()
    row['documents'] = "; ".join(doc['url'] for doc in row['documents'])
    return row


class Storage:
    @staticmethod
    def save_csv(items: List[ExtractedBid], filename: str):
        if not items:
            return

        rows = [_flat_row(item) for item in items]
        _ensure_dir(filename)

        with open(filename, 'w', newline='', encoding='utf-8-sig') as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)

    @staticmethod
    def save_json(items: List[ExtractedBid], filename: str):
        _ensure_dir(filename)
        data = [item.to_dict() for item in items]
        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    @staticmethod
    def save_excel(items: List[ExtractedBid], filename: str):
        """
        Save bids to an Excel workbook.

        One summary row per bid; attachments go to a separate 'Documents'
        sheet keyed by title_hash.

        Args:
            items: List of ExtractedBid objects
            filename: Output Excel filename
        """
        if not items:
            logger.info("No items to save.")
            return

        _ensure_dir(filename)

        main_rows = []
        document_rows = []
        for item in items:
            data = item.to_dict()
            main_rows.append({k: data[k] for k in SUMMARY_COLUMNS})
            for doc in data['documents']:
                document_rows.append({'title_hash': item.title_hash, 'title': item.title, **doc})

        with pd.ExcelWriter(filename, engine='openpyxl') as writer:
            df_main = pd.DataFrame(main_rows, columns=SUMMARY_COLUMNS).dropna(axis=1, how='all')
            df_main.to_excel(writer, index=False, sheet_name='Bids')
            Storage._auto_adjust_columns(writer, 'Bids', df_main)

            if document_rows:
                df_docs = pd.DataFrame(document_rows)
                df_docs.to_excel(writer, index=False, sheet_name='Documents')
                Storage._auto_adjust_columns(writer, 'Documents', df_docs)

        logger.info(f"Saved {len(main_rows)} bids to {filename} ({len(document_rows)} documents)")

    @staticmethod
    def _auto_adjust_columns(writer, sheet_name, df):
        """Helper to auto-adjust column widths in a sheet."""
        worksheet = writer.sheets[sheet_name]
        for idx, col in enumerate(df.columns):
            max_len = max(
                df[col].astype(str).map(len).max(),
                len(str(col))
            )
            col_letter = get_column_letter(idx + 1)
            worksheet.column_dimensions[col_letter].width = min(max_len + 5, 80)
