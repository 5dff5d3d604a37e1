# Recall over precision: one hit anywhere is enough.
BID_KEYWORDS = [
    'solicitation', 'bid', 'rfp', 'rfq', 'proposal', 'contract',
    'procurement', 'vendor', 'invitation', 'award', 'notice',
    'requisition', 'quote', 'purchase', 'services', 'supplies',
    'equipment', 'maintenance', 'construction', 'repair',
    'consulting', 'professional', 'installation', 'delivery',
]


def is_bid_related(text: str) -> bool:
    if not text:
        return False
    lower_text = text.lower()
    return any(keyword in lower_text for keyword in BID_KEYWORDS)
