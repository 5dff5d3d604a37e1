import os
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class Document:
    """Attachment linked from a listing row"""
    name: str
    url: str

    def to_dict(self):
        return {'name': self.name, 'url': self.url}


@dataclass
class ExtractedBid:
    """Data model for a single bid notice scraped from the listing"""
    portal: str
    title: str
    link: str = ""
    posted_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: str = ""
    quantity: str = ""
    external_id: str = ""
    description: str = ""
    documents: List[Document] = field(default_factory=list)

    # Identity: (portal, title_hash) is the natural key
    title_hash: str = ""
    status: str = "open"

    @property
    def key(self):
        return (self.portal, self.title_hash)

    def to_dict(self):
        data = dict(self.__dict__)
        data['posted_date'] = self.posted_date.isoformat() if self.posted_date else None
        data['due_date'] = self.due_date.isoformat() if self.due_date else None
        data['documents'] = [doc.to_dict() for doc in self.documents]
        return data


@dataclass
class Credential:
    """Decrypted portal login. Only ever held in memory for one run."""
    username: str
    password: str = field(repr=False)

    @classmethod
    def from_env(cls, prefix: str = "SEPTA") -> Optional["Credential"]:
        username = os.getenv(f"{prefix}_USERNAME")
        password = os.getenv(f"{prefix}_PASSWORD")
        if not username or not password:
            return None
        return cls(username=username, password=password)
