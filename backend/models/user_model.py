from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from backend.utils.db import isoformat


@dataclass
class User:
    name: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc):
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            email=doc["email"],
            password_hash=doc["password_hash"],
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_doc(self):
        return {
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_public(self):
        # Never expose password_hash.
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
        }
