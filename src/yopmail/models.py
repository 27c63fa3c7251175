"""
Values returned by the client.
"""

from __future__ import annotations
from dataclasses import dataclass

from yopmail.utils.transform import random_mail_id


@dataclass(frozen=True)
class RenderedMessage:
    """Scraped HTML of one message, with the id used to fetch it and its mailbox."""

    content: str
    mail_id: str
    username: str

    @classmethod
    def create(cls, content: str, username: str, mail_id: str = "") -> "RenderedMessage":
        """Build a message, labelling it with a random id when none is given."""
        return cls(content=content, mail_id=mail_id or random_mail_id(), username=username)

    @property
    def is_empty(self) -> bool:
        return not self.content

    def __str__(self) -> str:
        return self.content
