# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""TextRecord ORM model – one encrypted text awaiting pickup."""

from sqlalchemy import Column, Index, Integer, Text

from database import Base


class TextRecord(Base):
    __tablename__ = "texts"
    # Supports the periodic sweep: DELETE ... WHERE expires_at <= now
    __table_args__ = (Index("idx_expires_at", "expires_at"),)

    id = Column(Text, primary_key=True)
    # base64url( salt || ciphertext || 16-byte GCM tag ) – opaque to the server
    cipher_text = Column(Text, nullable=False)
    # base64url( 12-byte AES-GCM nonce ) – opaque to the server
    iv = Column(Text, nullable=False)
    # Unix seconds
    created_at = Column(Integer, nullable=False)
    expires_at = Column(Integer, nullable=False)

    def is_expired(self, now: int) -> bool:
        return self.expires_at <= now
