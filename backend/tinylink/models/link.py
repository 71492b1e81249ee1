from sqlalchemy import Column, Integer, String, func, Index
from ..database import Base, UTCDateTime


class Link(Base):
    """Short link model"""
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(10), unique=True, nullable=False)
    target = Column(String(2048), nullable=False)
    created_at = Column(UTCDateTime(), nullable=False, server_default=func.now())
    clicks = Column(Integer, nullable=False, default=0, server_default="0")
    last_clicked = Column(UTCDateTime(), nullable=True)

    # Codes are unique regardless of case; the database enforces it
    __table_args__ = (
        Index('idx_links_code_lower', func.lower(code), unique=True),
        Index('idx_links_created_at', created_at),
    )

    def __repr__(self):
        return f"<Link {self.code} -> {self.target}>"
