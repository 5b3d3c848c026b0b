from sqlalchemy import Column, Integer, String, DateTime, JSON, Text
from datetime import datetime
from pageguard.database import Base

class VerdictRecord(Base):
    """One row of the history ledger, keyed by full resource identity"""
    __tablename__ = "verdict_history"

    id = Column(Integer, primary_key=True, index=True)
    resource_id = Column(Text, nullable=False)
    # Hash of resource_id, keeps the unique index short for long URLs
    resource_key = Column(String(64), unique=True, index=True, nullable=False)

    host = Column(String(255), index=True)
    findings = Column(JSON, default=list)
    safety_score = Column(Integer, default=100)
    risk_level = Column(Integer, default=0)
    evaluated_at = Column(DateTime, default=datetime.utcnow)

    # Insertion order used for FIFO eviction
    sequence = Column(Integer, index=True, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class WhitelistEntry(Base):
    __tablename__ = "whitelist_entries"

    id = Column(Integer, primary_key=True, index=True)
    host = Column(String(255), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
