import hashlib
import logging
import threading
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pageguard.config import settings
from pageguard.core.findings import RiskLevel
from pageguard.models import VerdictRecord
from pageguard.schemas import Finding, SecurityVerdict

logger = logging.getLogger(__name__)

# Serializes ledger writes across sessions in this process. Workers in other
# processes are only guarded by the unique resource_key: a conflicting insert
# is retried as an overwrite, and sequence ties between processes are possible.
_ledger_lock = threading.Lock()
_INSERT_ATTEMPTS = 2


def resource_key(resource_id: str) -> str:
    return hashlib.sha256(resource_id.encode('utf-8')).hexdigest()


class HistoryStore:
    """
    Bounded ledger of past verdicts keyed by full resource identity.

    Eviction is FIFO over an explicit, persisted insertion sequence.
    Re-recording an existing resource overwrites it in place and makes it
    the freshest entry.
    """

    def __init__(self, db: Session, capacity: Optional[int] = None):
        self.db = db
        self.capacity = capacity if capacity is not None else settings.HISTORY_CAPACITY
        if self.capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {self.capacity}")

    def record(self, verdict: SecurityVerdict) -> None:
        """
        Insert or overwrite the verdict for verdict.resource_id

        Args:
            verdict: Verdict to store; replaces any earlier one for the same resource
        """
        key = resource_key(verdict.resource_id)
        findings = [f.model_dump(mode='json') for f in verdict.findings]

        with _ledger_lock:
            for attempt in range(_INSERT_ATTEMPTS):
                try:
                    self._write(key, verdict, findings)
                    self.db.commit()
                    break
                except IntegrityError:
                    # Another worker inserted the same resource first; retry as an overwrite
                    self.db.rollback()
                    if attempt == _INSERT_ATTEMPTS - 1:
                        logger.error(f"❌ Could not record verdict for {verdict.resource_id}: key conflict")
                        raise
                    logger.warning(f"⚠️ Concurrent insert for {verdict.host}, retrying as overwrite")
                except SQLAlchemyError as e:
                    self.db.rollback()
                    logger.error(f"❌ Failed to record verdict for {verdict.resource_id}: {e}")
                    raise

        logger.info(f"✓ Recorded verdict for {verdict.host}: score={verdict.safety_score} ({verdict.risk_level.name})")

    def _find_record(self, key: str) -> Optional[VerdictRecord]:
        return self.db.query(VerdictRecord).filter(VerdictRecord.resource_key == key).first()

    def _write(self, key: str, verdict: SecurityVerdict, findings: List[dict]) -> None:
        next_sequence = (self.db.query(func.max(VerdictRecord.sequence)).scalar() or 0) + 1
        record = self._find_record(key)

        if record:
            record.host = verdict.host
            record.findings = findings
            record.safety_score = verdict.safety_score
            record.risk_level = int(verdict.risk_level)
            record.evaluated_at = verdict.evaluated_at
            record.sequence = next_sequence
            return

        self.db.add(VerdictRecord(
            resource_id=verdict.resource_id,
            resource_key=key,
            host=verdict.host,
            findings=findings,
            safety_score=verdict.safety_score,
            risk_level=int(verdict.risk_level),
            evaluated_at=verdict.evaluated_at,
            sequence=next_sequence,
        ))
        self.db.flush()
        self._evict_overflow()

    def _evict_overflow(self) -> None:
        overflow = self.db.query(func.count(VerdictRecord.id)).scalar() - self.capacity
        if overflow <= 0:
            return

        oldest = (
            self.db.query(VerdictRecord)
            .order_by(VerdictRecord.sequence.asc())
            .limit(overflow)
            .all()
        )
        for record in oldest:
            logger.debug(f"Evicting oldest history entry: {record.resource_id}")
            self.db.delete(record)

    def get(self, resource_id: str) -> Optional[SecurityVerdict]:
        """Return the stored verdict, or None when the resource was never recorded"""
        record = (
            self.db.query(VerdictRecord)
            .filter(VerdictRecord.resource_key == resource_key(resource_id))
            .first()
        )
        return self._to_verdict(record) if record else None

    def entries(self, limit: Optional[int] = None) -> List[SecurityVerdict]:
        """Stored verdicts, most recently recorded first"""
        query = self.db.query(VerdictRecord).order_by(VerdictRecord.sequence.desc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_verdict(r) for r in query.all()]

    def snapshot(self) -> Dict[str, SecurityVerdict]:
        """resource_id -> verdict, in insertion order"""
        records = self.db.query(VerdictRecord).order_by(VerdictRecord.sequence.asc()).all()
        return {r.resource_id: self._to_verdict(r) for r in records}

    def clear(self) -> int:
        with _ledger_lock:
            removed = self.db.query(VerdictRecord).delete()
            self.db.commit()
        logger.info(f"Cleared {removed} history entries")
        return removed

    def __len__(self) -> int:
        return self.db.query(func.count(VerdictRecord.id)).scalar()

    @staticmethod
    def _to_verdict(record: VerdictRecord) -> SecurityVerdict:
        return SecurityVerdict(
            resource_id=record.resource_id,
            host=record.host,
            findings=tuple(Finding(**f) for f in (record.findings or [])),
            safety_score=record.safety_score,
            risk_level=RiskLevel(record.risk_level),
            evaluated_at=record.evaluated_at,
        )
