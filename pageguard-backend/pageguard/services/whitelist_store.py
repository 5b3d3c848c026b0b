import logging
from typing import FrozenSet

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pageguard.models import WhitelistEntry

logger = logging.getLogger(__name__)


class WhitelistStore:
    """User-controlled set of trusted hosts. add/remove are idempotent."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _normalize(host: str) -> str:
        host = (host or '').strip().lower()
        if not host:
            raise ValueError("Host must not be empty")
        return host

    def add(self, host: str) -> bool:
        """Returns True if the host was added, False if it was already trusted"""
        host = self._normalize(host)
        if self.contains(host):
            return False

        self.db.add(WhitelistEntry(host=host))
        try:
            self.db.commit()
        except IntegrityError:
            # Added concurrently by another request
            self.db.rollback()
            return False

        logger.info(f"✓ Whitelisted {host}")
        return True

    def remove(self, host: str) -> bool:
        """Returns True if the host was removed, False if it was not trusted"""
        host = self._normalize(host)
        removed = self.db.query(WhitelistEntry).filter(WhitelistEntry.host == host).delete()
        self.db.commit()
        if removed:
            logger.info(f"Removed {host} from whitelist")
        return bool(removed)

    def contains(self, host: str) -> bool:
        return self.db.query(WhitelistEntry.id).filter(WhitelistEntry.host == host).first() is not None

    def hosts(self) -> FrozenSet[str]:
        return frozenset(h for (h,) in self.db.query(WhitelistEntry.host).all())
