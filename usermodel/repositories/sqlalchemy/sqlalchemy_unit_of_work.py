import logging
from contextlib import contextmanager
from typing import Iterator
from sqlalchemy.orm import Session
from usermodel.repositories.interfaces import IUnitOfWork

logger = logging.getLogger(__name__)

class SqlalchemyUnitOfWork(IUnitOfWork):
    def __init__(self, db_session: Session):
        self.db = db_session
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        # 중첩된 transaction()은 가장 바깥 블록에 합류합니다. commit/rollback은 바깥에서만 수행합니다.
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning("Transaction rolled back: %s: %s", type(e).__name__, e)
            raise
        finally:
            self._depth = 0
