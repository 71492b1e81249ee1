import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.errors import DuplicateCodeError, NotFoundError, StoreError
from ..database import Base, build_session_factory
from ..models import Link

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _code_matches(code: str):
    # Case-insensitive exact match, served by idx_links_code_lower
    return func.lower(Link.code) == code.lower()


class LinkStore:
    """
    Durable storage and atomic mutation of links.

    Every operation runs exactly one statement in its own transaction.
    Uniqueness and click counting are left to the database so that
    concurrent callers never race each other.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = build_session_factory(engine)

    def create_schema(self) -> None:
        """Create the links table and its indexes if they do not exist."""
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def create(self, code: str, target: str, created_at: Optional[datetime] = None) -> Link:
        """
        Insert a new link.

        Raises:
            DuplicateCodeError: the code (in any letter case) already exists
            StoreError: any other database failure
        """
        link = Link(
            code=code,
            target=target,
            created_at=_as_utc(created_at) if created_at else _utcnow(),
            clicks=0
        )

        try:
            with self._session_factory.begin() as session:
                session.add(link)
        except IntegrityError:
            logger.info("Rejected duplicate code %r", code)
            raise DuplicateCodeError()
        except SQLAlchemyError as e:
            logger.exception("Failed to create link %r", code)
            raise StoreError() from e

        logger.info("Created link %s -> %s", link.code, link.target)
        return link

    def get_by_code(self, code: str) -> Link:
        """Find a link by code, ignoring letter case."""
        link = self._fetch_one(select(Link).where(_code_matches(code)), "look up", code)
        if link is None:
            raise NotFoundError()
        return link

    def list_all(self) -> List[Link]:
        """Return every link, newest first."""
        try:
            with self._session_factory() as session:
                return list(session.scalars(
                    select(Link).order_by(Link.created_at.desc(), Link.id.desc())
                ))
        except SQLAlchemyError as e:
            logger.exception("Failed to list links")
            raise StoreError() from e

    def record_click(self, code: str) -> Link:
        """
        Count one click and return the updated link.

        The increment happens in a single UPDATE ... RETURNING statement so
        simultaneous clicks on the same code are never lost.
        """
        stmt = (
            update(Link)
            .where(_code_matches(code))
            .values(clicks=Link.clicks + 1, last_clicked=_utcnow())
            .returning(Link)
            .execution_options(synchronize_session=False)
        )

        try:
            with self._session_factory.begin() as session:
                link = session.scalars(stmt).first()
        except SQLAlchemyError as e:
            logger.exception("Failed to record click for %r", code)
            raise StoreError() from e

        if link is None:
            raise NotFoundError()
        return link

    def delete(self, code: str) -> None:
        """Delete a link. Deleting an unknown code is not an error."""
        try:
            with self._session_factory.begin() as session:
                result = session.execute(
                    delete(Link)
                    .where(_code_matches(code))
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as e:
            logger.exception("Failed to delete link %r", code)
            raise StoreError() from e

        if result.rowcount:
            logger.info("Deleted link %s", code)

    def redirect_target(self, code: str) -> str:
        """Resolve a code to its target URL without counting a click."""
        target = self._fetch_one(select(Link.target).where(_code_matches(code)), "resolve", code)
        if target is None:
            raise NotFoundError()
        return target

    def _fetch_one(self, stmt, action: str, code: str):
        try:
            with self._session_factory() as session:
                return session.scalars(stmt).first()
        except SQLAlchemyError as e:
            logger.exception("Failed to %s code %r", action, code)
            raise StoreError() from e
