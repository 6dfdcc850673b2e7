"""Relational catalog store built on SQLAlchemy.

Owns the users/podcasts/episodes schema, the one-time seed data and the
two read queries served by the API.
"""

import re
from datetime import datetime, timezone

import structlog
from sqlalchemy import Engine, create_engine, event, func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from podcatalog.config import get_settings
from podcatalog.models import Episode, Podcast, PodcastDetail, User
from podcatalog.storage.seed import build_seed_records
from podcatalog.storage.tables import Base, EpisodeRecord, PodcastRecord, UserRecord

logger = structlog.get_logger(__name__)

# Ids outside this range cannot be stored, so they cannot match a row
_MAX_ID = 2**63 - 1

# Plain ASCII decimal only; int() would also take "0_1" and non-ASCII digits
_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class StoreError(Exception):
    """Raised when the store cannot be reached or a query fails."""


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def _parse_id(value: int | str) -> int | None:
    """Read a podcast id as received from a caller; None if it can't be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _ID_PATTERN.fullmatch(value):
        parsed = int(value)
    else:
        return None
    if not -_MAX_ID <= parsed <= _MAX_ID:
        return None
    return parsed


def _to_podcast(record: PodcastRecord, author_name: str) -> Podcast:
    return Podcast(
        id=record.id,
        title=record.title,
        description=record.description,
        cover_image_url=record.cover_image_url,
        author_id=record.author_id,
        created_at=record.created_at,
        author_name=author_name,
    )


def _to_episode(record: EpisodeRecord) -> Episode:
    return Episode(
        id=record.id,
        podcast_id=record.podcast_id,
        title=record.title,
        description=record.description,
        audio_url=record.audio_url,
        duration=record.duration,
        published_at=record.published_at,
    )


class CatalogStore:
    """SQLAlchemy wrapper for the podcast catalog."""

    def __init__(self, database_url: str | None = None, echo: bool | None = None) -> None:
        """Create the engine and session factory.

        Args:
            database_url: SQLAlchemy URL. Defaults to the configured DATABASE_URL.
            echo: Log SQL statements. Defaults to the configured DATABASE_ECHO.
        """
        settings = get_settings()
        self.database_url = database_url or settings.database.url
        echo = settings.database.echo if echo is None else echo

        url = make_url(self.database_url)
        if url.get_backend_name() == "sqlite":
            engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
            # An in-memory database lives and dies with its connection
            if url.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool
            self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(url, echo=echo)

        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.logger = logger.bind(component="store", backend=url.get_backend_name())

    def ping(self) -> None:
        """Check that the database is reachable.

        Raises:
            StoreError: If a connection cannot be made.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StoreError("Database is unreachable") from e
        self.logger.info("Database connection OK")

    def create_schema(self) -> None:
        """Create the users, podcasts and episodes tables if they are missing."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreError("Failed to create schema") from e

    def initialize(self) -> bool:
        """Create the schema and insert the seed data into an empty catalog.

        Seeding is guarded solely on the users table: if any user exists
        nothing is inserted, even when podcasts or episodes are missing.

        Returns:
            True if the seed data was inserted, False if it was skipped.

        Raises:
            StoreError: If the schema or seed data could not be written.
        """
        self.create_schema()

        try:
            with self.SessionLocal.begin() as session:
                if not self._needs_seed(session):
                    self.logger.info("Users already present, skipping seed")
                    return False

                now = datetime.now(timezone.utc).replace(tzinfo=None)
                for group in build_seed_records(now):
                    session.add_all(group)
                    session.flush()
        except SQLAlchemyError as e:
            raise StoreError("Failed to seed the catalog") from e

        self.logger.info("Seed data inserted", **self.counts())
        return True

    @staticmethod
    def _needs_seed(session: Session) -> bool:
        """Seed precondition: the users table is empty."""
        return session.scalar(select(func.count()).select_from(UserRecord)) == 0

    def counts(self) -> dict[str, int]:
        """Count the rows in each catalog table."""
        try:
            with self.SessionLocal() as session:
                return {
                    record.__tablename__: session.scalar(
                        select(func.count()).select_from(record)
                    )
                    for record in (UserRecord, PodcastRecord, EpisodeRecord)
                }
        except SQLAlchemyError as e:
            raise StoreError("Failed to count rows") from e

    def list_users(self) -> list[User]:
        """List every user, oldest id first.

        Raises:
            StoreError: If the query fails.
        """
        try:
            with self.SessionLocal() as session:
                records = session.scalars(select(UserRecord).order_by(UserRecord.id)).all()
        except SQLAlchemyError as e:
            raise StoreError("Failed to list users") from e

        return [
            User(
                id=record.id,
                username=record.username,
                email=record.email,
                created_at=record.created_at,
            )
            for record in records
        ]

    def list_podcasts(self) -> list[Podcast]:
        """List every podcast with its author's username, newest first.

        Raises:
            StoreError: If the query fails.
        """
        stmt = (
            select(PodcastRecord, UserRecord.username)
            .join(UserRecord, PodcastRecord.author_id == UserRecord.id)
            .order_by(PodcastRecord.created_at.desc(), PodcastRecord.id.desc())
        )
        try:
            with self.SessionLocal() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as e:
            raise StoreError("Failed to list podcasts") from e

        return [_to_podcast(record, username) for record, username in rows]

    def get_podcast(self, podcast_id: int | str) -> PodcastDetail | None:
        """Get a podcast and its episodes.

        Args:
            podcast_id: Podcast id, as an int or as received in a request path.

        Returns:
            The podcast with episodes newest first, or None if no podcast matches.

        Raises:
            StoreError: If a query fails.
        """
        parsed_id = _parse_id(podcast_id)
        if parsed_id is None:
            return None

        podcast_stmt = (
            select(PodcastRecord, UserRecord.username)
            .join(UserRecord, PodcastRecord.author_id == UserRecord.id)
            .where(PodcastRecord.id == parsed_id)
        )
        episodes_stmt = (
            select(EpisodeRecord)
            .where(EpisodeRecord.podcast_id == parsed_id)
            .order_by(EpisodeRecord.published_at.desc(), EpisodeRecord.id.desc())
        )
        try:
            with self.SessionLocal() as session:
                row = session.execute(podcast_stmt).first()
                if row is None:
                    return None
                episodes = session.scalars(episodes_stmt).all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch podcast {podcast_id}") from e

        record, username = row
        podcast = _to_podcast(record, username)
        return PodcastDetail(
            **podcast.model_dump(),
            episodes=[_to_episode(episode) for episode in episodes],
        )

    def close(self) -> None:
        """Release all pooled connections."""
        self.engine.dispose()
