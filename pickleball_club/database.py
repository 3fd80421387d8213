"""Datasource component for the Pickleball Club backend."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from pickleball_club.config import Settings


logger = logging.getLogger(__name__)


class Datasource:
    """SQLAlchemy engine built from the configured datasource URL."""

    def __init__(self, url: str, *, verify_connection: bool = True) -> None:
        self.url = url
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine: Engine = create_engine(url, connect_args=connect_args, future=True)
        logger.info(f"Datasource configured for {self.safe_url}")

        if verify_connection:
            try:
                self.ping()
            except SQLAlchemyError:
                self.engine.dispose()
                raise

    @classmethod
    def from_settings(cls, settings: Settings) -> Datasource:
        return cls(settings.datasource_url, verify_connection=settings.datasource_verify_connection)

    @property
    def safe_url(self) -> str:
        """The URL with any password masked, for logs and health output."""
        return make_url(self.url).render_as_string(hide_password=True)

    def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def is_available(self) -> bool:
        try:
            self.ping()
        except SQLAlchemyError as e:
            logger.warning(f"Datasource {self.safe_url} unavailable: {e}")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()
        logger.debug(f"Datasource {self.safe_url} disposed")
