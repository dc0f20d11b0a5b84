"""Database engine, sessions and the generic table-by-name client.

Route handlers do not depend on a typed ORM schema. They receive a
``GenericDatabaseClient`` that can query any table by its string name, and
rows come back as plain dicts.
"""
from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy import MetaData, Table, create_engine, select
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.orm import Session, sessionmaker

from promptswap.config import DATABASE_URL
from promptswap.errors import ErrorCodes, ResourceNotFoundError, ValidationError

engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class TableQuery(Protocol):
	def select(self, *columns: str, **filters: Any) -> list[dict[str, Any]]: ...


class GenericDatabaseClient(Protocol):
	"""Anything that can hand out a query object for a table named at runtime."""

	def table(self, name: str) -> TableQuery: ...


class SessionTableQuery:
	def __init__(self, session: Session, table: Table):
		self._session = session
		self._table = table

	def _column(self, name: str):
		try:
			return self._table.c[name]
		except KeyError:
			raise ValidationError(
				ErrorCodes.INVALID_INPUT,
				f"Unknown column '{name}' on table '{self._table.name}'",
				{"table": self._table.name, "column": name},
			) from None

	def select(self, *columns: str, **filters: Any) -> list[dict[str, Any]]:
		"""Return matching rows; ``filters`` are equality conditions joined with AND."""
		targets = [self._column(c) for c in columns] if columns else [self._table]
		stmt = select(*targets)
		for key, value in filters.items():
			stmt = stmt.where(self._column(key) == value)
		return [dict(row._mapping) for row in self._session.execute(stmt)]


class SessionDatabaseClient:
	"""``GenericDatabaseClient`` over a SQLAlchemy session, reflecting tables lazily."""

	def __init__(self, session: Session):
		self.session = session
		self._metadata = MetaData()

	def table(self, name: str) -> SessionTableQuery:
		reflected = self._metadata.tables.get(name)
		if reflected is None:
			try:
				reflected = Table(name, self._metadata, autoload_with=self.session.connection())
			except NoSuchTableError:
				raise ResourceNotFoundError(
					ErrorCodes.NOT_FOUND, f"Table '{name}' not found", {"table": name}
				) from None
		return SessionTableQuery(self.session, reflected)
