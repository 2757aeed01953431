"""
Persistence layer: one client protocol, an in-memory implementation and a
SQLite-backed SQLAlchemy implementation.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    create_engine,
    event,
    func,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio.seed import SEED_PROFILE, SEED_PROJECTS

logger = logging.getLogger(__name__)

PROFILE_ID = 1
PROFILE_FIELDS = (
    "name",
    "title",
    "subtitle",
    "pitch",
    "email",
    "linkedin",
    "github",
    "status",
)
PROJECT_TEXT_FIELDS = (
    "title",
    "type",
    "summary",
    "problem",
    "solution",
    "architecture_diagram",
)
PROJECT_LIST_FIELDS = ("stack", "highlights", "challenges")


class DuplicateUserError(Exception):
    """Raised when creating a user whose username is already taken."""


class DbClient(Protocol):
    """Interface for the portfolio store."""

    def get_profile(self) -> Optional["ProfileRecord"]:
        ...

    def update_profile(self, fields: dict) -> None:
        ...

    def get_projects(self) -> List["ProjectRecord"]:
        ...

    def create_project(self, data: dict) -> "ProjectRecord":
        ...

    def get_user(self, username: str) -> Optional["UserRecord"]:
        ...

    def create_user(self, username: str, password_hash: str) -> None:
        ...

    def log_event(
        self,
        event_type: str,
        page: str,
        metadata: dict,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None:
        ...

    def get_event_stats(self) -> List["EventStat"]:
        ...

    def save_contact(self, name: str, email: str, message: str) -> None:
        ...

    def seed(self, admin_username: str, admin_password_hash: str) -> bool:
        ...

    def is_ready(self) -> bool:
        ...

    def close(self) -> None:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(ts: datetime) -> datetime:
    # Naive timestamps are taken to be UTC already.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _text(value) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _project_fields(data: dict) -> dict:
    """
    Map an arbitrary request body onto project columns. Anything missing
    becomes blank rather than raising.
    """
    fields = {key: _text(data.get(key)) for key in PROJECT_TEXT_FIELDS}
    for key in PROJECT_LIST_FIELDS:
        fields[key] = _as_list(data.get(key))
    links = data.get("links")
    fields["links"] = dict(links) if isinstance(links, dict) else {}
    try:
        fields["order_index"] = int(data.get("order_index") or 0)
    except (TypeError, ValueError):
        fields["order_index"] = 0
    return fields


def _profile_changes(fields: dict) -> dict:
    return {key: _text(value) for key, value in fields.items() if key in PROFILE_FIELDS}


@dataclass
class ProfileRecord:
    id: int
    name: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    pitch: Optional[str] = None
    email: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    status: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProjectRecord:
    id: int
    title: Optional[str]
    type: Optional[str]
    summary: Optional[str]
    problem: Optional[str]
    solution: Optional[str]
    stack: list
    highlights: list
    challenges: list
    architecture_diagram: Optional[str]
    links: dict
    order_index: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class UserRecord:
    username: str
    password: str


@dataclass
class EventRecord:
    event_type: str
    page: str
    metadata: dict
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class ContactRecord:
    name: str
    email: str
    message: str
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class EventStat:
    event_type: str
    day: str
    count: int

    def as_dict(self) -> dict:
        return {"event_type": self.event_type, "day": self.day, "count": self.count}


class InMemoryDbClient:
    """Process-local store used on restricted hosts and in tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self.profile: Optional[ProfileRecord] = None
        self.projects: List[ProjectRecord] = []
        self.users: Dict[str, UserRecord] = {}
        self.events: List[EventRecord] = []
        self.contacts: List[ContactRecord] = []
        self._next_project_id = 1

    def seed(self, admin_username: str, admin_password_hash: str) -> bool:
        with self._lock:
            if self.profile is not None:
                return False
            self.profile = ProfileRecord(**SEED_PROFILE)
            for index, project in enumerate(SEED_PROJECTS):
                self._add_project({**project, "order_index": index})
            self.users[admin_username] = UserRecord(
                username=admin_username, password=admin_password_hash
            )
        logger.info("InMemoryDbClient seeded.")
        return True

    def get_profile(self) -> Optional[ProfileRecord]:
        with self._lock:
            return replace(self.profile) if self.profile else None

    def update_profile(self, fields: dict) -> None:
        changes = _profile_changes(fields)
        with self._lock:
            if self.profile:
                self.profile = replace(self.profile, **changes)

    def get_projects(self) -> List[ProjectRecord]:
        with self._lock:
            return sorted(self.projects, key=lambda p: (p.order_index, p.id))

    def _add_project(self, data: dict) -> ProjectRecord:
        record = ProjectRecord(id=self._next_project_id, **_project_fields(data))
        self._next_project_id += 1
        self.projects.append(record)
        return record

    def create_project(self, data: dict) -> ProjectRecord:
        with self._lock:
            return self._add_project(data)

    def get_user(self, username: str) -> Optional[UserRecord]:
        return self.users.get(username)

    def create_user(self, username: str, password_hash: str) -> None:
        with self._lock:
            if username in self.users:
                raise DuplicateUserError(username)
            self.users[username] = UserRecord(username=username, password=password_hash)

    def log_event(
        self,
        event_type: str,
        page: str,
        metadata: dict,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None:
        record = EventRecord(
            event_type=event_type,
            page=page,
            metadata=dict(metadata or {}),
            timestamp=_as_utc(timestamp or _utcnow()),
        )
        with self._lock:
            self.events.append(record)

    def get_event_stats(self) -> List[EventStat]:
        with self._lock:
            counts = Counter(
                (e.event_type, e.timestamp.date().isoformat())
                for e in self.events
            )
        stats = [
            EventStat(event_type=event_type, day=day, count=count)
            for (event_type, day), count in counts.items()
        ]
        # Day descending, then event type ascending.
        stats.sort(key=lambda s: s.event_type)
        stats.sort(key=lambda s: s.day, reverse=True)
        return stats

    def save_contact(self, name: str, email: str, message: str) -> None:
        with self._lock:
            self.contacts.append(ContactRecord(name=name, email=email, message=message))

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.profile = None
            self.projects.clear()
            self.users.clear()
            self.events.clear()
            self.contacts.clear()
            self._next_project_id = 1

    def is_ready(self) -> bool:
        return True

    def close(self) -> None:
        pass


def _enable_wal(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class SqliteDbClient:
    """
    SQLAlchemy-backed implementation over a SQLite file. List and map
    fields live in JSON columns so callers only ever see Python values.
    """

    def __init__(self, database_path: str):
        if not database_path:
            raise ValueError("A database path is required for SqliteDbClient")
        if database_path.startswith("sqlite"):
            url = database_path
        else:
            url = f"sqlite:///{database_path}"
        engine_kwargs = {"connect_args": {"check_same_thread": False}}
        if url.endswith(":memory:"):
            # One shared connection, otherwise every pooled connection sees
            # its own empty database.
            engine_kwargs["poolclass"] = StaticPool
        logger.info("Initializing SqliteDbClient at %s", database_path)
        self.engine = create_engine(url, **engine_kwargs)
        event.listen(self.engine, "connect", _enable_wal)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False
        )
        Base.metadata.create_all(self.engine)

    def seed(self, admin_username: str, admin_password_hash: str) -> bool:
        with self.Session() as session:
            count = session.scalar(select(func.count()).select_from(ProfileRow))
            if count:
                return False
            session.add(ProfileRow(**SEED_PROFILE))
            for index, project in enumerate(SEED_PROJECTS):
                session.add(
                    ProjectRow(**_project_fields({**project, "order_index": index}))
                )
            session.add(UserRow(username=admin_username, password=admin_password_hash))
            session.commit()
        logger.info("SqliteDbClient seeded.")
        return True

    def _to_profile_record(self, row: "ProfileRow") -> ProfileRecord:
        return ProfileRecord(
            id=row.id, **{key: getattr(row, key) for key in PROFILE_FIELDS}
        )

    def _to_project_record(self, row: "ProjectRow") -> ProjectRecord:
        return ProjectRecord(
            id=row.id,
            title=row.title,
            type=row.type,
            summary=row.summary,
            problem=row.problem,
            solution=row.solution,
            stack=list(row.stack or []),
            highlights=list(row.highlights or []),
            challenges=list(row.challenges or []),
            architecture_diagram=row.architecture_diagram,
            links=dict(row.links or {}),
            order_index=row.order_index or 0,
        )

    def get_profile(self) -> Optional[ProfileRecord]:
        with self.Session() as session:
            row = session.get(ProfileRow, PROFILE_ID)
            if not row:
                return None
            return self._to_profile_record(row)

    def update_profile(self, fields: dict) -> None:
        changes = _profile_changes(fields)
        with self.Session() as session:
            row = session.get(ProfileRow, PROFILE_ID)
            if not row:
                return
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = _utcnow()
            session.commit()

    def get_projects(self) -> List[ProjectRecord]:
        with self.Session() as session:
            stmt = select(ProjectRow).order_by(
                ProjectRow.order_index.asc(), ProjectRow.id.asc()
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_project_record(row) for row in rows]

    def create_project(self, data: dict) -> ProjectRecord:
        with self.Session() as session:
            row = ProjectRow(**_project_fields(data))
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_project_record(row)

    def get_user(self, username: str) -> Optional[UserRecord]:
        with self.Session() as session:
            stmt = select(UserRow).where(UserRow.username == username)
            row = session.execute(stmt).scalar_one_or_none()
            if not row:
                return None
            return UserRecord(username=row.username, password=row.password)

    def create_user(self, username: str, password_hash: str) -> None:
        with self.Session() as session:
            session.add(UserRow(username=username, password=password_hash))
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateUserError(username) from exc

    def log_event(
        self,
        event_type: str,
        page: str,
        metadata: dict,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None:
        ts = _as_utc(timestamp or _utcnow()).replace(tzinfo=None)
        with self.Session() as session:
            session.add(
                EventRow(
                    event_type=event_type,
                    page=page,
                    data=dict(metadata or {}),
                    timestamp=ts,
                )
            )
            session.commit()

    def get_event_stats(self) -> List[EventStat]:
        day = func.date(EventRow.timestamp).label("day")
        stmt = (
            select(EventRow.event_type, day, func.count(EventRow.id).label("count"))
            .group_by(EventRow.event_type, day)
            .order_by(day.desc(), EventRow.event_type.asc())
        )
        with self.Session() as session:
            rows = session.execute(stmt).all()
            return [
                EventStat(event_type=event_type, day=day_value, count=count)
                for event_type, day_value, count in rows
            ]

    def save_contact(self, name: str, email: str, message: str) -> None:
        with self.Session() as session:
            session.add(
                ContactRow(
                    name=name,
                    email=email,
                    message=message,
                    timestamp=_utcnow().replace(tzinfo=None),
                )
            )
            session.commit()

    def is_ready(self) -> bool:
        return True

    def close(self) -> None:
        self.engine.dispose()


Base = declarative_base()


class ProfileRow(Base):
    __tablename__ = "profile"
    __table_args__ = (CheckConstraint("id = 1", name="profile_singleton"),)

    id = Column(Integer, primary_key=True)
    name = Column(Text)
    title = Column(Text)
    subtitle = Column(Text)
    pitch = Column(Text)
    email = Column(Text)
    linkedin = Column(Text)
    github = Column(Text)
    status = Column(Text)
    updated_at = Column(DateTime, nullable=False, default=_utcnow)


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text)
    type = Column(Text)
    summary = Column(Text)
    problem = Column(Text)
    solution = Column(Text)
    stack = Column(JSON, nullable=False, default=list)
    highlights = Column(JSON, nullable=False, default=list)
    challenges = Column(JSON, nullable=False, default=list)
    architecture_diagram = Column(Text)
    links = Column(JSON, nullable=False, default=dict)
    order_index = Column(Integer, nullable=False, default=0, index=True)


class EventRow(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(String, nullable=False, index=True)
    page = Column(String, nullable=False)
    data = Column("metadata", JSON, nullable=False, default=dict)
    timestamp = Column(DateTime, nullable=False)


class ContactRow(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False)


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True)
    password = Column(String, nullable=False)
