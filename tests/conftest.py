from datetime import date, datetime, timezone
from typing import AsyncGenerator, Iterable, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.store import SqlWrappedStore
from app.api.deps import get_db, get_wrapped_store
from app.models.profile import Profile
from app.models.purchase import Purchase
from app.models.gift_list import GiftList
from app.models.list_item import ListItem
from app.schemas.records import (
    LineItemRecord,
    ListItemRecord,
    ListRecord,
    ProfileRecord,
    PurchaseRecord,
)
from app.services.wrapped_window import TimeWindow


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# Profile ids used across the seeded database
ALICE_ID = 1  # owns lists, buys gifts
QUINN_ID = 2  # suggests a gift for Alice
RON_ID = 3  # no activity at all


class InMemoryStore:
    """WrappedStore over plain record lists, with the same ordering rules as SQL."""

    def __init__(
        self,
        profiles: Iterable[ProfileRecord] = (),
        purchases: Iterable[PurchaseRecord] = (),
        line_items: Iterable[LineItemRecord] = (),
        lists: Iterable[ListRecord] = (),
        list_items: Iterable[ListItemRecord] = (),
    ):
        self.profiles = list(profiles)
        self.purchases = list(purchases)
        self.line_items = list(line_items)
        self.lists = list(lists)
        self.list_items = list(list_items)

    async def get_profile(self, profile_id: int) -> Optional[ProfileRecord]:
        return next((p for p in self.profiles if p.id == profile_id), None)

    async def get_purchases(self, profile_id: int, window: TimeWindow) -> List[PurchaseRecord]:
        found = [
            p for p in self.purchases
            if p.purchase_user == profile_id and window.contains(p.created_at)
        ]
        return sorted(found, key=lambda p: p.id)

    async def get_line_items_by_purchase(self, purchase_ids) -> List[LineItemRecord]:
        ids = set(purchase_ids)
        return sorted((i for i in self.line_items if i.purchase_id in ids), key=lambda i: i.id)

    async def get_lists(self, owner_profile_id: int, window: Optional[TimeWindow] = None) -> List[ListRecord]:
        found = [
            gl for gl in self.lists
            if gl.owner_user_id == owner_profile_id
            and (window is None or window.contains(gl.created_at))
        ]
        return sorted(found, key=lambda gl: gl.id)

    async def get_list_items_by_list(
        self,
        list_ids,
        window: Optional[TimeWindow] = None,
        exclude_suggested: bool = False,
        only_suggested: bool = False,
        on_date: Optional[date] = None,
    ) -> List[ListItemRecord]:
        ids = set(list_ids)
        if on_date is not None:
            window = TimeWindow.for_day(on_date)
        found = [
            i for i in self.list_items
            if i.list_id in ids
            and (window is None or window.contains(i.created_at))
            and not (exclude_suggested and i.suggested_by is not None)
            and not (only_suggested and i.suggested_by is None)
        ]
        if on_date is not None:
            return sorted(found, key=lambda i: (i.created_at, i.id))
        return sorted(found, key=lambda i: i.id)

    async def get_profiles_by_ids(self, ids) -> List[ProfileRecord]:
        wanted = set(ids)
        return sorted((p for p in self.profiles if p.id in wanted), key=lambda p: p.id)


@pytest.fixture
def memory_store() -> InMemoryStore:
    """In-memory store holding the standard 2024 scenario."""
    return InMemoryStore(
        profiles=[
            ProfileRecord(id=ALICE_ID, first_name="Alice", last_name="Santa"),
            ProfileRecord(id=QUINN_ID, first_name="Quinn", last_name="Elf"),
            ProfileRecord(id=RON_ID, first_name="Ron", last_name="Reindeer"),
        ],
        purchases=[
            PurchaseRecord(id=10, purchase_user=ALICE_ID, created_at=utc(2024, 12, 10, 10, 0)),
            PurchaseRecord(id=11, purchase_user=ALICE_ID, created_at=utc(2024, 12, 20, 15, 30)),
        ],
        line_items=[
            LineItemRecord(id=100, purchase_id=10, title="Lego Castle", price="50.00",
                           thumbnail_url="https://img.example/lego.png"),
            LineItemRecord(id=101, purchase_id=11, title="Wool Socks", price="10"),
        ],
        lists=[
            ListRecord(id=20, owner_user_id=ALICE_ID, name="Christmas 2024", created_at=utc(2024, 1, 5)),
            ListRecord(id=21, owner_user_id=ALICE_ID, name=None, created_at=utc(2024, 2, 1)),
        ],
        list_items=[
            ListItemRecord(id=200, list_id=20, title="Board Game", price="35", created_at=utc(2024, 3, 5, 9, 0)),
            ListItemRecord(id=201, list_id=20, title="Scarf", price="20", created_at=utc(2024, 3, 5, 18, 0)),
            ListItemRecord(id=202, list_id=20, title="Cookbook", price="25", created_at=utc(2024, 3, 6, 10, 0),
                           suggested_by=QUINN_ID),
            ListItemRecord(id=203, list_id=21, title="Headphones", price="80", created_at=utc(2024, 4, 1, 12, 0)),
        ],
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a test database engine backed by a temp SQLite file.

    A file (rather than :memory:) lets each store call open its own
    connection and still see the same data.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'wrapped_test.db'}",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def test_session(test_session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def seeded_db(test_session: AsyncSession) -> AsyncSession:
    """Seed the database with the standard 2024 scenario plus out-of-year noise."""
    test_session.add_all([
        Profile(id=ALICE_ID, first_name="Alice", last_name="Santa"),
        Profile(id=QUINN_ID, first_name="Quinn", last_name="Elf"),
        Profile(id=RON_ID, first_name="Ron", last_name="Reindeer"),
    ])
    await test_session.flush()

    test_session.add_all([
        Purchase(id=10, purchase_user=ALICE_ID, created_at=utc(2024, 12, 10, 10, 0)),
        Purchase(id=11, purchase_user=ALICE_ID, created_at=utc(2024, 12, 20, 15, 30)),
        # Previous year, must never count towards 2024
        Purchase(id=12, purchase_user=ALICE_ID, created_at=utc(2023, 12, 22, 9, 0)),
        # Someone else's purchase
        Purchase(id=13, purchase_user=QUINN_ID, created_at=utc(2024, 12, 21, 9, 0)),
        GiftList(id=20, owner_user_id=ALICE_ID, name="Christmas 2024", created_at=utc(2024, 1, 5)),
        GiftList(id=21, owner_user_id=ALICE_ID, name=None, created_at=utc(2024, 2, 1)),
        GiftList(id=22, owner_user_id=QUINN_ID, name="Quinn's list", created_at=utc(2024, 1, 9)),
    ])
    await test_session.flush()

    test_session.add_all([
        ListItem(id=100, purchase_id=10, title="Lego Castle", price="50.00",
                 thumbnail_url="https://img.example/lego.png", created_at=utc(2024, 12, 10, 10, 0)),
        ListItem(id=101, purchase_id=11, title="Wool Socks", price="10", created_at=utc(2024, 12, 20, 15, 30)),
        ListItem(id=102, purchase_id=12, title="Old Gift", price="99", created_at=utc(2023, 12, 22, 9, 0)),
        ListItem(id=103, purchase_id=13, title="Quinn's Gift", price="15", created_at=utc(2024, 12, 21, 9, 0)),
        ListItem(id=200, list_id=20, title="Board Game", price="35", created_at=utc(2024, 3, 5, 9, 0)),
        ListItem(id=201, list_id=20, title="Scarf", price="20", created_at=utc(2024, 3, 5, 18, 0)),
        ListItem(id=202, list_id=20, title="Cookbook", price="25", created_at=utc(2024, 3, 6, 10, 0),
                 suggested_by=QUINN_ID),
        ListItem(id=203, list_id=21, title="Headphones", price="80", created_at=utc(2024, 4, 1, 12, 0)),
        ListItem(id=204, list_id=22, title="Puzzle", price="12", created_at=utc(2024, 3, 5, 11, 0)),
    ])
    await test_session.commit()
    return test_session


@pytest_asyncio.fixture(scope="function")
async def sql_store(test_session_maker, seeded_db) -> SqlWrappedStore:
    return SqlWrappedStore(test_session_maker)


@pytest_asyncio.fixture(scope="function")
async def client(
    test_session: AsyncSession,
    sql_store: SqlWrappedStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the database dependencies overridden."""

    async def override_get_db():
        yield test_session

    def override_get_wrapped_store():
        return sql_store

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_wrapped_store] = override_get_wrapped_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
