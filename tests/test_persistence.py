import asyncio

import pytest

from ride_booking.core.config import Settings
from ride_booking.core.database import build_engine, build_session_factory
from ride_booking.core.exceptions import DuplicateUserError, SnapshotSaveError
from ride_booking.models.ride import RideStatus
from ride_booking.models.snapshot import SNAPSHOT_ROW_ID, UNREADABLE_SNAPSHOT_ROW_ID, SystemSnapshot
from ride_booking.models.user import UserRole
from ride_booking.services.persistence import PersistenceManager
from ride_booking.services.snapshot import dump_system, restore_system

from conftest import SCHEDULED, add_driver


def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'snapshot.db'}"


def run_with_manager(tmp_path, action, initialize=True, config=None):
    """Run ``action(manager)`` against a fresh engine on the temp database."""
    async def scenario():
        engine = build_engine(database_url(tmp_path))
        manager = PersistenceManager(engine=engine, config=config or Settings())
        try:
            if initialize:
                await manager.initialize()
            return await action(manager)
        finally:
            await engine.dispose()
    return asyncio.run(scenario())


def save(tmp_path, system):
    async def action(manager):
        await manager.save(system)
    run_with_manager(tmp_path, action)


def load(tmp_path, **kwargs):
    async def action(manager):
        return await manager.load()
    return run_with_manager(tmp_path, action, **kwargs)


@pytest.fixture
def busy_system(system, passenger, driver):
    add_driver(system, "D2")
    completed = system.book("P1", "D1", 10, SCHEDULED)
    system.start(completed.ride_id)
    system.end(completed.ride_id)

    negotiated = system.book("P1", "D1", 8, SCHEDULED)
    system.propose_fare(negotiated.ride_id, 90)
    system.accept_fare(negotiated.ride_id)

    ongoing = system.book("P1", "D2", 3, SCHEDULED)
    system.start(ongoing.ride_id)

    cancelled = system.book("P1", "D1", 4, SCHEDULED)
    system.cancel(cancelled.ride_id, "no show")

    complaint = system.file_complaint("P1", "D1", "Took a longer route")
    system.file_complaint("D1", "P1", "Kept the driver waiting")
    system.resolve_complaint(complaint.complaint_id)
    system.set_surge_multiplier(1.4)
    return system


def test_round_trip_preserves_entities(tmp_path, busy_system):
    save(tmp_path, busy_system)
    restored = load(tmp_path)

    assert restored.surge_multiplier == 1.4
    assert restored.admin.user_id == "A100"
    assert {u.user_id for u in restored.all_users()} == {u.user_id for u in busy_system.all_users()}
    for user in busy_system.all_users():
        assert restored.get_user(user.user_id) == user
    for ride in busy_system.all_rides():
        assert restored.get_ride(ride.ride_id) == ride
    assert [c.complaint_id for c in restored.complaints.all()] == ["CMP-1", "CMP-2"]
    assert restored.complaints.all()[0].resolved is True


def test_round_trip_shares_user_objects(tmp_path, busy_system):
    save(tmp_path, busy_system)
    restored = load(tmp_path)

    for ride in restored.all_rides():
        assert ride.passenger is restored.get_user(ride.passenger.user_id)
        assert ride.driver is restored.get_user(ride.driver.user_id)
    for complaint in restored.complaints.all():
        assert complaint.reporter is restored.get_user(complaint.reporter.user_id)
        assert complaint.reported is restored.get_user(complaint.reported.user_id)
    assert restored.admin is restored.get_user("A100")


def test_round_trip_repairs_id_counters(tmp_path, busy_system):
    save(tmp_path, busy_system)
    restored = load(tmp_path)

    ride = restored.book("P1", "D1", 2, SCHEDULED)
    complaint = restored.file_complaint("P1", "D2", "Music too loud")
    assert ride.ride_id == "RIDE-5"
    assert complaint.complaint_id == "CMP-3"
    old_ride_ids = {r.ride_id for r in busy_system.all_rides()}
    assert ride.ride_id not in old_ride_ids


def test_restored_rides_keep_working(tmp_path, busy_system):
    save(tmp_path, busy_system)
    restored = load(tmp_path)

    ongoing = restored.get_ride("RIDE-3")
    assert ongoing.status == RideStatus.ONGOING
    assert ongoing.driver.profile.vehicle.available is False
    restored.end("RIDE-3")
    assert ongoing.driver.profile.vehicle.available is True

    negotiated = restored.get_ride("RIDE-2")
    restored.start("RIDE-2")
    restored.end("RIDE-2")
    assert negotiated.fare == 90.0
    assert restored.get_user("D1").profile.earnings == pytest.approx(96.0 + 72.0)


def test_snapshot_is_rewritten_in_place(tmp_path, busy_system):
    save(tmp_path, busy_system)
    busy_system.register_passenger("P9", "Late Joiner", "0100")
    save(tmp_path, busy_system)

    restored = load(tmp_path)
    assert restored.get_user("P9").role == UserRole.PASSENGER


def test_load_without_snapshot_gives_fresh_system(tmp_path):
    system = load(tmp_path)
    assert [u.user_id for u in system.all_users()] == [Settings().ADMIN_ID]
    assert system.all_rides() == []
    assert system.ride_ids.peek() == "RIDE-1"


def test_load_without_table_gives_fresh_system(tmp_path):
    system = load(tmp_path, initialize=False)
    assert system.all_rides() == []


def test_corrupt_snapshot_gives_fresh_system(tmp_path):
    async def action(manager):
        async with manager.session_factory() as session:
            session.add(SystemSnapshot(id=SNAPSHOT_ROW_ID, format_version=1, payload="{not json"))
            await session.commit()
        return await manager.load()

    system = run_with_manager(tmp_path, action)
    assert system.all_rides() == []


def test_taken_ids_do_not_break_the_snapshot(tmp_path, busy_system):
    for user_id in ("D1", "A100"):
        with pytest.raises(DuplicateUserError):
            busy_system.register_passenger(user_id, "Impostor", "0100")
    save(tmp_path, busy_system)
    restored = load(tmp_path)

    assert restored.admin.user_id == "A100"
    assert restored.get_user("D1").role == UserRole.DRIVER
    assert restored.get_user("P1").role == UserRole.PASSENGER
    assert len(restored.all_rides()) == 4


def test_unreadable_snapshot_is_kept_aside(tmp_path, busy_system):
    async def action(manager):
        async with manager.session_factory() as session:
            session.add(SystemSnapshot(id=SNAPSHOT_ROW_ID, format_version=1, payload="{not json"))
            await session.commit()
        system = await manager.load()
        await manager.save(busy_system)
        async with manager.session_factory() as session:
            kept = await session.get(SystemSnapshot, UNREADABLE_SNAPSHOT_ROW_ID)
        return system, kept

    system, kept = run_with_manager(tmp_path, action)
    assert system.all_rides() == []
    assert kept.payload == "{not json"
    assert len(load(tmp_path).all_rides()) == 4


def test_save_failure_is_reported_and_state_kept(tmp_path, busy_system):
    async def action(manager):
        await manager.save(busy_system)

    with pytest.raises(SnapshotSaveError):
        run_with_manager(tmp_path, action, initialize=False)
    assert len(busy_system.all_rides()) == 4


def test_dangling_reference_is_rejected(busy_system):
    document = dump_system(busy_system)
    document.rides["RIDE-1"].driver_id = "ghost"
    with pytest.raises(ValueError):
        restore_system(document, Settings())


def test_session_factory_can_be_supplied(tmp_path):
    async def scenario():
        engine = build_engine(database_url(tmp_path))
        manager = PersistenceManager(engine=engine, session_factory=build_session_factory(engine))
        try:
            await manager.initialize()
            return await manager.load()
        finally:
            await engine.dispose()

    assert asyncio.run(scenario()).all_rides() == []
