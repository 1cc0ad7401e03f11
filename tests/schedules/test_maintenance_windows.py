"""
Tests for maintenance state evaluation.

Key behaviors tested:
1. A host is covered by schedules on itself, its site and its site's region
2. Coverage stops at the first region
3. Single windows are inclusive at both ends; open-ended windows never close
4. Repeated windows open at each matching minute for duration_seconds
"""

import pytest
from dataclasses import replace
from datetime import datetime, timezone

from fleet_inventory.errors import ConflictError, InvalidArgumentError, NotFoundError
from fleet_inventory.hierarchy.types import Host, ResourceKind
from fleet_inventory.schedules import RepeatedSchedule, ScheduleStatus, SingleSchedule
from fleet_inventory.schedules.types import MAX_DURATION_SECONDS, MAX_EPOCH_SECONDS
from fleet_inventory.targets import Target, TargetKind

R1, R2, R3 = "region-00000001", "region-00000002", "region-00000003"
S1 = "site-00000001"
H1 = "host-00000001"

NOW = 1767225600  # 2026-01-01T00:00:00Z

# 2026-01-05 12:30 UTC
WINDOW_START = int(datetime(2026, 1, 5, 12, 30, tzinfo=timezone.utc).timestamp())


def single(schedule_id: str, kind: TargetKind, target_id: str, start: int, end: int | None = None) -> SingleSchedule:
    return SingleSchedule(id=schedule_id, start_seconds=start, end_seconds=end, target=Target(kind, target_id))


def repeated(
    schedule_id: str,
    kind: TargetKind,
    target_id: str,
    duration: int,
    minutes: str = "*",
    hours: str = "*",
    day_month: str = "*",
    month: str = "*",
    day_week: str = "*",
) -> RepeatedSchedule:
    return RepeatedSchedule(
        id=schedule_id,
        duration_seconds=duration,
        cron_minutes=minutes,
        cron_hours=hours,
        cron_day_month=day_month,
        cron_month=month,
        cron_day_week=day_week,
        target=Target(kind, target_id),
    )


class TestSingleSchedules:

    def test_site_schedule_covers_host(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.SITE, S1, NOW, NOW + 1))
        state = service.schedules.is_in_maintenance(H1, at=NOW)
        assert state.active
        assert [s.id for s in state.matching_schedules] == ["singlesche-00000001"]

    def test_host_without_schedules(self, service):
        state = service.schedules.is_in_maintenance(H1, at=NOW)
        assert not state.active
        assert state.matching_schedules == []

    def test_window_bounds_inclusive(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.HOST, H1, NOW, NOW + 60))
        assert service.schedules.is_in_maintenance(H1, at=NOW).active
        assert service.schedules.is_in_maintenance(H1, at=NOW + 60).active
        assert not service.schedules.is_in_maintenance(H1, at=NOW - 1).active
        assert not service.schedules.is_in_maintenance(H1, at=NOW + 61).active

    def test_open_ended_window(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.HOST, H1, NOW))
        assert service.schedules.is_in_maintenance(H1, at=NOW + 10 * 365 * 86400).active
        assert not service.schedules.is_in_maintenance(H1, at=NOW - 1).active

    def test_end_must_follow_start(self, service):
        with pytest.raises(InvalidArgumentError):
            service.store.register(single("singlesche-00000001", TargetKind.HOST, H1, NOW, NOW))

    def test_status_is_kept(self, service):
        schedule = replace(
            single("singlesche-00000001", TargetKind.HOST, H1, NOW), status=ScheduleStatus.OS_UPDATE
        )
        service.store.register(schedule)
        matching = service.schedules.is_in_maintenance(H1, at=NOW).matching_schedules
        assert matching[0].status == ScheduleStatus.OS_UPDATE


class TestRepeatedSchedules:

    def test_active_through_duration(self, service):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 120, minutes="30", hours="12"))
        check = service.schedules.is_in_maintenance
        assert check(H1, at=WINDOW_START).active
        assert check(H1, at=WINDOW_START + 119).active
        assert not check(H1, at=WINDOW_START + 120).active
        assert not check(H1, at=WINDOW_START - 1).active
        assert not check(H1, at=WINDOW_START - 121).active

    def test_every_minute_is_always_active(self, service):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 120))
        for offset in (0, 1, 59, 60, 121, 3599):
            assert service.schedules.is_in_maintenance(H1, at=WINDOW_START + offset).active

    def test_window_shorter_than_a_minute(self, service):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 30, minutes="30", hours="12"))
        assert service.schedules.is_in_maintenance(H1, at=WINDOW_START + 29).active
        assert not service.schedules.is_in_maintenance(H1, at=WINDOW_START + 45).active

    def test_window_spanning_midnight(self, service):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.SITE, S1, 7200, minutes="0", hours="23"))
        after_midnight = int(datetime(2026, 1, 6, 0, 30, tzinfo=timezone.utc).timestamp())
        assert service.schedules.is_in_maintenance(H1, at=after_midnight).active

    def test_weekday_restriction(self, service):
        service.store.register(
            repeated("repeatedsche-00000001", TargetKind.HOST, H1, 3600, minutes="0", hours="2", day_week="mon-fri")
        )
        monday = int(datetime(2026, 1, 5, 2, 15, tzinfo=timezone.utc).timestamp())
        sunday = int(datetime(2026, 1, 4, 2, 15, tzinfo=timezone.utc).timestamp())
        assert service.schedules.is_in_maintenance(H1, at=monday).active
        assert not service.schedules.is_in_maintenance(H1, at=sunday).active

    def test_malformed_cron_rejected(self, service):
        with pytest.raises(InvalidArgumentError):
            service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 60, minutes="/5"))

    def test_duration_must_be_positive(self, service):
        with pytest.raises(InvalidArgumentError):
            service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 0))

    def test_duration_capped_at_32_bits(self, service):
        with pytest.raises(InvalidArgumentError):
            service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 10**11))
        with pytest.raises(InvalidArgumentError):
            service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, MAX_DURATION_SECONDS + 1))

    def test_longest_duration_evaluates(self, service):
        service.store.register(repeated(
            "repeatedsche-00000001", TargetKind.HOST, H1, MAX_DURATION_SECONDS,
            minutes="0", hours="0", day_month="1", month="1",
        ))
        check = service.schedules.is_in_maintenance
        assert check(H1, at=NOW).active
        assert check(H1, at=NOW + 180 * 86400).active
        # lookback is clamped to 1970-01-01, itself a matching minute
        assert check(H1, at=0).active

    def test_window_open_at_epoch_zero(self, service):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, MAX_DURATION_SECONDS))
        assert service.schedules.is_in_maintenance(H1, at=0).active

    def test_last_representable_instant(self, service):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 86400, minutes="0", hours="0"))
        assert service.schedules.is_in_maintenance(H1, at=MAX_EPOCH_SECONDS).active

    @pytest.mark.parametrize("at", [MAX_EPOCH_SECONDS + 1, 10**15, -1])
    def test_instant_out_of_range(self, service, at):
        service.store.register(repeated("repeatedsche-00000001", TargetKind.HOST, H1, 60))
        with pytest.raises(InvalidArgumentError):
            service.schedules.is_in_maintenance(H1, at=at)
        with pytest.raises(InvalidArgumentError):
            service.schedules.find_schedules(at=at)


class TestCoverage:

    def test_host_coverage(self, service):
        targets = service.schedules.coverage(H1)
        assert [t.id for t in targets] == [H1, S1, R3]

    def test_site_coverage(self, service):
        assert [t.id for t in service.schedules.coverage(S1)] == [S1, R3]

    def test_region_coverage(self, service):
        assert [t.id for t in service.schedules.coverage(R3)] == [R3]

    def test_region_schedule_covers_host(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.REGION, R3, NOW))
        assert service.schedules.is_in_maintenance(H1, at=NOW).active

    def test_parent_region_does_not_cover_host(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.REGION, R2, NOW))
        assert not service.schedules.is_in_maintenance(H1, at=NOW).active
        assert not service.schedules.is_in_maintenance(S1, at=NOW).active
        assert not service.schedules.is_in_maintenance(R3, at=NOW).active
        assert service.schedules.is_in_maintenance(R2, at=NOW).active

    def test_host_schedule_does_not_cover_site(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.HOST, H1, NOW))
        assert not service.schedules.is_in_maintenance(S1, at=NOW).active

    def test_clearing_site_removes_coverage(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.SITE, S1, NOW))
        host = service.store.get(ResourceKind.HOST, H1)
        service.store.update(replace(host, site_id=""))
        assert not service.schedules.is_in_maintenance(H1, at=NOW).active

    def test_unplaced_host(self, service):
        service.store.register(Host(id="host-00000002"))
        assert [t.id for t in service.schedules.coverage("host-00000002")] == ["host-00000002"]

    def test_instances_have_no_schedules(self, service):
        with pytest.raises(InvalidArgumentError):
            service.schedules.coverage("inst-00000001")

    def test_unknown_host(self, service):
        with pytest.raises(NotFoundError):
            service.schedules.is_in_maintenance("host-000000ff", at=NOW)

    def test_multiple_matches_are_all_reported(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.HOST, H1, NOW))
        service.store.register(single("singlesche-00000002", TargetKind.REGION, R3, NOW))
        service.store.register(repeated("repeatedsche-00000001", TargetKind.SITE, S1, 60))
        state = service.schedules.is_in_maintenance(H1, at=NOW)
        assert len(state.matching) == 3
        assert [s.id for s in state.matching.single_schedules] == ["singlesche-00000001", "singlesche-00000002"]


class TestFindSchedules:

    @pytest.fixture
    def scheduled(self, service):
        service.store.register(single("singlesche-00000001", TargetKind.HOST, H1, NOW, NOW + 60))
        service.store.register(single("singlesche-00000002", TargetKind.REGION, R1, NOW + 3600))
        service.store.register(repeated("repeatedsche-00000001", TargetKind.SITE, S1, 60, minutes="0", hours="0"))
        return service

    def test_no_filter_lists_everything(self, scheduled):
        found = scheduled.schedules.find_schedules()
        assert len(found) == 3

    def test_no_filter_at_instant(self, scheduled):
        found = scheduled.schedules.find_schedules(at=NOW)
        assert [s.id for s in found.schedules] == ["singlesche-00000001", "repeatedsche-00000001"]

    def test_host_filter_includes_site(self, scheduled):
        found = scheduled.schedules.find_schedules(host_id=H1)
        assert {s.id for s in found.schedules} == {"singlesche-00000001", "repeatedsche-00000001"}

    def test_site_filter(self, scheduled):
        found = scheduled.schedules.find_schedules(site_id=S1)
        assert [s.id for s in found.schedules] == ["repeatedsche-00000001"]

    def test_region_filter(self, scheduled):
        found = scheduled.schedules.find_schedules(region_id=R1)
        assert [s.id for s in found.schedules] == ["singlesche-00000002"]

    def test_two_filters_conflict(self, scheduled):
        with pytest.raises(ConflictError):
            scheduled.schedules.find_schedules(host_id=H1, site_id=S1)
