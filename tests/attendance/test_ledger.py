from datetime import datetime, timedelta, timezone

from store_attendance.attendance.ledger import PERSISTENCE_WARNING, AttendanceLedger
from store_attendance.attendance.model import TimeLog
from store_attendance.core.enums import ClockType, OutcomeStatus

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _log(log_id, minutes, user="juan", type_=ClockType.INGRESO):
    return TimeLog(
        id=log_id,
        user_id=user,
        user_full_name=user,
        user_photo_url="",
        type=type_,
        timestamp=T0 + timedelta(minutes=minutes),
        has_incident=False,
        identity_score=90,
        uniform_compliant=True,
    )


def test_append_persists_and_refreshes(time_logs_repo):
    ledger = AttendanceLedger(time_logs_repo)
    outcome = ledger.append(_log("log-1", 0))
    assert outcome.status == OutcomeStatus.SUCCESS
    assert [log.id for log in ledger.records()] == ["log-1"]


def test_records_are_newest_first(time_logs_repo):
    ledger = AttendanceLedger(time_logs_repo)
    ledger.append(_log("log-1", 0))
    ledger.append(_log("log-2", 30, type_=ClockType.EGRESO))
    ledger.append(_log("log-3", 10, user="maria"))
    assert [log.id for log in ledger.records()] == ["log-2", "log-3", "log-1"]
    assert [log.id for log in ledger.for_user("maria")] == ["log-3"]


def test_failed_insert_keeps_a_local_echo(time_logs_repo):
    ledger = AttendanceLedger(time_logs_repo)
    time_logs_repo.fail_insert = True

    outcome = ledger.append(_log("log-1", 0))
    assert outcome.status == OutcomeStatus.DEGRADED
    assert outcome.reason == PERSISTENCE_WARNING
    assert outcome.value.id == "log-1"
    assert [log.id for log in ledger.records()] == ["log-1"]


def test_local_echo_is_dropped_once_the_remote_has_it(time_logs_repo):
    ledger = AttendanceLedger(time_logs_repo)
    time_logs_repo.fail_insert = True
    log = _log("log-1", 0)
    ledger.append(log)

    time_logs_repo.fail_insert = False
    time_logs_repo.insert(log)
    ledger.refresh()
    assert [item.id for item in ledger.records()] == ["log-1"]


def test_refresh_failure_keeps_the_previous_view(time_logs_repo):
    ledger = AttendanceLedger(time_logs_repo)
    ledger.append(_log("log-1", 0))

    time_logs_repo.fail_list = True
    outcome = ledger.refresh()
    assert outcome.status == OutcomeStatus.FAILED
    assert [log.id for log in ledger.records()] == ["log-1"]


def test_duplicate_ids_are_inserted_once(time_logs_repo):
    ledger = AttendanceLedger(time_logs_repo)
    ledger.append(_log("log-1", 0))
    ledger.append(_log("log-1", 0))
    assert len(ledger.records()) == 1
