from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, SubjectType
from ..core.exceptions import AlreadyClockedIn
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from ..geo.geofence import GeoPoint
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, subject_type, subject_id, work_date, scheduled_start, scheduled_end,
    actual_start, actual_end, break_minutes, status,
    late_minutes, early_leave_minutes, overtime_minutes,
    clock_in_lat, clock_in_lon, clock_out_lat, clock_out_lon, notes, recorded_by
"""


def _point(lat, lon) -> Optional[GeoPoint]:
    if lat is None or lon is None:
        return None
    return GeoPoint(float(lat), float(lon))


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        subject_type=SubjectType(r["subject_type"]),
        subject_id=int(r["subject_id"]),
        work_date=r["work_date"],
        scheduled_start=normalize_mysql_time(r["scheduled_start"]),
        scheduled_end=normalize_mysql_time(r["scheduled_end"]),
        actual_start=r.get("actual_start"),
        actual_end=r.get("actual_end"),
        break_minutes=int(r.get("break_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        late_minutes=int(r.get("late_minutes") or 0),
        early_leave_minutes=int(r.get("early_leave_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        clock_in_location=_point(r.get("clock_in_lat"), r.get("clock_in_lon")),
        clock_out_location=_point(r.get("clock_out_lat"), r.get("clock_out_lon")),
        notes=r.get("notes"),
        recorded_by=r.get("recorded_by"),
    )


def _values(rec: AttendanceRecord) -> tuple:
    cin = rec.clock_in_location
    cout = rec.clock_out_location
    return (
        rec.actual_start,
        rec.actual_end,
        int(rec.break_minutes),
        rec.status.value,
        int(rec.late_minutes),
        int(rec.early_leave_minutes),
        int(rec.overtime_minutes),
        cin.latitude if cin else None,
        cin.longitude if cin else None,
        cout.latitude if cout else None,
        cout.longitude if cout else None,
        rec.notes,
        rec.recorded_by,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_subject_and_date(
        self, *, subject_type: SubjectType, subject_id: int, work_date: date
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE subject_type=%s AND subject_id=%s AND work_date=%s
                """,
                (subject_type.value, int(subject_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_subject_in_range(
        self, *, subject_type: SubjectType, subject_id: int, start: date, end: date
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE subject_type=%s AND subject_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (subject_type.value, int(subject_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def insert(self, record: AttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        subject_type, subject_id, work_date, scheduled_start, scheduled_end,
                        actual_start, actual_end, break_minutes, status,
                        late_minutes, early_leave_minutes, overtime_minutes,
                        clock_in_lat, clock_in_lon, clock_out_lat, clock_out_lon, notes, recorded_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.subject_type.value,
                        int(record.subject_id),
                        record.work_date,
                        record.scheduled_start,
                        record.scheduled_end,
                        *_values(record),
                    ),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise AlreadyClockedIn("Attendance for this day is already recorded") from exc
            raise

    def update(self, record: AttendanceRecord, *, expected_status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET actual_start=%s, actual_end=%s, break_minutes=%s, status=%s,
                    late_minutes=%s, early_leave_minutes=%s, overtime_minutes=%s,
                    clock_in_lat=%s, clock_in_lon=%s, clock_out_lat=%s, clock_out_lon=%s,
                    notes=%s, recorded_by=%s
                WHERE record_id=%s AND status=%s
                """,
                (*_values(record), int(record.record_id), expected_status.value),
            )
            return cur.rowcount > 0
