from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from barberbot.application.exceptions import AppointmentNotFoundError, RepositoryError, SlotConflictError
from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.domain.entities.appointment import Appointment, Cancellation, Feedback
from barberbot.infrastructure.store.sql_models import AppointmentRow, CancellationRow, FeedbackRow


class SqlAppointmentRepository(AppointmentRepositoryPort):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            self._logger.error("Appointment store failure", extra={"error": str(e)})
            raise RepositoryError(str(e)) from e

    async def create(self, appointment: Appointment) -> Appointment:
        row = AppointmentRow(
            client_name=appointment.client_name,
            date=appointment.date,
            time=appointment.time,
            requester_id=appointment.requester_id,
            created_at=appointment.created_at,
        )
        async with self._session() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise SlotConflictError(f"{appointment.date.isoformat()} {appointment.time} already booked") from e
            return _to_appointment(row)

    async def count_by_requester(self, requester_id: str, from_date: date | None = None) -> int:
        stmt = select(func.count()).select_from(AppointmentRow).where(AppointmentRow.requester_id == requester_id)
        if from_date is not None:
            stmt = stmt.where(AppointmentRow.date >= from_date)
        async with self._session() as session:
            return (await session.execute(stmt)).scalar_one()

    async def find_by_date_time(self, day: date, time: str) -> Appointment | None:
        stmt = select(AppointmentRow).where(AppointmentRow.date == day, AppointmentRow.time == time)
        async with self._session() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _to_appointment(row) if row else None

    async def find_by_date(self, day: date) -> list[Appointment]:
        stmt = select(AppointmentRow).where(AppointmentRow.date == day).order_by(AppointmentRow.time)
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_to_appointment(row) for row in rows]

    async def find_by_name_date_time(self, client_name: str, day: date, time: str) -> Appointment | None:
        stmt = select(AppointmentRow).where(
            AppointmentRow.client_name == client_name,
            AppointmentRow.date == day,
            AppointmentRow.time == time,
        )
        async with self._session() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _to_appointment(row) if row else None

    async def delete_by_name_date_time(self, client_name: str, day: date, time: str) -> None:
        stmt = delete(AppointmentRow).where(
            AppointmentRow.client_name == client_name,
            AppointmentRow.date == day,
            AppointmentRow.time == time,
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            await session.commit()
            if result.rowcount == 0:
                raise AppointmentNotFoundError(f"{client_name} {day.isoformat()} {time}")

    async def cancel(self, client_name: str, day: date, time: str, record: Cancellation) -> None:
        stmt = delete(AppointmentRow).where(
            AppointmentRow.client_name == client_name,
            AppointmentRow.date == day,
            AppointmentRow.time == time,
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await session.rollback()
                raise AppointmentNotFoundError(f"{client_name} {day.isoformat()} {time}")
            session.add(_to_cancellation_row(record))
            await session.commit()

    async def find_by_date_range_from(self, day: date) -> list[Appointment]:
        stmt = (
            select(AppointmentRow)
            .where(AppointmentRow.date >= day)
            .order_by(AppointmentRow.date, AppointmentRow.time)
        )
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_to_appointment(row) for row in rows]

    async def delete_older_than(self, day: date) -> int:
        async with self._session() as session:
            result = await session.execute(delete(AppointmentRow).where(AppointmentRow.date < day))
            await session.commit()
            return result.rowcount or 0

    async def insert_cancellation(self, record: Cancellation) -> None:
        async with self._session() as session:
            session.add(_to_cancellation_row(record))
            await session.commit()

    async def find_cancellations_all(self) -> list[Cancellation]:
        async with self._session() as session:
            rows = (await session.execute(select(CancellationRow).order_by(CancellationRow.id))).scalars().all()
            return [
                Cancellation(
                    client_name=row.client_name,
                    date=row.date,
                    time=row.time,
                    reason=row.reason,
                    created_at=row.created_at,
                )
                for row in rows
            ]

    async def insert_feedback(self, record: Feedback) -> None:
        async with self._session() as session:
            session.add(
                FeedbackRow(
                    client_name=record.client_name,
                    comment=record.comment,
                    rating=record.rating,
                    created_at=record.created_at,
                )
            )
            await session.commit()


def _to_appointment(row: AppointmentRow) -> Appointment:
    return Appointment(
        id=row.id,
        client_name=row.client_name,
        date=row.date,
        time=row.time,
        requester_id=row.requester_id,
        created_at=row.created_at,
    )


def _to_cancellation_row(record: Cancellation) -> CancellationRow:
    return CancellationRow(
        client_name=record.client_name,
        date=record.date,
        time=record.time,
        reason=record.reason,
        created_at=record.created_at,
    )
