from __future__ import annotations

import json
import re
import threading
from pathlib import Path
from typing import Any

from barberbot.application.ports.state_store import StateStorePort
from barberbot.domain.entities.conversation_state import AppointmentRef, ConversationState, Step
from barberbot.domain.entities.side_conversation import SideConversationSession

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9@._+-]")


class JsonStateStore(StateStorePort):
    """One JSON file per requester, so several workers can share a state directory."""

    def __init__(self, data_dir: str = "./data/sessions") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def _get_lock(self, requester_id: str) -> threading.Lock:
        """Get or create a lock for a requester_id."""
        with self._lock_lock:
            if requester_id not in self._locks:
                self._locks[requester_id] = threading.Lock()
            return self._locks[requester_id]

    def _get_file_path(self, requester_id: str) -> Path:
        return self._data_dir / f"{_UNSAFE_CHARS.sub('_', requester_id)}.json"

    def _load(self, requester_id: str) -> dict[str, Any]:
        """Load requester data from JSON file, return default if missing or corrupted."""
        file_path = self._get_file_path(requester_id)
        default = {
            "requester_id": requester_id,
            "state": None,
            "side_session": None,
            "recent_booking_at": None,
            "version": 1,
        }
        if not file_path.exists():
            return default
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError):
            return default
        for key, value in default.items():
            data.setdefault(key, value)
        return data

    def _save(self, requester_id: str, data: dict[str, Any]) -> None:
        """Save requester data atomically; drop the file once nothing is left in it."""
        file_path = self._get_file_path(requester_id)
        if data["state"] is None and data["side_session"] is None and data["recent_booking_at"] is None:
            file_path.unlink(missing_ok=True)
            return

        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def _requester_ids(self) -> list[str]:
        ids = []
        for file_path in self._data_dir.glob("*.json"):
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    ids.append(json.load(f)["requester_id"])
            except (json.JSONDecodeError, IOError, KeyError):
                continue
        return ids

    def get_state(self, requester_id: str) -> ConversationState | None:
        with self._get_lock(requester_id):
            return _deserialize_state(self._load(requester_id)["state"])

    def set_state(self, requester_id: str, state: ConversationState) -> None:
        with self._get_lock(requester_id):
            data = self._load(requester_id)
            data["state"] = _serialize_state(state)
            self._save(requester_id, data)

    def delete_state(self, requester_id: str) -> None:
        with self._get_lock(requester_id):
            data = self._load(requester_id)
            data["state"] = None
            self._save(requester_id, data)

    def sweep_states(self, idle_before_ts: float) -> list[str]:
        expired = []
        for requester_id in self._requester_ids():
            with self._get_lock(requester_id):
                data = self._load(requester_id)
                state = _deserialize_state(data["state"])
                if state is not None and state.last_contact_at < idle_before_ts:
                    data["state"] = None
                    self._save(requester_id, data)
                    expired.append(requester_id)
        return expired

    def get_side_session(self, requester_id: str) -> SideConversationSession | None:
        with self._get_lock(requester_id):
            return _deserialize_side_session(self._load(requester_id)["side_session"])

    def set_side_session(self, session: SideConversationSession) -> None:
        with self._get_lock(session.requester_id):
            data = self._load(session.requester_id)
            data["side_session"] = {
                "requester_id": session.requester_id,
                "started_at": session.started_at,
                "last_contact_at": session.last_contact_at,
            }
            self._save(session.requester_id, data)

    def delete_side_session(self, requester_id: str) -> bool:
        with self._get_lock(requester_id):
            data = self._load(requester_id)
            existed = data["side_session"] is not None
            data["side_session"] = None
            self._save(requester_id, data)
            return existed

    def sweep_side_sessions(self, idle_before_ts: float) -> list[SideConversationSession]:
        expired = []
        for requester_id in self._requester_ids():
            with self._get_lock(requester_id):
                data = self._load(requester_id)
                session = _deserialize_side_session(data["side_session"])
                if session is not None and session.last_contact_at < idle_before_ts:
                    data["side_session"] = None
                    self._save(requester_id, data)
                    expired.append(session)
        return expired

    def mark_recent_booking(self, requester_id: str, timestamp: float) -> None:
        with self._get_lock(requester_id):
            data = self._load(requester_id)
            data["recent_booking_at"] = timestamp
            self._save(requester_id, data)

    def consume_recent_booking(self, requester_id: str, now_ts: float, ttl_seconds: float) -> bool:
        with self._get_lock(requester_id):
            data = self._load(requester_id)
            marked_at = data["recent_booking_at"]
            if marked_at is None:
                return False
            data["recent_booking_at"] = None
            self._save(requester_id, data)
            return now_ts - marked_at < ttl_seconds

    def sweep_recent_bookings(self, marked_before_ts: float) -> list[str]:
        expired = []
        for requester_id in self._requester_ids():
            with self._get_lock(requester_id):
                data = self._load(requester_id)
                marked_at = data["recent_booking_at"]
                if marked_at is not None and marked_at < marked_before_ts:
                    data["recent_booking_at"] = None
                    self._save(requester_id, data)
                    expired.append(requester_id)
        return expired

def _serialize_state(state: ConversationState) -> dict[str, Any]:
    ref = state.pending_appointment
    return {
        "last_contact_at": state.last_contact_at,
        "step": state.step.value if state.step else None,
        "pending_date": state.pending_date,
        "pending_time": state.pending_time,
        "pending_appointment": (
            {"client_name": ref.client_name, "date": ref.date, "time": ref.time} if ref else None
        ),
    }


def _deserialize_state(data: dict[str, Any] | None) -> ConversationState | None:
    if not data:
        return None
    ref = data.get("pending_appointment")
    return ConversationState(
        last_contact_at=data["last_contact_at"],
        step=Step(data["step"]) if data.get("step") else None,
        pending_date=data.get("pending_date"),
        pending_time=data.get("pending_time"),
        pending_appointment=AppointmentRef(**ref) if ref else None,
    )


def _deserialize_side_session(data: dict[str, Any] | None) -> SideConversationSession | None:
    if not data:
        return None
    return SideConversationSession(
        requester_id=data["requester_id"],
        started_at=data["started_at"],
        last_contact_at=data["last_contact_at"],
    )
