"""Testes dos modelos de eventos de webhook e dedupe."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from app.domain.webhook_event import (
    DedupOutcome,
    DedupRecord,
    InboundMessage,
    ProcessingResult,
    ProcessingState,
)


def test_dedup_record_json_roundtrip() -> None:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    record = DedupRecord(
        identity="tok:wamid.1",
        outcome=DedupOutcome.SUCCESS,
        first_seen_at=now,
        expires_at=now + timedelta(hours=24),
        success=True,
        detail="message_dispatched",
    )

    assert DedupRecord.from_json(record.to_json()) == record
    assert DedupRecord.from_json(record.to_json().encode()) == record


def test_dedup_record_expiry_boundary() -> None:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    record = DedupRecord(
        identity="x",
        outcome=DedupOutcome.PENDING,
        first_seen_at=now,
        expires_at=now + timedelta(seconds=10),
    )

    assert record.is_expired(now + timedelta(seconds=9)) is False
    assert record.is_expired(now + timedelta(seconds=10)) is True


def test_inbound_message_to_dict_omits_empty_fields() -> None:
    message = InboundMessage(message_id="wamid.1", from_number="5511", message_type="text", text="oi")

    assert message.to_dict() == {
        "message_id": "wamid.1",
        "from_number": "5511",
        "message_type": "text",
        "text": "oi",
    }


def test_processing_result_response_shape() -> None:
    accepted = ProcessingResult(
        success=True, state=ProcessingState.ACCEPTED, detail="message_dispatched"
    )
    rejected = ProcessingResult(
        success=False,
        state=ProcessingState.REJECTED,
        detail="tenant_not_found",
        error="tenant_not_found",
    )

    assert accepted.as_response() == {"success": True, "detail": "message_dispatched"}
    assert rejected.as_response() == {
        "success": False,
        "detail": "tenant_not_found",
        "error": "tenant_not_found",
    }
