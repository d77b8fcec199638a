"""Use case de processamento de webhooks inbound.

Fluxo:
    1. valida parâmetros (token e payload)
    2. classifica o payload e calcula a identidade do evento
    3. claim atômico no store de dedupe
    4. resolve tenant e provider de mensageria habilitado
    5. dispatch (mensagens) ou notificação (status) com timeout e 1 retry;
       com vários itens no payload, cada item tem registro próprio no dedupe
    6. grava outcome final no dedupe

Nunca propaga exceção: o resultado vira corpo de resposta HTTP 200, para
que falhas internas não provoquem reentrega pela plataforma externa.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from app.domain.errors import DomainError, ErrorKind, TransientDispatchError
from app.domain.webhook_event import (
    DedupOutcome,
    EventKind,
    ProcessingResult,
    ProcessingState,
)
from app.observability import get_correlation_id, record_latency, record_webhook_outcome
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.domain.webhook_event import DedupRecord, InboundWebhookEvent
    from app.protocols.dedupe import DedupeStoreProtocol
    from app.protocols.tenant_directory import TenantDirectoryProtocol
    from app.protocols.webhook_parser import WebhookPayloadParserProtocol
    from app.protocols.workflow_engine import WorkflowDispatcherProtocol
    from app.services.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WebhookProcessorConfig:
    """Parâmetros de execução do processador."""

    provider_key: str = "meta-whatsapp"
    dedupe_ttl_seconds: int = 86400
    pending_wait_seconds: float = 5.0
    pending_poll_interval_seconds: float = 0.1
    dispatch_timeout_seconds: float = 10.0
    dispatch_retries: int = 1


@dataclass(frozen=True, slots=True)
class _DispatchOutcome:
    success: bool
    detail: str
    error: str | None = None


class WebhookProcessor:
    """Processa eventos de `POST /webhooks/{tenant_token}`."""

    def __init__(
        self,
        *,
        parser: WebhookPayloadParserProtocol,
        dedupe: DedupeStoreProtocol,
        tenant_directory: TenantDirectoryProtocol,
        registry: ProviderRegistry,
        dispatcher: WorkflowDispatcherProtocol,
        config: WebhookProcessorConfig | None = None,
    ) -> None:
        self._parser = parser
        self._dedupe = dedupe
        self._tenants = tenant_directory
        self._registry = registry
        self._dispatcher = dispatcher
        self._config = config or WebhookProcessorConfig()

    async def process(self, tenant_token: str, payload: dict[str, Any] | None) -> ProcessingResult:
        """Processa um evento; sempre retorna ProcessingResult (nunca levanta)."""
        started_at = time.perf_counter()
        if not tenant_token or not payload:
            result = ProcessingResult(
                success=False,
                state=ProcessingState.REJECTED,
                detail="invalid_parameters",
                error="invalid_parameters",
            )
        else:
            try:
                result = await self._process_event(tenant_token, payload)
            except Exception as exc:
                # Falha de infraestrutura antes/depois do dispatch (ex.: dedupe)
                logger.exception(
                    "webhook_processing_failed",
                    extra={
                        "tenant_token": mask_identifier(tenant_token),
                        "error_type": type(exc).__name__,
                    },
                )
                result = ProcessingResult(
                    success=False,
                    state=ProcessingState.REJECTED,
                    detail="internal_error",
                    error="internal_error",
                )

        latency_ms = (time.perf_counter() - started_at) * 1000
        record_latency("webhook_processor", "process", latency_ms, get_correlation_id())
        record_webhook_outcome(result.state.value, result.detail, result.success, get_correlation_id())
        return result

    async def _process_event(self, tenant_token: str, payload: dict[str, Any]) -> ProcessingResult:
        event = self._parser.parse(tenant_token, payload)
        ttl = self._config.dedupe_ttl_seconds

        claim = await self._dedupe.claim(event.identity, ttl)
        if not claim.claimed:
            return await self._duplicate_result(event.identity, claim.record)

        try:
            outcome = await self._handle_claimed(event)
        except BaseException:
            # Não deixa o registro preso em pending (inclui cancelamento)
            await self._dedupe.complete(
                event.identity, success=False, detail="internal_error", ttl=ttl
            )
            raise

        await self._dedupe.complete(
            event.identity, success=outcome.success, detail=outcome.detail, ttl=ttl
        )
        state = ProcessingState.ACCEPTED if outcome.success else ProcessingState.REJECTED
        logger.info(
            "webhook_processed",
            extra={
                "identity": mask_identifier(event.identity),
                "event_kind": event.kind.value,
                "state": state.value,
                "detail": outcome.detail,
            },
        )
        return ProcessingResult(
            success=outcome.success,
            state=state,
            detail=outcome.detail,
            identity=event.identity,
            error=outcome.error,
        )

    async def _handle_claimed(self, event: InboundWebhookEvent) -> _DispatchOutcome:
        tenant_id = await self._tenants.resolve(event.tenant_token)
        if tenant_id is None:
            logger.warning(
                "webhook_tenant_not_found",
                extra={"tenant_token": mask_identifier(event.tenant_token)},
            )
            return _DispatchOutcome(False, "tenant_not_found", "tenant_not_found")

        provider_key = self._config.provider_key
        try:
            await self._registry.get_enabled_setting(tenant_id, provider_key)
        except DomainError as exc:
            detail = (
                "provider_disabled"
                if exc.kind is ErrorKind.PROVIDER_DISABLED
                else "provider_not_configured"
            )
            logger.warning(
                "webhook_provider_unavailable",
                extra={"tenant_id": tenant_id, "provider_key": provider_key, "detail": detail},
            )
            return _DispatchOutcome(False, detail, detail)

        if event.kind is EventKind.UNKNOWN:
            return _DispatchOutcome(True, "no_actionable_content")

        correlation_id = get_correlation_id()
        calls: list[tuple[str, Callable[[], Awaitable[None]]]] = []
        if event.kind is EventKind.MESSAGE:
            for message in event.messages:
                call = partial(
                    self._dispatcher.dispatch_message,
                    tenant_id=tenant_id,
                    provider_key=provider_key,
                    message=message,
                    correlation_id=correlation_id,
                )
                calls.append((f"msg:{message.message_id}", call))
            success_detail = "message_dispatched"
        else:
            for status in event.statuses:
                call = partial(
                    self._dispatcher.notify_status,
                    tenant_id=tenant_id,
                    provider_key=provider_key,
                    status=status,
                    correlation_id=correlation_id,
                )
                calls.append((f"status:{status.message_id}:{status.status}", call))
            success_detail = "status_notified"

        # Com vários itens, cada um tem registro próprio no dedupe: a
        # reentrega de um evento que falhou no meio não repete os já enviados
        track_items = len(calls) > 1
        for item_key, call in calls:
            if track_items:
                outcome = await self._dispatch_item(
                    f"{event.identity}#{item_key}", call, tenant_id
                )
            else:
                outcome = await self._dispatch_with_retry(call, tenant_id)
            if not outcome.success:
                return outcome
        return _DispatchOutcome(True, success_detail)

    async def _dispatch_item(
        self, item_identity: str, call: Callable[[], Awaitable[None]], tenant_id: str
    ) -> _DispatchOutcome:
        """Dispatch de um item com registro próprio de dedupe."""
        ttl = self._config.dedupe_ttl_seconds
        claim = await self._dedupe.claim(item_identity, ttl)
        if not claim.claimed:
            if claim.record.outcome is DedupOutcome.SUCCESS:
                logger.info(
                    "webhook_item_already_dispatched",
                    extra={"identity": mask_identifier(item_identity), "tenant_id": tenant_id},
                )
                return _DispatchOutcome(True, "dispatched")
            # pending sem dono: tentativa anterior interrompida; expira com o TTL
            return _DispatchOutcome(False, "dispatch_in_progress", "dispatch_in_progress")

        try:
            outcome = await self._dispatch_with_retry(call, tenant_id)
        except BaseException:
            await self._dedupe.complete(
                item_identity, success=False, detail="internal_error", ttl=ttl
            )
            raise
        await self._dedupe.complete(
            item_identity, success=outcome.success, detail=outcome.detail, ttl=ttl
        )
        return outcome

    async def _dispatch_with_retry(
        self, call: Callable[[], Awaitable[None]], tenant_id: str
    ) -> _DispatchOutcome:
        attempts = self._config.dispatch_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                await asyncio.wait_for(call(), timeout=self._config.dispatch_timeout_seconds)
                return _DispatchOutcome(True, "dispatched")
            except (TransientDispatchError, TimeoutError) as exc:
                logger.warning(
                    "webhook_dispatch_transient_failure",
                    extra={
                        "tenant_id": tenant_id,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "error_type": type(exc).__name__,
                    },
                )
            except Exception as exc:
                logger.exception(
                    "webhook_dispatch_failed",
                    extra={"tenant_id": tenant_id, "error_type": type(exc).__name__},
                )
                return _DispatchOutcome(False, "internal_error", "internal_error")
        return _DispatchOutcome(False, "dispatch_failed", "dispatch_failed")

    async def _duplicate_result(self, identity: str, record: DedupRecord) -> ProcessingResult:
        """Entrega repetida: replay do resultado gravado, aguardando se pending."""
        if record.outcome is DedupOutcome.PENDING:
            record = await self._wait_for_completion(identity, record)

        logger.info(
            "webhook_duplicate",
            extra={"identity": mask_identifier(identity), "outcome": record.outcome.value},
        )
        if record.outcome is DedupOutcome.PENDING:
            return ProcessingResult(
                success=True,
                state=ProcessingState.DUPLICATE,
                detail="in_flight",
                identity=identity,
            )
        return ProcessingResult(
            success=record.success,
            state=ProcessingState.DUPLICATE,
            detail=record.detail,
            identity=identity,
            error=None if record.success else record.detail or "processing_failed",
        )

    async def _wait_for_completion(self, identity: str, record: DedupRecord) -> DedupRecord:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._config.pending_wait_seconds
        current = record
        while loop.time() < deadline:
            await asyncio.sleep(self._config.pending_poll_interval_seconds)
            latest = await self._dedupe.get(identity)
            if latest is None:
                break
            current = latest
            if current.outcome is not DedupOutcome.PENDING:
                break
        return current

