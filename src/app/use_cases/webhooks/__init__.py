"""Use cases de webhooks inbound."""

from .process_webhook import WebhookProcessor, WebhookProcessorConfig
from .sweep_dedupe import run_dedupe_sweeper, sweep_once

__all__ = [
    "WebhookProcessor",
    "WebhookProcessorConfig",
    "run_dedupe_sweeper",
    "sweep_once",
]
