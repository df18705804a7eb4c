"""Broadcast fan-out with reconciliation of dead connections.

The dispatcher lists the registry, pushes the payload to every candidate in
parallel and folds each tagged :class:`DeliveryResult` back into the
registry:

- ``ok``    -> counted as delivered
- ``gone``  -> removed from the registry (pruned); a failed removal is logged
               and reported but does not fail the broadcast
- ``error`` -> recorded, record kept, not retried in this call

A failure on one candidate never cancels or delays delivery to another
beyond the shared concurrency bound. Each attempt is capped by
``delivery_timeout`` and a timeout counts as a transient error.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable

from config.aws import DELIVERY_TIMEOUT_SECONDS, MAX_CONCURRENT_DELIVERIES
from core.connections import (
    DeliveryFailure,
    DeliveryReport,
    DeliveryResult,
    DeliveryStatus,
    DestinationEndpoint,
)
from core.exceptions import StoreError
from infrastructure.aws.delivery import DeliveryChannel, DeliveryChannelFactory

from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _CandidateOutcome:
    result: DeliveryResult
    pruned: bool = False
    prune_error: str | None = None


class BroadcastDispatcher:
    """Fan a payload out to every registered connection."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        channel_factory: DeliveryChannelFactory,
        *,
        delivery_timeout: float = DELIVERY_TIMEOUT_SECONDS,
        max_concurrency: int = MAX_CONCURRENT_DELIVERIES,
    ) -> None:
        if delivery_timeout <= 0:
            raise ValueError("delivery_timeout must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._registry = registry
        self._channel_factory = channel_factory
        self._delivery_timeout = delivery_timeout
        self._max_concurrency = max_concurrency

    async def broadcast(self, payload: bytes, endpoint: DestinationEndpoint) -> DeliveryReport:
        """Deliver ``payload`` to every registered connection.

        Raises :class:`StoreError` when the membership list cannot be read;
        no delivery is attempted in that case.
        """

        connection_ids = await self._registry.list_all()
        return await self._fan_out(connection_ids, payload, endpoint)

    async def send_to(
        self, connection_id: str, payload: bytes, endpoint: DestinationEndpoint
    ) -> DeliveryReport:
        """Deliver ``payload`` to one connection with the same prune policy as broadcast."""

        return await self._fan_out([connection_id], payload, endpoint)

    async def _fan_out(
        self,
        connection_ids: Iterable[str],
        payload: bytes,
        endpoint: DestinationEndpoint,
    ) -> DeliveryReport:
        # Stored keys are unique; dedupe anyway so each id is attempted exactly once
        candidates = list(dict.fromkeys(connection_ids))
        report = DeliveryReport(candidates=len(candidates))
        if not candidates:
            return report

        # Building a channel may construct a boto3 client, which blocks
        channel = await asyncio.to_thread(self._channel_factory, endpoint)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def attempt(connection_id: str) -> _CandidateOutcome:
            async with semaphore:
                return await self._deliver_and_reconcile(channel, connection_id, payload)

        outcomes = await asyncio.gather(*(attempt(cid) for cid in candidates))

        for outcome in outcomes:
            result = outcome.result
            if result.status is DeliveryStatus.OK:
                report.delivered += 1
            elif result.status is DeliveryStatus.GONE:
                if outcome.pruned:
                    report.pruned += 1
                else:
                    report.prune_failures.append(
                        DeliveryFailure(result.connection_id, outcome.prune_error or "unknown")
                    )
            else:
                report.errors.append(
                    DeliveryFailure(result.connection_id, result.detail or "unknown")
                )

        logger.info(
            "Broadcast via %s: candidates=%d delivered=%d pruned=%d errors=%d prune_failures=%d",
            endpoint,
            report.candidates,
            report.delivered,
            report.pruned,
            len(report.errors),
            len(report.prune_failures),
        )
        return report

    async def _deliver_and_reconcile(
        self, channel: DeliveryChannel, connection_id: str, payload: bytes
    ) -> _CandidateOutcome:
        result = await self._deliver(channel, connection_id, payload)

        if result.status is DeliveryStatus.GONE:
            logger.info("Deleting gone connection: %s", connection_id)
            try:
                await self._registry.remove(connection_id)
            except StoreError as exc:
                logger.error("Failed to prune gone connection %s: %s", connection_id, exc)
                return _CandidateOutcome(result, pruned=False, prune_error=str(exc))
            except Exception as exc:
                logger.exception("Unexpected failure pruning gone connection %s", connection_id)
                return _CandidateOutcome(
                    result, pruned=False, prune_error=str(exc) or exc.__class__.__name__
                )
            return _CandidateOutcome(result, pruned=True)

        if result.status is DeliveryStatus.ERROR:
            logger.warning("Error posting message to %s: %s", connection_id, result.detail)
        return _CandidateOutcome(result)

    async def _deliver(
        self, channel: DeliveryChannel, connection_id: str, payload: bytes
    ) -> DeliveryResult:
        try:
            return await asyncio.wait_for(
                channel.send(connection_id, payload), timeout=self._delivery_timeout
            )
        except asyncio.TimeoutError:
            return DeliveryResult.error(
                connection_id, f"Delivery timed out after {self._delivery_timeout:g}s"
            )
        except Exception as exc:  # one misbehaving channel call must not sink the fan-out
            logger.exception("Unexpected delivery failure for %s", connection_id)
            return DeliveryResult.error(connection_id, str(exc) or exc.__class__.__name__)


__all__ = ["BroadcastDispatcher"]
