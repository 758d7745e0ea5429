from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Tuple

from returns.result import Failure, Result, Success

from order_composer.core.domain.model.errors import OrderError, ValidationError
from order_composer.core.domain.model.order import (
    AccountRef,
    Actor,
    Channel,
    InventoryRef,
    Order,
    ResolvedLine,
    now_utc,
    status_for,
)
from order_composer.core.domain.service.pricing import (
    ComposerConfig,
    compute_totals,
    resolve_line,
)
from order_composer.core.domain.service.validation import (
    validate_actor,
    validate_command,
)
from order_composer.core.ports.inbound.compose_order import (
    ComposeOrderCommand,
    ComposeOrderUseCase,
    OrderReceipt,
)
from order_composer.core.ports.outbound.catalog import CatalogGateway
from order_composer.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComposeOrderDeps:
    catalog: CatalogGateway
    orders: OrderRepository
    config: ComposerConfig = field(default_factory=ComposerConfig)
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class ComposeOrderService(ComposeOrderUseCase):
    """Turns a validated order request into a persisted order.

    Catalog lookups are the only reads and happen before any monetary
    computation; the single write happens after the order is complete.
    """

    deps: ComposeOrderDeps

    async def compose_order(
        self, command: ComposeOrderCommand, actor: Actor
    ) -> Result[OrderReceipt, OrderError]:
        validated = validate_actor(actor).bind(
            lambda _: validate_command(command, self.deps.config)
        )
        if isinstance(validated, Failure):
            return validated
        cmd = validated.unwrap()
        currency = cmd.currency or self.deps.config.default_currency

        logger.debug(
            "composing order account=%s channel=%s lines=%d",
            cmd.account_reference,
            cmd.channel,
            len(cmd.lines),
        )

        resolved = await self._resolve_lines(cmd, currency)
        if isinstance(resolved, Failure):
            logger.warning(
                "order for account=%s not composed: %s",
                cmd.account_reference,
                resolved.failure(),
            )
            return resolved

        order = _build_order(
            cmd, actor, resolved.unwrap(), currency, self.deps.config, self.deps.clock()
        )

        created = await self.deps.orders.create(order)
        if isinstance(created, Failure):
            logger.warning(
                "order for account=%s not persisted: %s",
                cmd.account_reference,
                created.failure(),
            )
            return created

        order_id = created.unwrap()
        logger.info(
            "order created id=%s account=%s status=%s total=%s %s",
            order_id.value,
            order.account_reference.value,
            order.status.value,
            order.total.amount,
            order.currency,
        )
        return Success(
            OrderReceipt(
                order_id=order_id,
                account_reference=order.account_reference,
                status=order.status,
                total=order.total,
            )
        )

    async def _resolve_lines(
        self, cmd: ComposeOrderCommand, currency: str
    ) -> Result[Tuple[ResolvedLine, ...], OrderError]:
        tasks = [
            asyncio.ensure_future(
                self.deps.catalog.get_entry(InventoryRef(ln.inventory_reference))
            )
            for ln in cmd.lines
        ]
        try:
            # gather returns results in argument order, whatever order they settle in
            lookups = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        resolved = []
        for i, (line, lookup) in enumerate(zip(cmd.lines, lookups)):
            if isinstance(lookup, Failure):
                return lookup
            try:
                resolved.append(resolve_line(line, lookup.unwrap(), currency))
            except ArithmeticError:
                return Failure(
                    ValidationError(
                        "line total cannot be represented",
                        field=f"lines[{i}].quantity",
                    )
                )
        return Success(tuple(resolved))


def _build_order(
    cmd: ComposeOrderCommand,
    actor: Actor,
    lines: Tuple[ResolvedLine, ...],
    currency: str,
    config: ComposerConfig,
    now: datetime,
) -> Order:
    channel = Channel(cmd.channel)
    totals = compute_totals(lines, currency, config.tax_policy)
    return Order(
        account_reference=AccountRef(cmd.account_reference),
        account_display_name=cmd.account_display_name,
        channel=channel,
        distributor_reference=(
            cmd.distributor_reference if channel is Channel.DISTRIBUTOR else None
        ),
        currency=currency,
        lines=lines,
        subtotal=totals.subtotal,
        taxes=totals.taxes,
        total=totals.total,
        status=status_for(channel),
        notes=cmd.notes,
        responsible_id=actor.user_id,
        created_at=now,
        updated_at=now,
    )
