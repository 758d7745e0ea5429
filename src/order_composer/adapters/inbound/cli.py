from __future__ import annotations

import asyncio
import json
from typing import Any

from returns.result import Success

from order_composer.core.domain.model.order import Actor
from order_composer.core.ports.inbound.compose_order import (
    ComposeOrderCommand,
    ComposeOrderUseCase,
    RequestedLine,
)


def run_cli(
    usecase: ComposeOrderUseCase,
    raw: str,
    actor: Actor,
    timeout_seconds: float | None = None,
) -> int:
    """
    raw: JSON string.
    Example:
      {"account_reference":"A1","account_display_name":"Bar Pepe",
       "channel":"direct","lines":[{"inventory_reference":"SKU-1","quantity":3}]}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except (ValueError, TypeError) as e:
        print(f"invalid_input: {e}")
        return 2

    try:
        result = asyncio.run(
            asyncio.wait_for(usecase.compose_order(cmd, actor), timeout=timeout_seconds)
        )
    except asyncio.TimeoutError:
        print("[ng] CompositionCancelled: order composition timed out")
        return 1

    if isinstance(result, Success):
        receipt = result.unwrap()
        print(
            "[ok]",
            {
                "id": receipt.order_id.value,
                "account_reference": receipt.account_reference.value,
                "status": receipt.status.value,
                "total": str(receipt.total.amount),
                "currency": receipt.total.currency,
            },
        )
        return 0

    err = result.failure()
    print("[ng]", f"{err.kind}: {err}")
    return 1


def _parse_command(payload: Any) -> ComposeOrderCommand:
    # values are passed through untouched; validation rejects wrong types
    if not isinstance(payload, dict):
        raise TypeError("request must be a JSON object")
    raw_lines = payload.get("lines", [])
    if not isinstance(raw_lines, list):
        raise TypeError("lines must be a JSON array")
    if not all(isinstance(x, dict) for x in raw_lines):
        raise TypeError("each line must be a JSON object")

    lines = [
        RequestedLine(
            inventory_reference=x.get("inventory_reference"),
            quantity=x.get("quantity"),
            unit_price_override=x.get("unit_price_override"),
        )
        for x in raw_lines
    ]
    return ComposeOrderCommand(
        account_reference=payload.get("account_reference"),
        account_display_name=payload.get("account_display_name"),
        channel=payload.get("channel"),
        distributor_reference=payload.get("distributor_reference"),
        currency=payload.get("currency"),
        notes=payload.get("notes"),
        lines=lines,
    )
