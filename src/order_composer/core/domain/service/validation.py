from __future__ import annotations

from decimal import Decimal, InvalidOperation

from returns.result import Failure, Result, Success

from order_composer.core.domain.model.errors import OrderError, ValidationError
from order_composer.core.domain.model.order import Actor, Channel
from order_composer.core.domain.service.pricing import ComposerConfig
from order_composer.core.ports.inbound.compose_order import ComposeOrderCommand

# Keeps unit price x quantity, quantized to cents, within the default
# 28-digit decimal context.
MAX_QUANTITY = Decimal("1e9")
MAX_UNIT_PRICE = Decimal("1e12")


def _as_decimal(value: object) -> Decimal | None:
    if isinstance(value, bool):
        return None
    try:
        dec = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return dec if dec.is_finite() else None


def _is_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_actor(actor: Actor) -> Result[Actor, OrderError]:
    if not _is_text(actor.user_id):
        return Failure(ValidationError("caller identity is required", field="actor"))
    return Success(actor)


def validate_account(cmd: ComposeOrderCommand) -> Result[ComposeOrderCommand, OrderError]:
    if not _is_text(cmd.account_reference):
        return Failure(
            ValidationError("account reference is required", field="account_reference")
        )
    if not isinstance(cmd.account_display_name, str):
        return Failure(
            ValidationError(
                "account display name is required", field="account_display_name"
            )
        )
    if cmd.notes is not None and not isinstance(cmd.notes, str):
        return Failure(ValidationError("notes must be text", field="notes"))
    return Success(cmd)


def validate_channel(cmd: ComposeOrderCommand) -> Result[ComposeOrderCommand, OrderError]:
    try:
        channel = Channel(cmd.channel)
    except ValueError:
        return Failure(
            ValidationError("channel must be 'direct' or 'distributor'", field="channel")
        )

    if cmd.distributor_reference is not None and not isinstance(
        cmd.distributor_reference, str
    ):
        return Failure(
            ValidationError(
                "distributor reference must be text", field="distributor_reference"
            )
        )
    has_distributor = _is_text(cmd.distributor_reference)
    if channel is Channel.DISTRIBUTOR and not has_distributor:
        return Failure(
            ValidationError(
                "distributor reference is required for distributor orders",
                field="distributor_reference",
            )
        )
    if channel is Channel.DIRECT and has_distributor:
        return Failure(
            ValidationError(
                "distributor reference must be empty for direct orders",
                field="distributor_reference",
            )
        )
    return Success(cmd)


def validate_lines(cmd: ComposeOrderCommand) -> Result[ComposeOrderCommand, OrderError]:
    if not cmd.lines:
        return Failure(
            ValidationError("at least one line item is required", field="lines")
        )
    for i, ln in enumerate(cmd.lines):
        if not _is_text(ln.inventory_reference):
            return Failure(
                ValidationError(
                    "inventory reference is required",
                    field=f"lines[{i}].inventory_reference",
                )
            )
        quantity = _as_decimal(ln.quantity)
        if quantity is None or quantity <= 0:
            return Failure(
                ValidationError("quantity must be > 0", field=f"lines[{i}].quantity")
            )
        if quantity > MAX_QUANTITY:
            return Failure(
                ValidationError(
                    f"quantity must be <= {MAX_QUANTITY:f}", field=f"lines[{i}].quantity"
                )
            )
        if ln.unit_price_override is not None:
            override = _as_decimal(ln.unit_price_override)
            if override is None or override < 0:
                return Failure(
                    ValidationError(
                        "unit price override must be >= 0",
                        field=f"lines[{i}].unit_price_override",
                    )
                )
            if override > MAX_UNIT_PRICE:
                return Failure(
                    ValidationError(
                        f"unit price override must be <= {MAX_UNIT_PRICE:f}",
                        field=f"lines[{i}].unit_price_override",
                    )
                )
    return Success(cmd)


def validate_currency(
    cmd: ComposeOrderCommand, config: ComposerConfig
) -> Result[ComposeOrderCommand, OrderError]:
    if cmd.currency is None:
        return Success(cmd)
    if not isinstance(cmd.currency, str) or cmd.currency not in config.supported_currencies:
        supported = ", ".join(sorted(config.supported_currencies))
        return Failure(
            ValidationError(f"currency must be one of: {supported}", field="currency")
        )
    return Success(cmd)


def validate_command(
    cmd: ComposeOrderCommand, config: ComposerConfig
) -> Result[ComposeOrderCommand, OrderError]:
    return (
        Success(cmd)
        .bind(validate_account)
        .bind(validate_channel)
        .bind(lambda c: validate_currency(c, config))
        .bind(validate_lines)
    )
