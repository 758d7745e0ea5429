from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, Literal, Sequence

from fastapi import FastAPI, Header, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from order_composer.core.domain.model.errors import (
    CompositionCancelled,
    OrderError,
    OrderNotFound,
    PersistenceError,
    UnresolvedReferenceError,
    ValidationError,
)
from order_composer.core.domain.model.order import Actor
from order_composer.core.ports.inbound.compose_order import (
    ComposeOrderCommand,
    ComposeOrderUseCase,
    RequestedLine,
)
from order_composer.core.ports.inbound.get_order import GetOrderQuery, GetOrderUseCase
from order_composer.core.ports.inbound.list_orders import (
    ListOrdersQuery,
    ListOrdersUseCase,
)

logger = logging.getLogger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class RequestedLineIn(BaseModel):
    inventory_reference: str = Field(min_length=1, examples=["SKU-1"])
    quantity: Decimal = Field(gt=0, examples=["3"])
    unit_price_override: Decimal | None = Field(default=None, ge=0, examples=["2.50"])


class ComposeOrderRequest(BaseModel):
    account_reference: str = Field(min_length=1, examples=["A1"])
    account_display_name: str = Field(examples=["Bar Pepe"])
    channel: Literal["direct", "distributor"]
    distributor_reference: str | None = Field(default=None, examples=[None])
    currency: str | None = Field(default=None, examples=["EUR"])
    lines: list[RequestedLineIn] = Field(min_length=1)
    notes: str | None = None


class OrderCreatedResponse(BaseModel):
    ok: bool = True
    id: str
    account_reference: str
    status: str
    total: str
    currency: str


class OrderLineOut(BaseModel):
    inventory_reference: str
    sku: str
    display_name: str
    unit_of_measure: str
    line_type: str
    quantity: str
    unit_price: str
    line_total: str


class OrderDetailsResponse(BaseModel):
    id: str
    account_reference: str
    account_display_name: str
    channel: str
    distributor_reference: str | None
    status: str
    currency: str
    subtotal: str
    taxes: str
    total: str
    notes: str | None
    responsible_id: str
    created_at: str
    updated_at: str
    lines: list[OrderLineOut]


class OrderSummaryOut(BaseModel):
    id: str
    account_reference: str
    account_display_name: str
    channel: str
    status: str
    total: str
    currency: str
    created_at: str


class OrderListResponse(BaseModel):
    offset: int
    limit: int
    items: list[OrderSummaryOut]


class ErrorResponse(BaseModel):
    ok: bool = False
    kind: str
    message: str
    field: str | None = None
    reference: str | None = None


# ---- Mapping helpers -------------------------------------------------------


def _to_command(req: ComposeOrderRequest) -> ComposeOrderCommand:
    return ComposeOrderCommand(
        account_reference=req.account_reference,
        account_display_name=req.account_display_name,
        channel=req.channel,
        distributor_reference=req.distributor_reference,
        currency=req.currency,
        notes=req.notes,
        lines=tuple(
            RequestedLine(
                inventory_reference=ln.inventory_reference,
                quantity=ln.quantity,
                unit_price_override=ln.unit_price_override,
            )
            for ln in req.lines
        ),
    )


def _field_path(loc: Sequence[Any]) -> str:
    path = ""
    for part in loc:
        if part in ("body", "query", "path", "header"):
            continue
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _map_error_to_http(err: OrderError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(
            kind=err.kind, message=err.message, field=err.field or None
        )

    if isinstance(err, UnresolvedReferenceError):
        return 422, ErrorResponse(
            kind=err.kind,
            message=f"inventory reference not found: {err.reference}",
            reference=err.reference,
        )

    if isinstance(err, OrderNotFound):
        return 404, ErrorResponse(kind=err.kind, message=str(err))

    if isinstance(err, CompositionCancelled):
        return 504, ErrorResponse(kind=err.kind, message=err.message)

    if isinstance(err, PersistenceError):
        return 500, ErrorResponse(kind=err.kind, message="order could not be saved")

    return 500, ErrorResponse(kind=err.kind, message="internal server error")


def create_app(
    compose_order_uc: ComposeOrderUseCase,
    get_order_uc: GetOrderUseCase,
    list_orders_uc: ListOrdersUseCase,
    compose_timeout_seconds: float | None = None,
) -> FastAPI:
    app = FastAPI(title="order_composer")

    # --- exception handlers ---------------------------------------------------

    @app.exception_handler(OrderError)
    async def handle_domain_error(_: Request, exc: OrderError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        body = ErrorResponse(
            kind=ValidationError.kind,
            message=str(first.get("msg", "invalid request")),
            field=_field_path(first.get("loc", ())) or None,
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error")
        body = ErrorResponse(kind="InternalError", message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/orders",
        response_model=OrderCreatedResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse},
            422: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            504: {"model": ErrorResponse},
        },
    )
    async def compose_order(
        req: ComposeOrderRequest,
        response: Response,
        actor_id: str = Header(alias="X-Actor-Id"),
        actor_name: str = Header("", alias="X-Actor-Name"),
    ) -> Any:
        cmd = _to_command(req)
        actor = Actor(user_id=actor_id, display_name=actor_name)

        try:
            result = await asyncio.wait_for(
                compose_order_uc.compose_order(cmd, actor),
                timeout=compose_timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise CompositionCancelled(message="order composition timed out")

        if isinstance(result, Success):
            receipt = result.unwrap()
            order_id = receipt.order_id.value
            response.headers["Location"] = f"/orders/{order_id}"
            return OrderCreatedResponse(
                id=order_id,
                account_reference=receipt.account_reference.value,
                status=receipt.status.value,
                total=str(receipt.total.amount),
                currency=receipt.total.currency,
            )

        raise result.failure()

    @app.get(
        "/orders",
        response_model=OrderListResponse,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def list_orders(
        offset: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=100),
        account_reference: str | None = Query(None, min_length=1),
        channel: str | None = Query(None),
        sort_by: str = Query("created_at"),
        sort_dir: str = Query("desc"),
    ) -> Any:
        result = await list_orders_uc.list_orders(
            ListOrdersQuery(
                offset=offset,
                limit=limit,
                account_reference=account_reference,
                channel=channel,
                sort_by=sort_by,
                sort_dir=sort_dir,
            )
        )

        if isinstance(result, Success):
            items = result.unwrap()
            return OrderListResponse(
                offset=offset,
                limit=limit,
                items=[
                    OrderSummaryOut(
                        id=v.order_id.value,
                        account_reference=v.account_reference.value,
                        account_display_name=v.account_display_name,
                        channel=v.channel.value,
                        status=v.status.value,
                        total=str(v.total.amount),
                        currency=v.total.currency,
                        created_at=v.created_at.isoformat(),
                    )
                    for v in items
                ],
            )

        raise result.failure()

    @app.get(
        "/orders/{order_id}",
        response_model=OrderDetailsResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def get_order(order_id: str) -> Any:
        result = await get_order_uc.get_order(GetOrderQuery(order_id=order_id))

        if isinstance(result, Success):
            view = result.unwrap()
            return OrderDetailsResponse(
                id=view.order_id.value,
                account_reference=view.account_reference.value,
                account_display_name=view.account_display_name,
                channel=view.channel.value,
                distributor_reference=view.distributor_reference,
                status=view.status.value,
                currency=view.total.currency,
                subtotal=str(view.subtotal.amount),
                taxes=str(view.taxes.amount),
                total=str(view.total.amount),
                notes=view.notes,
                responsible_id=view.responsible_id,
                created_at=view.created_at.isoformat(),
                updated_at=view.updated_at.isoformat(),
                lines=[
                    OrderLineOut(
                        inventory_reference=ln.inventory_reference,
                        sku=ln.sku,
                        display_name=ln.display_name,
                        unit_of_measure=ln.unit_of_measure,
                        line_type=ln.line_type,
                        quantity=str(ln.quantity),
                        unit_price=str(ln.unit_price.amount),
                        line_total=str(ln.line_total.amount),
                    )
                    for ln in view.lines
                ],
            )

        raise result.failure()

    return app
