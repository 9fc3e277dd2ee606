"""
Example: Create Order — validation and persistence as one flet.

Each value object validates itself and returns either the object or a
failure value. flet binds them in order and the body saves the order; the
first failure skips the rest, including the repository write.

    Command → flet[tenant_id, total, name, order] → save(order) → Order | failure
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID, uuid4

from flow import CAUGHT, Fail, FailureAssertions, else_if, fail_with, flet


# ═══════════════════════════════════════════════════════════════
# Domain — self-validating value objects
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class TenantId:
    value: UUID

    @staticmethod
    def create(raw: UUID | str | None) -> TenantId | Fail:
        if raw is None:
            return fail_with("TenantId is mandatory")
        # an invalid UUID raises ValueError; flet turns it into a failure value
        return TenantId(UUID(str(raw)))


@dataclass(frozen=True)
class OrderTotal:
    amount: float

    @staticmethod
    def create(amount: float | None) -> OrderTotal | Fail:
        if amount is None:
            return fail_with("Order total is mandatory")
        if amount <= 0:
            return fail_with("Order total must be positive", {"amount": amount})
        return OrderTotal(amount)


@dataclass(frozen=True)
class Order:
    tenant_id: TenantId
    order_id: UUID
    total: OrderTotal
    customer_name: str


def validate_customer_name(name: str | None) -> str | Fail:
    if not name or not name.strip():
        return fail_with("Customer name is mandatory")
    return name.strip()


# ═══════════════════════════════════════════════════════════════
# Application layer
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CreateOrderCommand:
    tenant_id: str | None
    total: float | None
    customer_name: str | None


class OrderRepository(Protocol):
    def save(self, order: Order) -> Order: ...


class InMemoryOrderRepository:
    def __init__(self) -> None:
        self.orders: dict[UUID, Order] = {}

    def save(self, order: Order) -> Order:
        self.orders[order.order_id] = order
        return order


def create_order(cmd: CreateOrderCommand, repository: OrderRepository) -> Order | Fail:
    return flet(
        [
            CAUGHT, lambda err: else_if(ValueError, lambda e: fail_with(f"Invalid input: {e.message}"), err),
            "tenant_id", lambda: TenantId.create(cmd.tenant_id),
            "total", lambda: OrderTotal.create(cmd.total),
            "name", lambda: validate_customer_name(cmd.customer_name),
            "order", lambda tenant_id, total, name: Order(tenant_id, uuid4(), total, name),
        ],
        lambda order: repository.save(order),
    )


def main() -> None:
    repository = InMemoryOrderRepository()

    order = create_order(CreateOrderCommand(str(uuid4()), 99.5, " Alice "), repository)
    FailureAssertions.assert_normal(order)
    print(f"Created order {order.order_id} for {order.customer_name}")  # noqa: T201

    for bad in (
        CreateOrderCommand(None, 10.0, "Bob"),
        CreateOrderCommand("not-a-uuid", 10.0, "Bob"),
        CreateOrderCommand(str(uuid4()), -5.0, "Bob"),
        CreateOrderCommand(str(uuid4()), 10.0, "  "),
    ):
        err = FailureAssertions.assert_failure(create_order(bad, repository))
        print(f"Rejected: {err.message}")  # noqa: T201

    assert len(repository.orders) == 1


if __name__ == "__main__":
    main()
