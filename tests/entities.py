"""Entity types shared by the test modules."""

from typing import Annotated, Any

from pydantic import Field

from skima import (
    ConditionalPresence,
    DateFormat,
    Email,
    Entity,
    MinLength,
    MinValue,
    Presence,
    SameAs,
    TimeFormat,
)


class Customer(Entity):
    name: Annotated[str, Presence(), MinLength(2)] = "Jane"
    email: Annotated[str | None, Email()] = None


class OrderItem(Entity):
    item_id: int | None = None
    sku: Annotated[str, Presence()] = "SKU-1"
    quantity: Annotated[int, MinValue(0)] = 1
    start_date: Annotated[str | None, DateFormat()] = None
    end_date: Annotated[str | None, DateFormat()] = None


class Order(Entity):
    order_number: Annotated[str, Presence()] = ""
    customer_email: Annotated[str | None, Email()] = None
    order_items: list[OrderItem] = Field(default_factory=list)
    customer: Customer | None = None
    status: str = "pending"
    completion_date: Annotated[str | None, ConditionalPresence("status", "completed"), DateFormat()] = None


class CamelOrderItem(Entity):
    identifier_field = "id"

    id: int | None = None
    quantity: Annotated[int, MinValue(0)] = 0


class CamelOrder(Entity):
    order_number: Annotated[str, Presence()] = Field("", alias="orderNumber")
    customer_email: Annotated[str | None, Email()] = Field(None, alias="customerEmail")
    order_items: list[CamelOrderItem] = Field(default_factory=list, alias="orderItems")


class Basket(Entity):
    items: Annotated[list[OrderItem], Presence()] = Field(default_factory=list)
    by_sku: dict[str, OrderItem] = Field(default_factory=dict)


class Signup(Entity):
    password: Annotated[Any, Presence()] = None
    password_confirmation: Annotated[Any, SameAs("password")] = None
    opening_time: Annotated[str | None, TimeFormat()] = None


class Node(Entity):
    label: Annotated[str, Presence()] = "node"
    parent: "Node | None" = None
    children: list["Node"] = Field(default_factory=list)


class Pair(Entity):
    left: Customer | None = None
    right: Customer | None = None
