"""CLI commands for shopping carts."""

from __future__ import annotations

from typing import Any

import click

from shop.domain.exceptions import DomainException
from shop.infrastructure.cli.context import get_container


def _parse_items(raw: str) -> list[dict[str, Any]]:
    """Parse 'p1:3,p2:5' into line-item dicts."""
    items: list[dict[str, Any]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        items.append({"product": product_id.strip(), "quantity": qty})
    return items


def _print_cart(cart: dict[str, Any]) -> None:
    click.echo(f"Cart {cart['id']}")
    if not cart["products"]:
        click.echo("  (empty)")
        return
    for item in cart["products"]:
        click.echo(f"  {item['product']:<34} x{item['quantity']}")


@click.command("create")
@click.option("--items", default=None, help="Initial items as 'ProductId:Qty,...'.")
@click.pass_context
def cart_create(ctx: click.Context, items: str | None) -> None:
    """Create a new cart."""
    controller = get_container(ctx).cart_controller
    body = {"products": _parse_items(items)} if items else None

    try:
        cart = controller.add_cart(body)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart {cart['id']} created")


@click.command("show")
@click.argument("cart_id")
@click.pass_context
def cart_show(ctx: click.Context, cart_id: str) -> None:
    """Display a cart and its line items."""
    controller = get_container(ctx).cart_controller
    try:
        cart = controller.get_cart(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_cart(cart)


@click.command("add")
@click.argument("cart_id")
@click.argument("product_id")
@click.option("--quantity", default=1, type=int, show_default=True)
@click.pass_context
def cart_add(ctx: click.Context, cart_id: str, product_id: str, quantity: int) -> None:
    """Add a product to a cart, merging with an existing line."""
    controller = get_container(ctx).cart_controller
    try:
        cart = controller.add_product_to_cart(cart_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_cart(cart)


@click.command("set-quantity")
@click.argument("cart_id")
@click.argument("product_id")
@click.argument("quantity", type=int)
@click.pass_context
def cart_set_quantity(ctx: click.Context, cart_id: str, product_id: str,
                      quantity: int) -> None:
    """Replace the quantity of a product already in a cart."""
    controller = get_container(ctx).cart_controller
    try:
        cart = controller.set_product_quantity(cart_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_cart(cart)


@click.command("clear")
@click.argument("cart_id")
@click.pass_context
def cart_clear(ctx: click.Context, cart_id: str) -> None:
    """Remove every product from a cart."""
    controller = get_container(ctx).cart_controller
    try:
        controller.remove_products_from_cart(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart {cart_id} cleared")
