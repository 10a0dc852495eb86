"""CLI commands for the product catalog."""

from __future__ import annotations

import json

import click

from shop.domain.exceptions import DomainException
from shop.infrastructure.cli.context import get_container


def _parse_thumbnails(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [t.strip() for t in raw.split(",") if t.strip()]


@click.command("list")
@click.option("--limit", default=None, help="Page size (default 10).")
@click.option("--page", default=None, help="Page number (default 1).")
@click.option("--sort", default=None, help="'asc' or 'desc' by price.")
@click.option("--query", default=None, help="Category, or 'available'/'unavailable'.")
@click.pass_context
def product_list(ctx: click.Context, limit, page, sort, query) -> None:
    """List products in the catalog."""
    controller = get_container(ctx).product_controller
    raw = {"limit": limit, "page": page, "sort": sort, "query": query}
    result = controller.get_products({k: v for k, v in raw.items() if v is not None})

    if not result["payload"]:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Name':<20} {'Price':>10} {'Stock':>6}  Category")
    click.echo("-" * 84)
    for p in result["payload"]:
        click.echo(
            f"{p['id']:<34} {p['name']:<20} {p['price']:>10.2f} {p['stock']:>6}  {p['category']}"
        )
    click.echo(f"Page {result['page']} of {result['totalPages']}")


@click.command("show")
@click.argument("product_id")
@click.pass_context
def product_show(ctx: click.Context, product_id: str) -> None:
    """Show one product as JSON."""
    controller = get_container(ctx).product_controller
    try:
        product = controller.get_product(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(json.dumps(product, indent=2))


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, type=float, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--category", default="", help="Category.")
@click.option("--thumbnails", default=None, help="Comma-separated image URLs.")
@click.pass_context
def product_add(ctx: click.Context, name, price, stock, description, category,
                thumbnails) -> None:
    """Add a new product to the catalog."""
    controller = get_container(ctx).product_controller
    fields = {
        "name": name,
        "price": price,
        "stock": stock,
        "description": description,
        "category": category,
        "thumbnails": _parse_thumbnails(thumbnails) or [],
    }

    try:
        product = controller.add_product(fields)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product['id']} '{product['name']}' added at {product['price']:.2f}")


@click.command("update")
@click.argument("product_id")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, type=float, help="New price.")
@click.option("--stock", default=None, type=int, help="New stock.")
@click.option("--description", default=None, help="New description.")
@click.option("--category", default=None, help="New category.")
@click.option("--thumbnails", default=None, help="Comma-separated image URLs.")
@click.pass_context
def product_update(ctx: click.Context, product_id, name, price, stock, description,
                   category, thumbnails) -> None:
    """Update some fields of a product."""
    controller = get_container(ctx).product_controller
    patch = {
        "name": name,
        "price": price,
        "stock": stock,
        "description": description,
        "category": category,
        "thumbnails": _parse_thumbnails(thumbnails),
    }
    patch = {k: v for k, v in patch.items() if v is not None}
    if not patch:
        raise click.UsageError("Nothing to update; pass at least one field option.")

    try:
        controller.update_product(product_id, patch)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} updated ({', '.join(sorted(patch))})")


@click.command("delete")
@click.argument("product_id")
@click.pass_context
def product_delete(ctx: click.Context, product_id: str) -> None:
    """Delete a product from the catalog."""
    controller = get_container(ctx).product_controller
    try:
        controller.delete_product(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted")
