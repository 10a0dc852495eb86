import click

from shop.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_create,
    cart_set_quantity,
    cart_show,
)
from shop.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
)
from shop.infrastructure.config import get_settings
from shop.infrastructure.logging_setup import configure_logging


@click.group()
def cli() -> None:
    """Shop: product catalog and cart backend"""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def cart() -> None:
    """Manage carts."""


@cli.command("serve")
@click.option("--host", default=None, help="Bind host (default from SHOP_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (default from SHOP_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        "shop.infrastructure.http.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
    )


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_create)
cart.add_command(cart_set_quantity)
cart.add_command(cart_show)
