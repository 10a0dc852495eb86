from __future__ import annotations

from fastapi import Request

from shop.application.cart_controller import CartController
from shop.application.product_controller import ProductController
from shop.infrastructure.bootstrap import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_product_controller(request: Request) -> ProductController:
    """
    Dependency-injected product controller.

    Tests swap the whole container through ``create_app(container=...)``
    rather than overriding this dependency.
    """
    return get_container(request).product_controller


def get_cart_controller(request: Request) -> CartController:
    return get_container(request).cart_controller
