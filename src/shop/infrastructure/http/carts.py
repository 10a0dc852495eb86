from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status

from shop.application.cart_controller import CartController
from shop.infrastructure.http.dependencies import get_cart_controller

router = APIRouter(prefix="/api/carts", tags=["carts"])


def _quantity(body: Any) -> Any:
    return body.get("quantity") if isinstance(body, dict) else None


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a cart")
def add_cart(
    body: Any = Body(None),
    controller: CartController = Depends(get_cart_controller),
) -> Dict[str, Any]:
    return {"message": "Cart created", "payload": controller.add_cart(body)}


@router.get("/{cid}", summary="Get a cart by id")
def get_cart(
    cid: str, controller: CartController = Depends(get_cart_controller)
) -> Dict[str, Any]:
    return controller.get_cart(cid)


@router.put("/{cid}", summary="Replace every line item of a cart")
def update_cart(
    cid: str,
    body: Any = Body(None),
    controller: CartController = Depends(get_cart_controller),
) -> Dict[str, Any]:
    return {"message": "Cart updated", "payload": controller.update_cart(cid, body)}


@router.post("/{cid}/product/{pid}", summary="Add a product to a cart")
def add_product_to_cart(
    cid: str,
    pid: str,
    body: Any = Body(None),
    controller: CartController = Depends(get_cart_controller),
) -> Dict[str, Any]:
    cart = controller.add_product_to_cart(cid, pid, _quantity(body))
    return {"message": "Product added to cart", "payload": cart}


@router.put("/{cid}/product/{pid}", summary="Set the quantity of a product in a cart")
def set_product_quantity(
    cid: str,
    pid: str,
    body: Any = Body(None),
    controller: CartController = Depends(get_cart_controller),
) -> Dict[str, Any]:
    cart = controller.set_product_quantity(cid, pid, _quantity(body))
    return {"message": "Product quantity updated", "payload": cart}


@router.delete(
    "/{cid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove every product from a cart",
)
def remove_products_from_cart(
    cid: str, controller: CartController = Depends(get_cart_controller)
) -> Response:
    controller.remove_products_from_cart(cid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
