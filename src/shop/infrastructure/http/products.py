from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from shop.application.product_controller import ProductController
from shop.infrastructure.http.dependencies import get_product_controller

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", summary="List products (filtered, sorted, paginated)")
def list_products(
    *,
    controller: ProductController = Depends(get_product_controller),
    limit: Optional[str] = Query(None, description="Page size (default 10)."),
    page: Optional[str] = Query(None, description="Page number (default 1)."),
    sort: Optional[str] = Query(None, description="'asc' or 'desc' by price."),
    query: Optional[str] = Query(
        None, description="A category, or 'available' / 'unavailable'."
    ),
) -> Dict[str, Any]:
    raw = {"limit": limit, "page": page, "sort": sort, "query": query}
    return controller.get_products({k: v for k, v in raw.items() if v is not None})


@router.get("/{pid}", summary="Get a product by id")
def get_product(
    pid: str, controller: ProductController = Depends(get_product_controller)
) -> Dict[str, Any]:
    return controller.get_product(pid)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a product")
def add_product(
    body: Any = Body(None),
    controller: ProductController = Depends(get_product_controller),
) -> Dict[str, Any]:
    product = controller.add_product(body)
    return {"message": "Product created", "payload": product}


@router.put("/{pid}", summary="Update a product (partial or full)")
def update_product(
    pid: str,
    body: Any = Body(None),
    controller: ProductController = Depends(get_product_controller),
) -> Dict[str, Any]:
    product = controller.update_product(pid, body)
    return {"message": "Product updated", "payload": product}


@router.delete(
    "/{pid}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a product"
)
def delete_product(
    pid: str, controller: ProductController = Depends(get_product_controller)
) -> Response:
    controller.delete_product(pid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
