"""
Product catalog API endpoints (public)
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from storefront.core.database import get_db
from storefront.schemas.product import ProductResponse
from storefront.services.product_service import ProductService

router = APIRouter()


@router.get("/products", response_model=dict)
async def list_products(
    search: Optional[str] = Query(None, description="Part of the product name"),
    category: Optional[str] = Query(None, description="Category, 'All' for every category"),
    db: Session = Depends(get_db)
):
    """Active products, newest first"""
    products = ProductService.list_active_products(db, search=search, category=category)
    return {
        "ok": True,
        "data": [ProductResponse.model_validate(product).model_dump() for product in products]
    }


@router.get("/products/categories", response_model=dict)
async def list_categories(db: Session = Depends(get_db)):
    return {
        "ok": True,
        "data": ProductService.list_categories(db)
    }


@router.get("/products/{product_id}", response_model=dict)
async def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    product = ProductService.get_product(db, product_id)
    if not product or not product.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    return {
        "ok": True,
        "data": ProductResponse.model_validate(product).model_dump()
    }
