"""
Admin product management API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import require_admin
from storefront.models.product import Product
from storefront.models.user import Profile
from storefront.schemas.product import ProductCreate, ProductUpdate, AdminProductResponse
from storefront.services.product_service import ProductService

router = APIRouter()


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = ProductService.get_product(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return product


@router.get("/admin/products", response_model=dict)
async def list_all_products(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Every product, inactive included"""
    products = db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
    return {
        "ok": True,
        "data": [AdminProductResponse.model_validate(product).model_dump() for product in products]
    }


@router.post("/admin/products", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    product = ProductService.create_product(db, product_data)
    return {
        "ok": True,
        "message": "Product created",
        "data": AdminProductResponse.model_validate(product).model_dump()
    }


@router.put("/admin/products/{product_id}", response_model=dict)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Change the fields sent, a discount_price of 0 removes the discount"""
    product = _get_product_or_404(db, product_id)
    product = ProductService.update_product(db, product, product_data)
    return {
        "ok": True,
        "message": "Product updated",
        "data": AdminProductResponse.model_validate(product).model_dump()
    }


@router.delete("/admin/products/{product_id}", response_model=dict)
async def delete_product(
    product_id: int,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    product = _get_product_or_404(db, product_id)
    ProductService.delete_product(db, product)
    return {
        "ok": True,
        "message": "Product deleted"
    }
