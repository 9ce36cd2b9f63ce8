"""
Product Service - catalog queries and admin CRUD
"""
from sqlalchemy.orm import Session
from typing import Optional, List

from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductUpdate

ALL_CATEGORIES = "All"


class ProductService:
    """Product business logic"""

    @staticmethod
    def list_active_products(
        db: Session,
        search: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[Product]:
        """Active products, newest first, filtered by name and category"""
        query = db.query(Product).filter(Product.is_active == True)  # noqa: E712

        if search and search.strip():
            query = query.filter(Product.name.ilike(f"%{search.strip()}%"))

        if category and category != ALL_CATEGORIES:
            query = query.filter(Product.category == category)

        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def list_categories(db: Session) -> List[str]:
        """'All' followed by the distinct categories of active products"""
        rows = (
            db.query(Product.category)
            .filter(Product.is_active == True)  # noqa: E712
            .distinct()
            .all()
        )
        categories = sorted({row[0] for row in rows if row[0]})
        return [ALL_CATEGORIES] + categories

    @staticmethod
    def get_product(db: Session, product_id: int) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id).first()

    @staticmethod
    def get_products_by_ids(db: Session, product_ids: List[int]) -> dict:
        if not product_ids:
            return {}
        products = db.query(Product).filter(Product.id.in_(product_ids)).all()
        return {product.id: product for product in products}

    @staticmethod
    def create_product(db: Session, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product: Product, data: ProductUpdate) -> Product:
        changes = data.model_dump(exclude_unset=True)
        if "discount_price" in changes and not changes["discount_price"]:
            changes["discount_price"] = None
        for field, value in changes.items():
            setattr(product, field, value)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, product: Product) -> None:
        db.delete(product)
        db.commit()
