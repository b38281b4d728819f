from typing import Dict, Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Product

class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def get_products_by_ids(db: AsyncSession, product_ids: Iterable[str]) -> Dict[str, Product]:
        """Returns the products that still exist, keyed by id. Unknown ids are simply absent."""
        ids = {pid for pid in product_ids if pid}
        if not ids:
            return {}
        result = await db.execute(select(Product).where(Product.id.in_(ids)))
        return {product.id: product for product in result.scalars().all()}
