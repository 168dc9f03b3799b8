from fastapi import HTTPException , status
from sqlalchemy.exc import IntegrityError
from storefront.common.utils import now
from storefront.products.utils import compute_out_of_stock
from storefront.schema.full_schema import Product, ProductVariant
from storefront.products.constants import logger

async def create_product_with_variants(session, payload) -> Product:
    """Catalog ingestion: product and its variants land in one transaction, flag computed before commit."""
    variants = [
        ProductVariant(
            sku_id=v.sku_id,
            label=v.label.strip(),
            inventory_count=v.inventory_count,
            available=v.available,
            position=pos,
        )
        for pos, v in enumerate(payload.variants)
    ]

    product = Product(
        product_id=payload.product_id,
        product_name=payload.product_name.strip(),
        brand=payload.brand.strip(),
        category=payload.category.strip(),
        gender=payload.gender,
        primary_colour=payload.primary_colour,
        price=payload.price,
        mrp=payload.mrp,
        discount_display_label=payload.discount_display_label,
        search_image=payload.search_image,
        additional_info=payload.additional_info,
        rating=payload.rating,
        rating_count=payload.rating_count,
        is_active=True,
        is_out_of_stock=compute_out_of_stock(variants),
        created_at=now(),
        updated_at=now(),
        variants=variants,
    )
    session.add(product)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning(
            "product.duplicate",
            extra={"product_id": payload.product_id, "sku_ids": [v.sku_id for v in payload.variants]},
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product id or SKU id already exists",
        )

    logger.info("product.create.success", extra={"product_id": product.product_id, "variants": len(variants)})
    return product
