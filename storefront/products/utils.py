from typing import Any, Dict, Iterable


def available_stock(variants: Iterable) -> int:
    return sum(v.inventory_count for v in variants if v.available)


def compute_out_of_stock(variants: Iterable) -> bool:
    return available_stock(variants) == 0


def in_stock(variants: Iterable) -> bool:
    return available_stock(variants) > 0


def is_size_available(variants: Iterable, label: str) -> bool:
    """True when the variant with this label is sellable right now."""
    for v in variants:
        if v.label == label:
            return bool(v.available and v.inventory_count > 0)
    return False


def discount_percentage(price: int, mrp: int) -> int:
    if mrp and mrp > 0:
        return round((mrp - price) / mrp * 100)
    return 0


def product_card(product) -> Dict[str, Any]:
    """Listing/wishlist projection of a product, camelCase on the wire."""
    return {
        "productId": product.product_id,
        "productName": product.product_name,
        "brand": product.brand,
        "category": product.category,
        "price": product.price,
        "mrp": product.mrp,
        "discountPercentage": discount_percentage(product.price, product.mrp),
        "discountDisplayLabel": product.discount_display_label,
        "searchImage": product.search_image,
        "additionalInfo": product.additional_info,
        "rating": product.rating,
        "ratingCount": product.rating_count,
        "isOutOfStock": product.is_out_of_stock,
    }


def variant_out(variant) -> Dict[str, Any]:
    return {
        "skuId": variant.sku_id,
        "label": variant.label,
        "inventory": variant.inventory_count,
        "available": variant.available,
    }


def product_details(product) -> Dict[str, Any]:
    """Card plus variants; product.variants must already be loaded."""
    variants = list(product.variants)
    details = product_card(product)
    details.update({
        "gender": product.gender,
        "primaryColour": product.primary_colour,
        "isActive": product.is_active,
        "totalStock": available_stock(variants),
        "inStock": in_stock(variants),
        "availableSizes": [v.label for v in variants if is_size_available(variants, v.label)],
        "inventoryInfo": [variant_out(v) for v in variants],
    })
    return details
