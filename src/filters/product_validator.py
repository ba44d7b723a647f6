# src/filters/product_validator.py

"""Product validation: drop unusable live results before filtering."""

import logging

from src.models.product import Product

logger = logging.getLogger("price_compare.filters")


class ProductValidator:
    """Validate products and drop those with missing essential fields."""

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products with empty names or non-positive prices.

        Normalisers default a missing price to 0, so this is where such
        listings leave the pipeline.  Returns the valid products and the
        count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            if not product.name.strip():
                logger.debug(
                    "Dropped product with empty name "
                    "(platform=%s, id=%s)",
                    product.platform,
                    product.id,
                )
                dropped += 1
                continue
            if product.price <= 0:
                logger.debug(
                    "Dropped product with zero/negative "
                    "price (name=%s, platform=%s)",
                    product.name,
                    product.platform,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped
