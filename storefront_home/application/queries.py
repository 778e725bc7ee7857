from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..domain.errors import ContractError
from ..domain.models import (
    DeferredResult,
    FeaturedCollection,
    Image,
    Money,
    Query,
    RecommendedProduct,
)
from ..infrastructure.config import recommended_products_count

_IMAGE_FIELDS = """
      id
      url
      altText
      width
      height
"""

FEATURED_COLLECTION_DOCUMENT = f"""#graphql
  fragment FeaturedCollection on Collection {{
    id
    title
    image {{{_IMAGE_FIELDS}    }}
    handle
  }}
  query FeaturedCollection($country: CountryCode, $language: LanguageCode)
    @inContext(country: $country, language: $language) {{
    collections(first: 1, sortKey: UPDATED_AT, reverse: true) {{
      nodes {{
        ...FeaturedCollection
      }}
    }}
  }}
"""

RECOMMENDED_PRODUCTS_DOCUMENT = f"""#graphql
  fragment RecommendedProduct on Product {{
    id
    title
    handle
    priceRange {{
      minVariantPrice {{
        amount
        currencyCode
      }}
    }}
    featuredImage {{{_IMAGE_FIELDS}    }}
  }}
  query RecommendedProducts($country: CountryCode, $language: LanguageCode, $first: Int)
    @inContext(country: $country, language: $language) {{
    products(first: $first, sortKey: UPDATED_AT, reverse: true) {{
      nodes {{
        ...RecommendedProduct
      }}
    }}
  }}
"""

FEATURED_COLLECTION_QUERY = Query(name="FeaturedCollection", document=FEATURED_COLLECTION_DOCUMENT)


def recommended_products_query(first: Optional[int] = None) -> Query:
    """Build the below-the-fold products query; page size defaults to HOME_RECOMMENDED_COUNT."""
    return Query(
        name="RecommendedProducts",
        document=RECOMMENDED_PRODUCTS_DOCUMENT,
        variables={"first": int(first or recommended_products_count())},
    )


def _nodes(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    conn = data.get(key) if isinstance(data, dict) else None
    if not isinstance(conn, dict):
        raise ContractError(f"Response is missing '{key}' connection")
    nodes = conn.get("nodes") or []
    if not isinstance(nodes, list):
        raise ContractError(f"'{key}.nodes' is not a list")
    return [n for n in nodes if isinstance(n, dict)]


def _parse_image(raw: Any) -> Optional[Image]:
    if not isinstance(raw, dict) or not raw.get("url"):
        return None
    return Image(
        url=str(raw["url"]),
        alt_text=raw.get("altText"),
        width=raw.get("width"),
        height=raw.get("height"),
        id=raw.get("id"),
    )


def _parse_money(raw: Any) -> Optional[Money]:
    if not isinstance(raw, dict) or raw.get("amount") is None:
        return None
    return Money(amount=str(raw["amount"]), currency_code=str(raw.get("currencyCode", "")))


def parse_featured_collection(data: Dict[str, Any]) -> Optional[FeaturedCollection]:
    """Map the FeaturedCollection payload; None when the store has no collections."""
    nodes = _nodes(data, "collections")
    if not nodes:
        return None
    node = nodes[0]
    if not node.get("id"):
        raise ContractError("Collection node has no 'id'")
    return FeaturedCollection(
        id=str(node["id"]),
        title=str(node.get("title") or ""),
        handle=str(node.get("handle") or ""),
        image=_parse_image(node.get("image")),
    )


def parse_recommended_products(data: Dict[str, Any]) -> DeferredResult:
    products = []
    for node in _nodes(data, "products"):
        if not node.get("id"):
            raise ContractError("Product node has no 'id'")
        price_range = node.get("priceRange") or {}
        products.append(
            RecommendedProduct(
                id=str(node["id"]),
                title=str(node.get("title") or ""),
                handle=str(node.get("handle") or ""),
                min_price=_parse_money(price_range.get("minVariantPrice") if isinstance(price_range, dict) else None),
                featured_image=_parse_image(node.get("featuredImage")),
            )
        )
    return DeferredResult(products=tuple(products))
