"""
Home page templates.

The shell carries everything renderable from critical data plus a fallback
slot; the patch fills that slot once the deferred data settles.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from jinja2 import DictLoader, Environment

from ..domain.models import Money

SLOT_RECOMMENDED_PRODUCTS = "deferred-recommended-products"
PLACEHOLDER_CARDS = 4

PRODUCT_ITEM = """\
<div class="product-card" data-product-id="{{ product.id }}">
  {%- if product.featured_image %}
  <img src="{{ product.featured_image.url }}" alt="{{ product.featured_image.alt_text or product.title }}" loading="lazy">
  {%- else %}
  <div class="product-card-image-placeholder"></div>
  {%- endif %}
  <h4>{{ product.title }}</h4>
  {%- if product.min_price %}
  <small>{{ product.min_price | money }}</small>
  {%- endif %}
</div>
"""

SHELL = """\
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Home</title></head>
<body>
<div class="home">
{%- if collection %}
<section class="featured-collection" data-collection-id="{{ collection.id }}">
  {%- if collection.image %}
  <img src="{{ collection.image.url }}" alt="{{ collection.image.alt_text or collection.title }}">
  {%- endif %}
  <h2>{{ collection.title }}</h2>
</section>
{%- endif %}
<section class="recommended-products">
  <h2>Recommended Products</h2>
  <div id="{{ slot_id }}" data-deferred="pending">
    <div class="product-grid">
    {%- for _ in range(placeholders) %}
      <div class="product-card skeleton"></div>
    {%- endfor %}
    </div>
  </div>
</section>
</div>
"""

PATCH = """\
<template data-deferred-for="{{ slot_id }}" data-state="{{ state }}">
<div class="product-grid">
{%- for product in products %}
{% include "product_item.html" %}
{%- endfor %}
</div>
</template>
<script>(function(){var t=document.querySelector('template[data-deferred-for="{{ slot_id }}"]');var s=document.getElementById("{{ slot_id }}");if(t&&s){s.replaceChildren(t.content.cloneNode(true));s.dataset.deferred="{{ state }}";t.remove();}})();</script>
</body>
</html>
"""


def format_money(money: Money) -> str:
    try:
        amount = f"{Decimal(money.amount):,.2f}"
    except (InvalidOperation, ValueError):
        amount = money.amount
    return f"{amount} {money.currency_code}".strip()


def build_environment() -> Environment:
    env = Environment(
        loader=DictLoader({"shell.html": SHELL, "patch.html": PATCH, "product_item.html": PRODUCT_ITEM}),
        autoescape=True,
    )
    env.filters["money"] = format_money
    return env
