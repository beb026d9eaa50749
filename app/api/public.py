"""
app/api/public.py

Purpose: Published pages, no authentication

- GET /shop/{slug}: shop data as JSON for the front end
- GET /s/{slug}: minimal server-rendered HTML page of the same data
"""

from html import escape
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from app.core.logging import get_logger
from app.schemas.site import PublicShop
from app.services import site_service

logger = get_logger(__name__)
router = APIRouter()

PAGE_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #f9fafb;
            color: #111827;
            padding: 24px 16px;
        }
        .container { max-width: 720px; margin: 0 auto; }
        .hero { background: white; border-radius: 16px; padding: 24px; margin-bottom: 16px;
                box-shadow: 0 1px 3px rgba(0,0,0,0.08); }
        .hero img { width: 100%; border-radius: 12px; margin-bottom: 16px; }
        h1 { font-size: 26px; margin-bottom: 6px; }
        .tagline { color: #6b7280; margin-bottom: 12px; }
        .meta { color: #374151; font-size: 14px; line-height: 1.7; }
        .items { display: grid; gap: 12px; }
        .item { background: white; border-radius: 12px; padding: 16px;
                display: flex; justify-content: space-between; gap: 12px;
                box-shadow: 0 1px 2px rgba(0,0,0,0.06); }
        .item p { color: #6b7280; font-size: 14px; margin-top: 4px; }
        .price { font-weight: 600; white-space: nowrap; }
        .offline { text-align: center; margin-top: 15vh; }
        .offline p { color: #6b7280; margin-top: 8px; }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>{PAGE_STYLE}</style>
</head>
<body>
    <div class="container">
{body}
    </div>
</body>
</html>"""


def _format_price(price: Any) -> str:
    try:
        value = float(price or 0)
    except (TypeError, ValueError):
        return ""
    return f"&#8377;{value:,.0f}" if value.is_integer() else f"&#8377;{value:,.2f}"


def render_shop_page(shop: Dict[str, Any]) -> str:
    """
    HTML for a published shop, or the "unavailable" page when it is offline.
    """
    name = shop.get("name") or ""

    if not shop.get("is_live", True):
        body = f"""        <div class="offline">
            <h1>Shop Currently Unavailable</h1>
            <p>{escape(name)} is currently offline. Please check back later.</p>
        </div>"""
        return _page(name, body)

    hero = []
    if shop.get("image_url"):
        hero.append(f'<img src="{escape(shop["image_url"])}" alt="{escape(name)}">')
    hero.append(f"<h1>{escape(name)}</h1>")
    if shop.get("tagline"):
        hero.append(f'<div class="tagline">{escape(shop["tagline"])}</div>')

    contact = shop.get("contact") or {}
    meta = [escape(shop.get("description") or "")]
    if shop.get("timings"):
        meta.append(f"Timings: {escape(shop['timings'])}")
    if contact.get("phone"):
        meta.append(f"Phone: {escape(contact['phone'])}")
    if contact.get("whatsapp"):
        meta.append(f"WhatsApp: {escape(contact['whatsapp'])}")
    if contact.get("email"):
        meta.append(f"Email: {escape(contact['email'])}")
    hero.append(f'<div class="meta">{"<br>".join(meta)}</div>')

    items = []
    for product in shop.get("products") or []:
        description = product.get("description")
        items.append(
            '<div class="item"><div>'
            f"<strong>{escape(product.get('name') or '')}</strong>"
            + (f"<p>{escape(description)}</p>" if description else "")
            + f'</div><div class="price">{_format_price(product.get("price"))}</div></div>'
        )

    body = f'        <div class="hero">{"".join(hero)}</div>\n'
    if items:
        body += f'        <div class="items">{"".join(items)}</div>'
    return _page(name, body)


@router.get("/shop/{slug}", response_model=PublicShop)
async def get_shop(slug: str):
    return await site_service.get_public_shop(slug)


@router.get("/s/{slug}", response_class=HTMLResponse)
async def shop_page(slug: str):
    """
    Server-rendered page for a published site.
    Returns 404 JSON for unknown slugs like the JSON endpoint.
    """
    shop = await site_service.get_public_shop(slug)
    logger.debug(f"Rendering page for {slug}")
    return HTMLResponse(content=render_shop_page(shop))
