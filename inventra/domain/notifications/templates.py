# inventra/domain/notifications/templates.py
from html import escape
from typing import Iterable

_CARD_OPEN = (
    '<div style="font-family: Arial, sans-serif; background:#f6f3ee; padding:24px;">'
    '<div style="max-width:560px; margin:0 auto; background:#ffffff; border:1px solid #e7e1d8; '
    'border-radius:12px; padding:20px;">'
)
_CARD_CLOSE = "</div></div>"

_BADGE_COLORS = {
    "approved": ("#16a34a", "#dcfce7"),
    "rejected": ("#dc2626", "#fee2e2"),
}


def _logo(org_name: str, org_logo_url: str) -> str:
    if not org_logo_url:
        return ""
    return (
        f'<img src="{escape(org_logo_url)}" alt="{escape(org_name)}" '
        'style="width:40px; height:40px; border-radius:8px; object-fit:cover; border:1px solid #e7e1d8;" />'
    )


def build_approval_email(org_name: str, org_logo_url: str, title: str, reference: str, status: str) -> str:
    color, background = _BADGE_COLORS.get(status, _BADGE_COLORS["rejected"])
    return (
        f"{_CARD_OPEN}"
        f'<div style="display:flex; align-items:center; gap:12px;">{_logo(org_name, org_logo_url)}'
        f'<div><div style="font-size:14px; color:#6b6b6b;">{escape(org_name)}</div>'
        f'<div style="font-size:18px; font-weight:700; color:#0f172a;">{escape(title)}</div></div></div>'
        f'<div style="margin-top:16px; font-size:14px; color:#0f172a;">'
        f"<div><strong>Reference:</strong> {escape(reference)}</div>"
        f'<div style="margin-top:10px; display:inline-block; padding:6px 10px; border-radius:999px; '
        f'font-weight:600; background:{background}; color:{color};">{escape(status.upper())}</div></div>'
        f'<div style="margin-top:18px; font-size:12px; color:#6b6b6b;">'
        f"This is an automated notification from BAC-Inventra.</div>"
        f"{_CARD_CLOSE}"
    )


def build_low_stock_email(org_name: str, org_logo_url: str, items: Iterable) -> str:
    """``items`` are objects with sku, name, quantity and low_stock_threshold."""
    cell = 'style="text-align:left; border-bottom:1px solid #e7e1d8; padding:6px;"'
    rows = "".join(
        f"<tr><td>{escape(item.sku)}</td><td>{escape(item.name)}</td>"
        f"<td>{item.quantity}</td><td>{item.low_stock_threshold}</td></tr>"
        for item in items
    )
    return (
        f"{_CARD_OPEN}{_logo(org_name, org_logo_url)}"
        f'<h2 style="margin:12px 0 4px 0;">Low Stock Alert</h2>'
        f'<p style="color:#6b6b6b;">{escape(org_name)}</p>'
        f'<table style="width:100%; border-collapse:collapse; margin-top:12px;">'
        f"<thead><tr><th {cell}>SKU</th><th {cell}>Product</th><th {cell}>On Hand</th><th {cell}>Threshold</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        f"{_CARD_CLOSE}"
    )
