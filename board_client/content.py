from __future__ import annotations

from bs4 import BeautifulSoup


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def html_to_text(html: str) -> str:
    """
    Visible text of a post body.

    Bodies are stored as editor HTML (inline images embedded as data: URIs),
    so a body made of images only has no text.
    """
    text_all = _soup(html).get_text("\n", strip=True)
    lines = [ln.strip() for ln in text_all.splitlines() if ln.strip()]
    return "\n".join(lines)


def count_inline_images(html: str) -> int:
    return len(_soup(html).find_all("img", src=True))


def preview(html: str, limit: int = 120) -> str:
    text = html_to_text(html).replace("\n", " ")
    return (text[:limit] + "…") if len(text) > limit else text
