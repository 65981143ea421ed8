from typing import Any
from urllib.parse import quote, urlencode


def build_link(base_url: str, template: str, **params: Any) -> str:
    """
    Expand a route template such as ``/api/v1/devices/{id}`` with the given
    path parameters and join it onto ``base_url``.
    """
    path = template.format(
        **{k: quote(str(v), safe="") for k, v in params.items()}
    )
    return base_url.rstrip("/") + path


def build_page_link(
    base_url: str, template: str, page: int, size: int, **params: Any
) -> str:
    query = urlencode({"page": page, "size": size})
    return f"{build_link(base_url, template, **params)}?{query}"
