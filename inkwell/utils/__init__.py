from inkwell.utils.helpers import (
    blog_url,
    format_lastmod,
    host,
    is_local_host,
    normalize_email,
    page_count,
    paginate,
    today_str,
)

__all__ = [
    "blog_url",
    "format_lastmod",
    "host",
    "is_local_host",
    "normalize_email",
    "page_count",
    "paginate",
    "today_str",
]
