from typing import Tuple


def normalize_paging(page: int, page_size: int, max_page_size: int = 100, default_page_size: int = 10) -> Tuple[int, int]:
    p = page if page and page > 0 else 1
    ps = page_size if page_size and page_size > 0 else default_page_size
    ps = min(ps, max_page_size)
    return p, ps


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": (total + limit - 1) // limit if total > 0 else 0,
    }
