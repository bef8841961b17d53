from math import ceil


def page_offset(page: int, per_page: int) -> int:
    return (page - 1) * per_page


def paginate_response(total: int, page: int, per_page: int, items: list) -> dict:
    """Envelope shared by every paginated list endpoint."""
    return {
        "total_items": total,
        "total_pages": ceil(total / per_page) if per_page else 0,
        "current_page": page,
        "per_page": per_page,
        "items": items,
    }
