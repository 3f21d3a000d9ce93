DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


def clamp_page_size(size: int | None, maximum: int = MAX_PAGE_SIZE) -> int:
    """Keep a requested page size between 1 and ``maximum``."""
    if size is None:
        return DEFAULT_PAGE_SIZE
    return max(1, min(size, maximum))


def page_offset(page: int, page_size: int) -> int:
    return (max(page, 1) - 1) * page_size
