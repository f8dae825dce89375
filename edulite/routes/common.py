from fastapi import Query

from ..resources import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class PageParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
        search: str = Query("", max_length=255),
    ):
        self.page = page
        self.page_size = page_size
        self.search = search.strip()
