import logging
from typing import Any, Callable, Generic, Iterator

from ..clients.base_client import parse_json_response
from .models import PaginatedResponse, T
from .serializers import parse_paginated_response

logger = logging.getLogger(__name__)

GetJson = Callable[[str, dict[str, str] | None], Any]


class PaginatedQuery(Generic[T]):
    """
    Lazy sequence of results of a paginated endpoint. Every iteration starts again from the
    first page and then follows the ``next`` links provided by the service until there are
    no more. Any error aborts the iteration, results already yielded remain valid
    """

    def __init__(
        self,
        get_json: GetJson,
        url: str,
        parse_result: Callable[[dict[str, Any]], T],
        params: dict[str, str] | None = None,
    ):
        """
        :param get_json: Function doing a `GET` request and returning decoded json
        :param url: Url of the first page
        :param parse_result: Function to parse every result
        :param params: Query params for the first page, ``next`` links already include them
        """
        self.get_json = get_json
        self.url = url
        self.parse_result = parse_result
        self.params = params

    def __iter__(self) -> Iterator[T]:
        for page in self.iter_pages():
            yield from page.results

    def _get_page(self, url: str, params: dict[str, str] | None) -> PaginatedResponse[T]:
        return parse_json_response(
            lambda data: parse_paginated_response(data, self.parse_result),
            self.get_json(url, params),
            url,
        )

    def first_page(self) -> PaginatedResponse[T]:
        return self._get_page(self.url, self.params)

    def iter_pages(self) -> Iterator[PaginatedResponse[T]]:
        page = self.first_page()
        yield page
        while page.next:
            logger.debug("Following next page %s", page.next)
            # `next` is owned by the service, it must be used as it is
            page = self._get_page(page.next, None)
            yield page

    def all(self) -> list[T]:
        return list(self)
