"""Outcomes of a single logical API call.

A call either yields a parsed JSON payload or the skip sentinel. Failures
are raised as ``ApiClientError`` subclasses instead of being returned.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import ApiResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_model(model: type[ModelT], data: Any, url: str = "") -> ModelT:
    """Validate one payload against a schema at the API boundary.

    Raises:
        ApiResponseError: If the payload does not match the schema
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ApiResponseError(
            f"Unexpected {model.__name__} payload from {url}: {e.error_count()} error(s)",
            url=url,
        ) from e


def validate_items(model: type[ModelT], items: Iterable[Any], url: str = "") -> list[ModelT]:
    """Validate every item of a list payload."""
    return [validate_model(model, item, url) for item in items]


@dataclass(frozen=True)
class JsonPayload:
    """Successful 2xx response with its parsed body."""

    data: Any
    """Parsed JSON body (None for an empty body)."""

    status: int = 200
    """HTTP status code."""

    link: str | None = None
    """Raw ``Link`` header, used for page-count shortcuts."""

    url: str = ""
    """URL that produced this payload."""

    kind: Literal["json"] = field(default="json", init=False)

    @property
    def skipped(self) -> bool:
        return False

    def as_list(self, items_key: str | None = None) -> list[Any]:
        """Return the payload as a list of items.

        Args:
            items_key: Envelope key holding the list (e.g. ``"items"`` for
                search endpoints). A missing key counts as an empty page.

        Raises:
            ApiResponseError: If the payload is not a list where one is expected
        """
        data = self.data
        if data is None:
            return []
        if items_key is not None:
            if not isinstance(data, dict):
                raise ApiResponseError(
                    f"Expected an object with '{items_key}' from {self.url}", url=self.url
                )
            data = data.get(items_key) or []
        if not isinstance(data, list):
            raise ApiResponseError(f"Expected a JSON array from {self.url}", url=self.url)
        return data

    def as_dict(self) -> dict[str, Any]:
        """Return the payload as a JSON object.

        Raises:
            ApiResponseError: If the payload is not an object
        """
        if not isinstance(self.data, dict):
            raise ApiResponseError(f"Expected a JSON object from {self.url}", url=self.url)
        return self.data

    def parse(self, model: type[ModelT]) -> ModelT:
        """Validate the body as a single ``model``."""
        return validate_model(model, self.data, self.url)

    def parse_items(self, model: type[ModelT], items_key: str | None = None) -> list[ModelT]:
        """Validate the body as a list of ``model``."""
        return validate_items(model, self.as_list(items_key), self.url)


@dataclass(frozen=True)
class SkipOutcome:
    """HTTP 409: the resource legitimately has no data (empty repository,
    unborn branch). Never an error."""

    status: int = 409
    url: str = ""

    kind: Literal["skip"] = field(default="skip", init=False)

    @property
    def skipped(self) -> bool:
        return True


FetchOutcome = JsonPayload | SkipOutcome
