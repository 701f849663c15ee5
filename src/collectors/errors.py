"""Error taxonomy for source collection."""

from enum import Enum
from typing import Annotated, ClassVar

from pydantic import BaseModel, ConfigDict, Field


DetailValue = str | int | bool | None


class CollectorErrorClass(str, Enum):
    """Why a source produced no items.

    - FETCH: HTTP/network errors after retries were exhausted
    - PARSE: Malformed feed markup or JSON
    - SCHEMA: Payload parsed but lacks the expected structure
    """

    FETCH = "FETCH"
    PARSE = "PARSE"
    SCHEMA = "SCHEMA"


class ErrorRecord(BaseModel):
    """Serializable failure of one source, kept in results and logs."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: CollectorErrorClass
    message: Annotated[str, Field(min_length=1)]
    source_id: str | None = None
    details: dict[str, DetailValue] = Field(default_factory=dict)


class CollectorError(Exception):
    """Base class of source failures.

    Subclasses fix ``error_class``. Keyword details with a None value are
    not recorded.
    """

    error_class: ClassVar[CollectorErrorClass]

    def __init__(
        self, message: str, source_id: str | None = None, **details: DetailValue
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source_id = source_id
        self.details = {key: value for key, value in details.items() if value is not None}

    def to_record(self, source_id: str | None = None) -> ErrorRecord:
        """Record of this failure, attributed to ``source_id`` when the error has none."""
        return ErrorRecord(
            error_class=self.error_class,
            message=self.message,
            source_id=self.source_id or source_id,
            details=self.details,
        )


class FetchStageError(CollectorError):
    """The document could not be retrieved.

    Typical details: ``status_code`` of the last attempt and the ``strategy`` used.
    """

    error_class = CollectorErrorClass.FETCH


class ParseError(CollectorError):
    """Content could not be parsed (malformed XML or JSON)."""

    error_class = CollectorErrorClass.PARSE


class SchemaError(CollectorError):
    """Parsed data lacks required fields or has unexpected types.

    Typical details: the offending ``field`` and the ``expected`` shape.
    """

    error_class = CollectorErrorClass.SCHEMA
