"""Pydantic data models for extracted listing records.

Article is the one record type in the system: a title plus the two
renderings of its submission time that the listing exposes. Instances are
frozen; nothing downstream of the extractor mutates them.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from sortcheck.common.exceptions import ExtractionError

ISO_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}$"
UNIX_PATTERN = r"^[0-9]+$"


class Article(BaseModel):
    """One extracted listing item.

    Attributes:
        title: Trimmed, non-empty title text.
        iso: Timestamp as ``YYYY-MM-DDTHH:MM:SS``.
        unix: Seconds since the epoch as a string of decimal digits.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    iso: str = Field(pattern=ISO_PATTERN)
    unix: str = Field(pattern=UNIX_PATTERN)

    @field_validator("title")
    @classmethod
    def _title_is_trimmed(cls, value: str) -> str:
        if value != value.strip() or not value.strip():
            raise ValueError("title must be a non-empty trimmed string")
        return value

    @property
    def epoch(self) -> int:
        """The ``unix`` field as an integer."""
        return int(self.unix)

    @classmethod
    def confirm(cls, request_url: str = "", **data: Any) -> "Article":
        """Validate raw field values into an Article.

        Args:
            request_url: URL of the page the data came from, for error context.
            **data: Raw field values.

        Returns:
            The validated Article.

        Raises:
            ExtractionError: If validation fails.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            error_summary = ", ".join(
                f"{err['loc'][0]}: {err['msg']}" for err in e.errors()
            )
            raise ExtractionError(
                f"invalid article ({error_summary})",
                request_url,
                {"failed_doc": data},
            ) from e
