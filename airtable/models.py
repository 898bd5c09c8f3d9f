"""
Record Models
-------------
The JSON envelope Airtable uses for request and response bodies:

    {"records": [{"createdTime": ..., "fields": {...}, "id": ...}, ...]}

The payload always carries a "records" key, as an empty list when there
are no records. Unset record attributes are left out.
"""

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class AirtableRecord(BaseModel):
    """One row of a table."""
    model_config = ConfigDict(populate_by_name=True)

    created_time: Optional[str] = Field(default=None, alias="createdTime")
    fields: Optional[Any] = None  # opaque field map, passed through as given
    id: Optional[str] = None

    @classmethod
    def from_fields(cls, fields: Any) -> "AirtableRecord":
        """Record for creation: the server assigns id and createdTime."""
        return cls(fields=fields)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AirtablePayload(BaseModel):
    """Ordered list of records wrapped as {"records": [...]}."""
    records: List[AirtableRecord] = Field(default_factory=list)

    def encode(self) -> bytes:
        """
        Serialize to a UTF-8 JSON body.

        Raises:
            ValueError: a field value is NaN or infinite
            TypeError: a field value is not JSON serializable
        """
        data = self.model_dump(by_alias=True, exclude_none=True)
        return json.dumps(
            data, allow_nan=False, ensure_ascii=False, separators=(",", ":")
        ).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: Union[bytes, str]) -> "AirtablePayload":
        """
        Decode a response body.

        A single-record response ({"id": ..., "fields": ...}) is wrapped
        into a one-record payload.

        Raises:
            ValueError: body is not JSON, or not a valid envelope
                (pydantic.ValidationError is a ValueError)
        """
        raw = json.loads(data)
        if isinstance(raw, dict) and "records" in raw:
            return cls.model_validate(raw)
        return cls(records=[AirtableRecord.model_validate(raw)])
