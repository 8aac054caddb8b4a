"""
Typed views over the JSON bodies returned by the cluster.

Only the fields the quickstart reads are declared; anything else the server
sends is ignored. A body that lacks a required field or carries the wrong
type is rejected with ``MalformedResponse`` instead of surfacing later as a
``KeyError`` or ``TypeError``.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from es_quickstart.index.errors import MalformedResponse


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class VersionInfo(_Body):
    number: str
    build_flavor: Optional[str] = None
    lucene_version: Optional[str] = None


class ClusterInfo(_Body):
    name: str
    cluster_name: str
    cluster_uuid: Optional[str] = None
    version: VersionInfo
    tagline: Optional[str] = None


class IndexResult(_Body):
    index: str = Field(alias="_index")
    id: str = Field(alias="_id")
    result: str
    version: int = Field(alias="_version")
    seq_no: Optional[int] = Field(default=None, alias="_seq_no")
    forced_refresh: bool = False


class GetResult(_Body):
    index: str = Field(alias="_index")
    id: str = Field(alias="_id")
    found: bool
    version: Optional[int] = Field(default=None, alias="_version")
    source: Optional[Dict[str, Any]] = Field(default=None, alias="_source")


class TotalHits(_Body):
    value: int
    relation: str = "eq"


class Hit(_Body):
    index: str = Field(alias="_index")
    id: str = Field(alias="_id")
    score: Optional[float] = Field(default=None, alias="_score")
    source: Dict[str, Any] = Field(default_factory=dict, alias="_source")


class HitsEnvelope(_Body):
    total: TotalHits
    max_score: Optional[float] = None
    hits: List[Hit] = []


class SearchResult(_Body):
    took: int
    timed_out: bool = False
    hits: HitsEnvelope


class ErrorCause(_Body):
    type: str
    reason: Optional[str] = None


class ErrorBody(_Body):
    # Some endpoints answer with a bare string instead of an error object.
    error: Union[ErrorCause, str]
    status: Optional[int] = None

    @property
    def error_type(self) -> Optional[str]:
        if isinstance(self.error, ErrorCause):
            return self.error.type
        return None

    @property
    def reason(self) -> Optional[str]:
        if isinstance(self.error, ErrorCause):
            return self.error.reason
        return self.error


ModelT = TypeVar("ModelT", bound=BaseModel)


def decode(model: Type[ModelT], body: Any, operation: Optional[str] = None) -> ModelT:
    """
    Validate ``body`` against ``model``.

    Raises ``MalformedResponse`` naming the first offending field.
    """
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<body>"
        raise MalformedResponse(
            f"unexpected {model.__name__} body at '{location}': {first['msg']}",
            operation,
        ) from exc
