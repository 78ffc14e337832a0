"""Response envelope shared by every action endpoint.

Learn: the envelope always travels with HTTP 200. The real outcome is
in status.code, and every envelope gets a fresh traceId so a client
report can be matched against server logs.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_trace_id() -> str:
    return str(uuid.uuid4())


class StatusDTO(BaseModel):
    code: int
    message: str
    trace_id: str = Field(default_factory=new_trace_id)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenericResponse(BaseModel):
    status: StatusDTO

    @classmethod
    def success(cls, message: str) -> "GenericResponse":
        return cls(status=StatusDTO(code=200, message=message))

    @classmethod
    def failure(cls, code: int, message: str) -> "GenericResponse":
        return cls(status=StatusDTO(code=code, message=message))
