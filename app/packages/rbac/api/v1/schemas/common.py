"""通用请求/响应模型。"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """请求体基类：字段以 camelCase 接收（也接受 snake_case），未知字段一律忽略。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ResponseEnvelope(BaseModel, Generic[T]):
    """系统统一的响应外层结构。"""

    code: int
    data: Optional[T] = None
    message: str


class BatchDeleteRequest(CamelModel):
    """批量删除的请求体。"""

    uuids: List[str] = Field(..., description="待删除记录的 UUID 列表")
