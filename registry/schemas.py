from pydantic import Field

from pawsitive.schemas import RequestModel


class CreateRoleRequest(RequestModel):
    name: str = Field(min_length=1, max_length=50)
