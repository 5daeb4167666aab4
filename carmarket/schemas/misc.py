from pydantic import BaseModel


class Message(BaseModel):
    """
    Response envelope for operations that return no data.
    """

    success: bool = True
    message: str


class HealthStatus(BaseModel):
    status: str = "ok"
