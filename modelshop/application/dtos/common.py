from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Envelope carried by every mutating endpoint and every error."""

    success: bool = True
    message: str
