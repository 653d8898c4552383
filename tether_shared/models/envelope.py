from pydantic import BaseModel, ConfigDict


class Envelope(BaseModel):
    """Uniform response wrapper: ``{success, message?, ...payload}``.

    Payload-bearing responses subclass this and add their own fields.
    """

    model_config = ConfigDict(from_attributes=True)

    success: bool = True
    message: str | None = None
