from pydantic import BaseModel

class UserUpdateIn(BaseModel):
    display_name: str | None = None

class FieldErrorOut(BaseModel):
    field: str
    message: str
