from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    error_code: Optional[str] = None


class DatabaseError(ErrorResponse):
    error_code: str = "DATABASE_ERROR"
