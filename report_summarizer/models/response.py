from pydantic import BaseModel, Field

class SummarizeResponse(BaseModel):
    summary: str = Field(..., description="Markdown summary returned by the model")

class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable failure reason")

class HealthResponse(BaseModel):
    status: str = Field("ok", description="Liveness indicator")
