from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

PDF_MEDIA_TYPE = "application/pdf"


class SummarizeRequest(BaseModel):
    # Both optional so a missing field surfaces as our own 400, not a schema error
    model_config = ConfigDict(populate_by_name=True)

    file_data: Optional[str] = Field(None, alias="fileData", description="Base64-encoded PDF bytes")
    file_type: Optional[str] = Field(None, alias="fileType", description="Must be application/pdf")

    @property
    def is_pdf_upload(self) -> bool:
        return bool(self.file_data) and self.file_type == PDF_MEDIA_TYPE
