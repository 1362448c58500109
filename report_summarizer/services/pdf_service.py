# report_summarizer/services/pdf_service.py
"""
Born-digital PDF text extractor.
Receives raw PDF bytes and returns the embedded text layer as plain text.

• No OCR: scanned/image-only pages come back empty
• Pages are separated by a blank line
"""
from fastapi import HTTPException
import fitz                    # PyMuPDF


def extract_text(pdf_bytes: bytes) -> str:
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as exc:
        raise HTTPException(400, f"Invalid or corrupted PDF file: {exc}") from exc

    with doc:
        if doc.needs_pass:
            raise HTTPException(400, "PDF is password-protected.")
        # MuPDF "repairs" some junk into an empty document instead of failing
        if doc.page_count == 0:
            raise HTTPException(400, "Invalid or corrupted PDF file: document has no pages")
        try:
            return "\n\n".join(page.get_text("text") for page in doc)
        except Exception as exc:
            raise HTTPException(400, f"Invalid or corrupted PDF file: {exc}") from exc
