"""
Text extraction result model.

Dependencies: pydantic
System role: Output of the PDF extraction stage
"""

from pydantic import BaseModel, Field


class PageText(BaseModel):
    """Plain text of a single PDF page."""

    page_number: int = Field(ge=1)
    text: str


class ExtractedText(BaseModel):
    """Full text of a PDF plus per-page breakdown."""

    text: str = Field(description="All pages joined by blank lines, trimmed")
    page_count: int = Field(ge=0)
    pages: list[PageText] = Field(default_factory=list)
