"""
Pydantic schemas for document-export tables.
"""
from pydantic import BaseModel
from typing import List, Optional


class ExportTable(BaseModel):
    """A titled grid: header row plus body rows of display strings."""
    title: Optional[str] = None
    headers: List[str]
    rows: List[List[str]] = []


class ExportDocument(BaseModel):
    """A printable document described as header lines and tables."""
    filename: str
    title: str
    subtitle_lines: List[str] = []
    summary_lines: List[str] = []
    tables: List[ExportTable] = []
    footer: Optional[str] = None
