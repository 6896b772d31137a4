from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class StageConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    remove_markup_comments: bool = True
    remove_line_comments: bool = True
    remove_style_comments: bool = True
    remove_empty_lines: bool = True
    trim_trailing_whitespace: bool = True
    trim_file_ends: bool = True

    @classmethod
    def all_disabled(cls) -> "StageConfig":
        return cls(**{name: False for name in cls.model_fields})


class CleanReport(BaseModel):
    original_size: int
    cleaned_size: int
    saved_bytes: int
    saved_percent: float = Field(default=0.0, examples=[12.5])
    lines_before: int
    lines_after: int
    stages: List[str] = Field(default_factory=list)


class FileResult(BaseModel):
    path: str
    success: bool
    error: Optional[str] = None
    backup_path: Optional[str] = None
    encoding: Optional[str] = None
    report: Optional[CleanReport] = None


class BatchResult(BaseModel):
    processed: int = 0
    success: int = 0
    files: List[FileResult] = Field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.processed - self.success

    def add(self, result: FileResult) -> None:
        self.processed += 1
        if result.success:
            self.success += 1
        self.files.append(result)

    def merge(self, other: "BatchResult") -> None:
        self.processed += other.processed
        self.success += other.success
        self.files.extend(other.files)


class CleanResponse(BaseModel):
    filename: str
    sha256: str
    encoding: str = Field(default="utf-8")
    content: str
    report: CleanReport


class HealthResponse(BaseModel):
    ok: bool = True
