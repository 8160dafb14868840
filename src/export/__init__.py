"""Export functionality for quiz documents."""

from .docx_generator import (
    DOCX_MEDIA_TYPE,
    build_export_filename,
    export_quiz_to_docx,
    save_docx,
)

__all__ = ["DOCX_MEDIA_TYPE", "build_export_filename", "export_quiz_to_docx", "save_docx"]
