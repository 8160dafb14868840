"""DOCX document generator for quiz export."""

import io
import re
from datetime import datetime
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor
from docx.text.paragraph import Paragraph

from src.models.quiz import OPTION_LETTERS, QuestionType, QuizItem

DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


def ensure_output_directory(output_dir: str = "output") -> Path:
    """
    Ensure the output directory exists.

    Args:
        output_dir: Directory path to create

    Returns:
        Path object for the output directory
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def build_export_filename(title: str, extension: str = "docx") -> str:
    """
    Derive the download filename from a quiz title.

    Every whitespace character becomes an underscore.

    Args:
        title: Quiz title
        extension: File extension (without dot)

    Returns:
        Filename such as "Cell_Biology_Quiz.docx"
    """
    base_name = re.sub(r"\s", "_", title)
    return f"{base_name}.{extension}"


def generate_timestamped_filename(base_name: str, extension: str = "docx") -> str:
    """
    Generate a filename with timestamp.

    Args:
        base_name: Base name for the file
        extension: File extension (without dot)

    Returns:
        Filename with timestamp
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # Clean the base name to remove any path components
    base_name = Path(base_name).name
    return f"{base_name}_{timestamp}.{extension}"


def export_quiz_to_docx(items: list[QuizItem], title: str) -> bytes:
    """
    Render a quiz and its answer key to a DOCX document.

    Args:
        items: Quiz items in display order
        title: Document title

    Returns:
        Bytes of the .docx file
    """
    doc = Document()

    setup_document_styles(doc)
    add_page_number_footer(doc)

    heading = doc.add_heading(title, level=0)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    add_questions_section(doc, items)

    doc.add_page_break()
    add_answer_key(doc, items)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def save_docx(data: bytes, base_name: str, output_dir: str = "output") -> str:
    """
    Write document bytes to a timestamped file in the output directory.

    Args:
        data: Document bytes
        base_name: Base name for the file
        output_dir: Directory to save the file in

    Returns:
        Path to the written file
    """
    output_path = ensure_output_directory(output_dir)
    path = output_path / generate_timestamped_filename(base_name, "docx")
    path.write_bytes(data)
    return str(path)


def setup_document_styles(doc: Document) -> None:
    """
    Set up document-wide styles.

    Args:
        doc: Document to configure
    """
    # Set default font
    style = doc.styles["Normal"]
    font = style.font
    font.name = "Calibri"
    font.size = Pt(11)

    # Set margins
    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def _add_field(paragraph: Paragraph, instruction: str) -> None:
    """Append a Word field (e.g. PAGE) to a paragraph."""
    run = paragraph.add_run()

    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = instruction
    separate = OxmlElement("w:fldChar")
    separate.set(qn("w:fldCharType"), "separate")
    placeholder = OxmlElement("w:t")
    placeholder.text = "1"
    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")

    for element in (begin, instr, separate, placeholder, end):
        run._r.append(element)


def add_page_number_footer(doc: Document) -> None:
    """
    Add a centred "Page N of M" footer to every section.

    Args:
        doc: Document to add to
    """
    for section in doc.sections:
        footer = section.footer
        paragraph = footer.paragraphs[0] if footer.paragraphs else footer.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.add_run("Page ")
        _add_field(paragraph, "PAGE")
        paragraph.add_run(" of ")
        _add_field(paragraph, "NUMPAGES")
        for run in paragraph.runs:
            run.font.size = Pt(9)
            run.font.color.rgb = RGBColor(128, 128, 128)


def add_questions_section(doc: Document, items: list[QuizItem]) -> None:
    """
    Add the numbered questions to the document.

    Args:
        doc: Document to add to
        items: Quiz items
    """
    heading = doc.add_heading("Questions", level=1)
    heading.runs[0].font.color.rgb = RGBColor(0, 51, 102)

    for i, item in enumerate(items, 1):
        # Question number and text
        q_para = doc.add_paragraph()
        q_run = q_para.add_run(f"{i}. ")
        q_run.bold = True
        q_run.font.size = Pt(12)
        q_para.add_run(item.stem)

        if item.type is QuestionType.MCQ:
            for letter, option in zip(OPTION_LETTERS, item.options or []):
                opt_para = doc.add_paragraph(f"{letter}. {option}")
                opt_para.paragraph_format.left_indent = Inches(0.5)
        elif item.type is QuestionType.TRUE_FALSE:
            tf_para = doc.add_paragraph("True / False")
            tf_para.paragraph_format.left_indent = Inches(0.5)
        else:
            line_para = doc.add_paragraph("_" * 60)
            line_para.paragraph_format.left_indent = Inches(0.5)

        # Add spacing between questions
        doc.add_paragraph()


def format_answer(item: QuizItem) -> str:
    """Answer text shown in the answer key."""
    option_text = item.correct_option_text
    if option_text is not None:
        return f"{item.answer}. {option_text}"
    return item.answer


def add_answer_key(doc: Document, items: list[QuizItem]) -> None:
    """
    Add an answer key section to the document.

    Args:
        doc: Document to add to
        items: Quiz items
    """
    header = doc.add_heading("Answer Key", level=1)
    header.runs[0].font.color.rgb = RGBColor(0, 51, 102)

    for i, item in enumerate(items, 1):
        answer_para = doc.add_paragraph()
        answer_para.add_run(f"{i}. ").bold = True
        answer_para.add_run(format_answer(item))

        if item.ref:
            ref_para = doc.add_paragraph()
            ref_para.paragraph_format.left_indent = Inches(0.3)
            ref_run = ref_para.add_run(f"(Reference: {item.ref})")
            ref_run.italic = True
            ref_run.font.size = Pt(10)
            ref_run.font.color.rgb = RGBColor(128, 128, 128)
