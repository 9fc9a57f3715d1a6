# backend/utils/extract_text.py

import os
import tempfile
import docx
import PyPDF2
import fitz  # PyMuPDF

from backend.config import MAX_RESUME_SIZE_MB
from backend.errors import ValidationError

ALLOWED_EXTENSIONS = (".txt", ".pdf", ".docx")
MIN_PDF_TEXT = 300


# ---------------- PDF HELPERS ---------------- #

def extract_pdf_pypdf2(file_path: str) -> str:
    text = ""
    try:
        with open(file_path, "rb") as f:
            reader = PyPDF2.PdfReader(f)
            for page in reader.pages:
                try:
                    content = page.extract_text()
                    if content:
                        text += content + "\n"
                except Exception:
                    continue
    except Exception:
        return ""
    return text.strip()


def extract_pdf_pymupdf(file_path: str) -> str:
    text = ""
    try:
        with fitz.open(file_path) as doc:
            for page in doc:
                try:
                    content = page.get_text("text")
                    if content:
                        text += content + "\n"
                except Exception:
                    continue
    except Exception:
        return ""
    return text.strip()


def extract_text_from_pdf(file_path: str) -> str:
    text = extract_pdf_pypdf2(file_path)
    if len(text) > MIN_PDF_TEXT:
        return text

    fallback = extract_pdf_pymupdf(file_path)
    return fallback if len(fallback) > len(text) else text


# ---------------- DOCX ---------------- #

def extract_text_from_docx(file_path: str) -> str:
    try:
        doc = docx.Document(file_path)
        content = []

        for para in doc.paragraphs:
            if para.text and para.text.strip():
                content.append(para.text.strip())

        for table in doc.tables:
            for row in table.rows:
                row_text = " | ".join(cell.text.strip() for cell in row.cells)
                if row_text.strip(" |"):
                    content.append(row_text)

        return "\n".join(content).strip()

    except Exception:
        return ""


# ---------------- TXT ---------------- #

def extract_text_from_txt(file_bytes: bytes) -> str:
    for enc in ("utf-8", "cp1252", "latin-1"):
        try:
            return file_bytes.decode(enc).strip()
        except UnicodeDecodeError:
            continue
    return ""


# ---------------- MAIN ---------------- #

def extract_text(file_path: str) -> str:
    if not file_path or not os.path.exists(file_path):
        return ""

    lower = file_path.lower()

    if lower.endswith(".pdf"):
        return extract_text_from_pdf(file_path)

    if lower.endswith(".docx"):
        return extract_text_from_docx(file_path)

    if lower.endswith(".txt"):
        with open(file_path, "rb") as f:
            return extract_text_from_txt(f.read())

    return ""


def extract_resume_text(file_name: str, file_bytes: bytes) -> str:
    """
    Validates a single uploaded resume and returns its text.
    Raises ValidationError for oversized, unsupported or empty files.
    """
    if len(file_bytes) > MAX_RESUME_SIZE_MB * 1024 * 1024:
        raise ValidationError(f"File is too large. Maximum size is {MAX_RESUME_SIZE_MB}MB.", field="file")

    lower = (file_name or "").lower()
    if not lower.endswith(ALLOWED_EXTENSIONS):
        raise ValidationError("Invalid file type. Please upload a .txt or .pdf file.", field="file")

    if lower.endswith(".txt"):
        text = extract_text_from_txt(file_bytes)
    else:
        ext = os.path.splitext(lower)[1]
        with tempfile.TemporaryDirectory() as temp_dir:
            fp = os.path.join(temp_dir, f"resume{ext}")
            with open(fp, "wb") as f:
                f.write(file_bytes)
            text = extract_text(fp)

    if not text.strip():
        raise ValidationError("File appears to be empty. Try a different file.", field="file")
    return text
