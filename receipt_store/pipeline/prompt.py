"""
Prompt compiler for medical document summaries.

Pure and deterministic: the same :class:`PromptContext` always yields the
same prompt. Untrusted OCR text is bounded before interpolation.

Two template strategies exist and are selected by configuration:

* ``english``   — structured English summary.
* ``bilingual`` — same sections, each written in English followed by a
  regional language.
"""
from __future__ import annotations

import json
from enum import Enum

from receipt_store.schemas import PromptContext

MAX_OCR_CHARS = 8000
TRUNCATION_MARKER = "[truncated]"
NOT_PROVIDED = "Not provided"
DEFAULT_DOCUMENT_TYPE = "Medical Receipt / Pharmacy Bill / Lab Report / Hospital Invoice"
DEFAULT_REGIONAL_LANGUAGE = "Hindi"


class PromptTemplate(str, Enum):
    ENGLISH = "english"
    BILINGUAL = "bilingual"


# ---------------------------------------------------------------------------
# Template text
# ---------------------------------------------------------------------------

_PREAMBLE = """\
You are MediAssist AI, a medical document understanding assistant.

Your responsibility is to process medical receipts, bills, pharmacy invoices,
lab reports, and hospital documents uploaded by users.

You MUST follow medical safety rules:
- Do NOT diagnose diseases
- Do NOT provide medical advice
- Do NOT suggest treatment changes
- Do NOT interpret lab values or label results as normal or abnormal
- Only summarize what is explicitly present in the document
- Always use clear, neutral, and professional language

Your output must be structured, easy to read, and suitable for both patients and doctors.

A user has uploaded a medical document (receipt, bill, or report).
The file is already stored securely in Cloudinary as an image or PDF.

Your task is to:

1. Understand the OCR-extracted content provided below.
2. Identify and classify medical information accurately.
3. Generate a clean, well-structured medical summary.
4. Prepare the summary so it can be stored in the MediAssist Receipt Store.
5. Ensure compliance with medical safety rules.

---------------------------------
INPUT DATA
---------------------------------

Cloudinary File URL:
{url}

Document Type:
{document_type}

OCR Extracted Text:
{ocr_text}

Structured OCR (if available):
{structured}

---------------------------------
PROCESSING RULES
---------------------------------

1. Identify the following if present:
   - Hospital / Pharmacy / Diagnostic Center name
   - Date of visit or billing
   - Doctor name (if mentioned)
   - Medicines (name, strength, form)
   - Tests / Investigations
   - Procedures / Treatments
   - Individual item costs
   - Total amount paid

2. Classify extracted items into:
   - Medicines
   - Lab Tests
   - Diagnostic Procedures
   - Consultation / Services
   - Other charges

3. If medicine names are present:
   - Keep names exactly as written
   - Do NOT add usage instructions
   - Do NOT explain dosage unless written in receipt

4. If test names are present:
   - Expand common abbreviations (e.g., CBC → Complete Blood Count)
   - Do NOT interpret results

5. If any information is missing:
   - Clearly mark it as "Not mentioned"
"""

_SECTIONS = """\
### 🧾 Medical Document Summary

**Document Type:**
**Hospital / Pharmacy / Lab:**
**Date:**

### 👨‍⚕️ Doctor / Consultant
- Name:

### 💊 Medicines
- Medicine Name – Cost (if available)

### 🧪 Tests / Investigations
- Test Name – Cost (if available)

### 🏥 Procedures / Services
- Procedure Name – Cost (if available)

### 💰 Billing Summary
- Medicines Total:
- Tests Total:
- Procedures / Services Total:
- Other Charges:
- **Total Amount Paid:**

### ☁️ File Reference
- Stored Securely at: {url}

### ℹ️ Important Note
This summary is auto-generated from the uploaded medical document.
It is for record-keeping purposes only and does not replace professional medical advice.
"""

ENGLISH_TEMPLATE = (
    _PREAMBLE
    + """
---------------------------------
SUMMARY OUTPUT FORMAT (STRICT)
---------------------------------

Generate the summary in the following format ONLY:

"""
    + _SECTIONS
    + """
TONE & STYLE GUIDELINES

- Use simple, professional language
- Use bullet points
- No emojis except section headers
- Do not assume anything not written in the document
- Be precise and factual"""
)

BILINGUAL_TEMPLATE = (
    _PREAMBLE
    + """
6. Language rules:
   - Write every section in English first, then repeat it in {language}
   - Keep medicine names, test names, doctor names, dates and amounts exactly
     as written in the document; do NOT translate or transliterate them
   - "Not mentioned" may be translated into {language} in the {language} part

---------------------------------
SUMMARY OUTPUT FORMAT (STRICT)
---------------------------------

Generate the summary in the following format ONLY, keeping this section order.
After each English section, add the same section in {language} under the
heading "({language})":

"""
    + _SECTIONS
    + """
TONE & STYLE GUIDELINES

- Use simple, professional language in both English and {language}
- Use bullet points
- No emojis except section headers
- Do not assume anything not written in the document
- Be precise and factual"""
)

_TEMPLATES = {
    PromptTemplate.ENGLISH: ENGLISH_TEMPLATE,
    PromptTemplate.BILINGUAL: BILINGUAL_TEMPLATE,
}


# ---------------------------------------------------------------------------
# Field resolution
# ---------------------------------------------------------------------------

def _text_or(value, default: str) -> str:
    text = str(value).strip() if value is not None else ""
    return text or default


def bound_ocr_text(ocr_text) -> str:
    """Trim OCR text and cap it at ``MAX_OCR_CHARS`` characters."""
    text = _text_or(ocr_text, "")
    if not text:
        return NOT_PROVIDED
    if len(text) > MAX_OCR_CHARS:
        text = f"{text[:MAX_OCR_CHARS]}\n{TRUNCATION_MARKER}"
    return text


def structured_block(context: PromptContext) -> str:
    # A non-empty structured-OCR object wins over the normalized receipt fields
    if isinstance(context.ocr_json, (dict, list)) and context.ocr_json:
        structured = context.ocr_json
    elif context.receipt is not None:
        structured = context.receipt
    else:
        structured = {}
    return json.dumps(structured, indent=2, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_prompt(
    context: PromptContext | None = None,
    template: PromptTemplate | str = PromptTemplate.ENGLISH,
    language: str = DEFAULT_REGIONAL_LANGUAGE,
) -> str:
    context = context or PromptContext()
    return _TEMPLATES[PromptTemplate(template)].format(
        url=_text_or(context.cloudinary_file_url, NOT_PROVIDED),
        document_type=_text_or(context.document_type, DEFAULT_DOCUMENT_TYPE),
        ocr_text=bound_ocr_text(context.ocr_text),
        structured=structured_block(context),
        language=_text_or(language, DEFAULT_REGIONAL_LANGUAGE),
    )
