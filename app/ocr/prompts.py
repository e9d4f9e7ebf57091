from google.genai import types

IMAGE_OCR_PROMPT = """Extract these fields from the image:
NID: name, date_of_birth, nid_number
BO: bo_id (16 digits)
TIN: tin_number (12 digits)
BANK: account_number (11/13/17 digits), routing_number (9 digits)
- Use only visible, readable text
- Use empty string if unclear
- Keep original date/number formats
- Output valid JSON only"""

PDF_OCR_PROMPT = """Extract fields from PDF:
NID: name, date_of_birth, nid_number | BO: bo_id | TIN: tin_number | BANK: account_number, routing_number
Only use visible text. Use empty string if unclear. Return JSON."""


def details_schema(fields: tuple[str, ...]) -> dict:
    """Build the `{details: {...}}` response schema requiring every one of `fields`."""
    return {
        "type": types.Type.OBJECT,
        "properties": {
            "details": {
                "type": types.Type.OBJECT,
                "properties": {name: {"type": types.Type.STRING} for name in fields},
                "required": list(fields),
            },
        },
        "required": ["details"],
    }


NID_SCHEMA = details_schema(("name", "date_of_birth", "nid_number"))
BO_SCHEMA = details_schema(("bo_id",))
TIN_SCHEMA = details_schema(("tin_number",))
BANK_SCHEMA = details_schema(("account_number", "routing_number"))
