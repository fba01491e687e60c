# src/sheetscan/services/prompts.py

EXTRACTION_PROMPT = """
Analyze this mining data table and extract ALL of its information as JSON.

CURRENT DATE: {current_date}

IMPORTANT:
- Extract EVERY row of the table
- For each row, create a JSON object with this EXACT structure:

{{
    "_id": "generate a unique MongoDB-style ID (24 hexadecimal characters)",
    "frontLabor": "value of the 'Reserva (tn)' column or a similar identifier",
    "date": "date in ISO format (2025-11-21T00:00:00.000Z)",
    "startDate": "{current_date}",
    "dateString": "date in YYYY-MM-DD format",
    "phase": "mineral",
    "tonnage": number of tons (convert to an integer),
    "volquetes": [],
    "firma_volquetes": [],
    "state": "active",
    "shift": "noche",
    "type": "blending",
    "accept": [],
    "day": day of the month (number),
    "month": month (number),
    "year": 2025,
    "__v": 0,
    "createdAt": "{current_date}",
    "updatedAt": "{current_date}"
}}

RULES:
1. Take "frontLabor" from the columns holding codes such as "1910_OB6_TJ-650"
2. "tonnage" must be the number of tons (look for columns like TOTAL, Reserva, etc.)
3. USE THE CURRENT DATE ({current_date}) for startDate, createdAt and updatedAt
4. If you find blank or empty cells, use default values
5. Return ONLY the JSON array, without any additional explanation
6. Make sure the output is valid JSON

Answer ONLY with the JSON array, nothing else.
"""


def build_extraction_prompt(current_date: str) -> str:
    return EXTRACTION_PROMPT.format(current_date=current_date)
