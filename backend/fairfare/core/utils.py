"""
Utility functions for the application.
"""
from typing import Any, Optional
from decimal import Decimal, InvalidOperation
import json


def coerce_amount(value: Any) -> Decimal:
    """
    Coerce a stored cost or budget to a Decimal.

    Numbers and numeric strings convert; anything else (None, text,
    booleans, NaN, infinity) becomes 0.
    """
    if isinstance(value, bool) or value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return Decimal(0)
    else:
        return Decimal(0)
    if not amount.is_finite():
        return Decimal(0)
    return amount


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} region of text, or None.

    Braces inside JSON string literals are ignored so that values like
    "{sic}" do not end the region early.
    """
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from here; try the next opening brace
        start = text.find("{", start + 1)
    return None


def extract_json_object(text: str) -> dict:
    """
    Parse the first balanced JSON object embedded in model output.

    Raises:
        ValueError: If no object is found or it does not parse.
    """
    candidate = find_json_object(text)
    if candidate is None:
        raise ValueError("No JSON object found in response")
    data = json.loads(candidate)
    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data
