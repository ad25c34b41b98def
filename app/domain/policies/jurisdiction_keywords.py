"""JurisdictionKeywordPolicy — map free-text addresses to state codes.

This is a plain case-insensitive substring heuristic: the first keyword of
JURISDICTION_KEYWORDS (in declaration order) found anywhere in the address
wins. It can mis-trigger on street or area names that contain a state name;
that behaviour is kept as is.
"""

from __future__ import annotations

JURISDICTION_KEYWORDS: dict[str, str] = {
    "tamil nadu": "TN",
    "karnataka": "KA",
    "kerala": "KL",
    "andhra pradesh": "AP",
    "telangana": "TS",
    "maharashtra": "MH",
    "gujarat": "GJ",
    "rajasthan": "RJ",
    "uttar pradesh": "UP",
    "madhya pradesh": "MP",
    "west bengal": "WB",
    "bihar": "BR",
    "odisha": "OR",
    "jharkhand": "JH",
    "assam": "AS",
    "punjab": "PB",
    "haryana": "HR",
    "himachal pradesh": "HP",
    "uttarakhand": "UK",
    "goa": "GA",
    "delhi": "DL",
}


def extract_jurisdiction_code(
    address: str | None,
    keywords: dict[str, str] = JURISDICTION_KEYWORDS,
) -> str | None:
    """Return the code of the first configured keyword found in the address."""
    if not address:
        return None
    address_lower = address.lower()
    for keyword, code in keywords.items():
        if keyword in address_lower:
            return code
    return None
