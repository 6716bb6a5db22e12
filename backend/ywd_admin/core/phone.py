# ywd_admin/core/phone.py
import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """
    Normalize a phone number to the stored +7XXXXXXXXXX form.

    Only digits are considered. Russian trunk prefix "8" and bare ten-digit
    numbers are rewritten to "+7"; anything else just gets a leading "+".
    Never raises, and already-normalized input comes back unchanged.
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if digits.startswith("8") and len(digits) == 11:
        return "+7" + digits[1:]
    if digits.startswith("7") and len(digits) == 11:
        return "+" + digits
    if len(digits) == 10:
        return "+7" + digits
    return "+" + digits
