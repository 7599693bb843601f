# mp_core/common/validators.py
from __future__ import annotations

import re

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

NON_DIGITS = re.compile(r"\D+")

cep_validator = RegexValidator(
    regex=r"^(\d{5}-\d{3}|\d{8})$",
    message="CEP must be NNNNN-NNN or 8 digits.",
    code="invalid_cep",
)


def digits_only(value: str | None) -> str:
    return NON_DIGITS.sub("", value or "")


def validate_phone(value: str) -> None:
    """
    Brazilian phone: 10 (landline) or 11 (mobile) digits once formatting is stripped.
    """
    if not value:
        return
    if not 10 <= len(digits_only(value)) <= 11:
        raise ValidationError("Phone must have 10 or 11 digits.", code="invalid_phone")


def validate_cpf(value: str) -> None:
    if not value:
        return
    if len(digits_only(value)) != 11:
        raise ValidationError("CPF must have 11 digits.", code="invalid_cpf")


def validate_cnpj(value: str) -> None:
    if not value:
        return
    if len(digits_only(value)) != 14:
        raise ValidationError("CNPJ must have 14 digits.", code="invalid_cnpj")
