"""
Field-level validators for CSV imports.

Every validator is a pure predicate over the raw cell text and accepts
the empty string: whether a field is required is checked separately.
"""

import math
import re
from datetime import datetime

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
PHONE_PATTERN = re.compile(r"\(\d{2}\)\s?\d{4,5}-?\d{4}")
NOTA_PATTERN = re.compile(r"\d{1,2}")
NON_DIGITS = re.compile(r"\D")

VALID_ESTADOS = (
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA",
    "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI", "RJ", "RN",
    "RS", "RO", "RR", "SC", "SP", "SE", "TO",
)  # fmt: skip

VALID_PORTES_EMPRESA = (
    "Microempresa",
    "Pequena Empresa",
    "Média Empresa",
    "Grande Empresa",
    "Pessoa Física",
    "MEI",
)

# Contract types accepted on client rows.
VALID_TIPOS_CONTRATO = (
    "Prestação de Serviços",
    "Venda de Produtos",
    "Consultoria",
    "Fixo Mensal",
    "Por Projeto",
    "Por Hora",
)

VALID_SEGMENTOS_ECONOMICOS = (
    "Agronegócio",
    "Audiovisual",
    "Bebida e Alimentos",
    "Construção civil",
    "Empreendimentos Imobiliários",
    "Holding Patrimonial",
    "Holding Familiar",
    "Energia/Gás/Combustíveis",
    "Fintechs",
    "Bancos e IF",
    "Comércio",
    "Comércio eletrônico",
    "Entretenimento e Eventos",
    "Serviços Profissionais",
    "Indústria",
    "Empresas de tech",
    "Saúde",
)

# Contract-type tags accepted on contract rows.
TIPOS_CONTRATO_TAGS = (
    "fixo mensal",
    "projeto",
    "horas",
    "pro labore",
    "mensalidade de processo",
)

NOTA_POTENCIAL_MIN = 1
NOTA_POTENCIAL_MAX = 10

CPF_LENGTH = 11
CNPJ_LENGTH = 14
CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def validate_email(email: str) -> bool:
    if not email:
        return True
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_date(date_string: str) -> bool:
    """Accept only real calendar dates written as ``YYYY-MM-DD``."""
    if not date_string:
        return True
    if not DATE_PATTERN.match(date_string):
        return False
    try:
        parsed = datetime.strptime(date_string, "%Y-%m-%d").date()
    except ValueError:
        return False
    return parsed.isoformat() == date_string


def validate_boolean(value: str) -> bool:
    if not value:
        return True
    return value.lower() in ("true", "false")


def validate_phone_number(phone: str) -> bool:
    """Brazilian phone: ``(11) 99999-9999``, ``(11)3333-4444`` and the like."""
    if not phone:
        return True
    return PHONE_PATTERN.fullmatch(phone) is not None


def _all_same_digit(digits: str) -> bool:
    return len(set(digits)) == 1


def _validate_cpf(cpf: str) -> bool:
    if _all_same_digit(cpf):
        return False

    digits = [int(d) for d in cpf]
    for position in (9, 10):
        total = sum(digit * (position + 1 - i) for i, digit in enumerate(digits[:position]))
        remainder = (total * 10) % 11
        if remainder in (10, 11):
            remainder = 0
        if remainder != digits[position]:
            return False
    return True


def _validate_cnpj(cnpj: str) -> bool:
    if _all_same_digit(cnpj):
        return False

    digits = [int(d) for d in cnpj]
    for position, weights in ((12, CNPJ_WEIGHTS_1), (13, CNPJ_WEIGHTS_2)):
        remainder = sum(d * w for d, w in zip(digits[:position], weights)) % 11
        check_digit = 0 if remainder < 2 else 11 - remainder
        if check_digit != digits[position]:
            return False
    return True


def validate_cpf_cnpj(value: str, strict: bool = True) -> bool:
    """
    Validate a CPF (11 digits) or CNPJ (14 digits).

    Formatting characters are ignored. In strict mode the check digits
    are verified; in lenient mode only the digit count matters.

    Args:
        value: Raw document number, formatted or not
        strict: Whether to verify check digits

    Returns:
        True if the value is empty or a valid document number
    """
    if not value:
        return True

    digits = NON_DIGITS.sub("", value)
    if len(digits) == CPF_LENGTH:
        return _validate_cpf(digits) if strict else True
    if len(digits) == CNPJ_LENGTH:
        return _validate_cnpj(digits) if strict else True
    return False


def validate_estado(estado: str) -> bool:
    if not estado:
        return True
    return estado.upper() in VALID_ESTADOS


def validate_porte_empresa(porte: str) -> bool:
    if not porte:
        return True
    return porte in VALID_PORTES_EMPRESA


def validate_segmento_economico(segmento: str) -> bool:
    if not segmento:
        return True
    return segmento in VALID_SEGMENTOS_ECONOMICOS


def validate_tipo_contrato_cliente(tipo: str) -> bool:
    if not tipo:
        return True
    return tipo in VALID_TIPOS_CONTRATO


def validate_tipo_contrato(tipo: str) -> bool:
    if not tipo:
        return True
    return tipo in TIPOS_CONTRATO_TAGS


def validate_nota_potencial(nota: str) -> bool:
    """Potential score must be a whole number from 1 to 10."""
    if not nota:
        return True
    if not NOTA_PATTERN.fullmatch(nota):
        return False
    return NOTA_POTENCIAL_MIN <= int(nota) <= NOTA_POTENCIAL_MAX


def validate_valor_contrato(valor: str) -> bool:
    """Contract value must be a finite, non-negative decimal (``15000.00``)."""
    if not valor:
        return True
    try:
        number = float(valor)
    except ValueError:
        return False
    return math.isfinite(number) and number >= 0
