"""
Strict CSV validation for client and contract imports.

Unlike the best-effort parsers, every failure is reported as a
``ValidationError`` addressed by row and field, and all rows are checked
before returning so the whole error list can be shown at once. Only
rows without errors are promoted into typed records.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import fields
from typing import Any, ClassVar

from carteira.core.logging import get_logger
from carteira.models.validation import (
    CatalogoReferencia,
    ClienteCSVRow,
    ClienteReferencia,
    ContratoCSVRow,
    ValidationError,
    ValidationResult,
)
from carteira.services.csv_lines import split_csv_line, strip_quotes
from carteira.services.field_validators import (
    TIPOS_CONTRATO_TAGS,
    VALID_ESTADOS,
    VALID_PORTES_EMPRESA,
    VALID_SEGMENTOS_ECONOMICOS,
    VALID_TIPOS_CONTRATO,
    validate_boolean,
    validate_cpf_cnpj,
    validate_date,
    validate_email,
    validate_estado,
    validate_nota_potencial,
    validate_phone_number,
    validate_porte_empresa,
    validate_segmento_economico,
    validate_tipo_contrato,
    validate_tipo_contrato_cliente,
    validate_valor_contrato,
)

logger = get_logger(__name__)

VALIDATION_DELIMITER = ","
LIST_SEPARATOR = "|"

MSG_EMPTY_FILE = "Arquivo CSV está vazio"
MSG_REQUIRED = "Campo obrigatório não pode estar vazio"
MSG_DATE = "Data deve estar no formato AAAA-MM-DD"

CLIENTE_REQUIRED_HEADERS = ("nome_cliente",)
CLIENTE_OPTIONAL_HEADERS = (
    "contato_principal",
    "grupo_economico",
    "cpf_cnpj",
    "segmento_economico",
    "cidade",
    "estado",
    "pais",
    "relacionamento_exterior",
    "porte_empresa",
    "whatsapp",
    "email",
    "area",
    "servico_prestado",
    "produtos_vendidos",
    "potencial",
    "nota_potencial",
    "data_inicio",
    "tipo_contrato",
    "ocupacao_cliente",
    "quem_trouxe",
)
CLIENTE_LIST_FIELDS = ("area", "servico_prestado", "produtos_vendidos")

CONTRATO_REQUIRED_HEADERS = ("email_cliente",)
CONTRATO_OPTIONAL_HEADERS = (
    "area",
    "servico",
    "produto",
    "tipo_contrato",
    "valor_contrato",
    "data_inicio",
    "data_fim",
    "quem_trouxe",
)

FieldCheck = tuple[Callable[[str], bool], str]


def parse_csv_rows(csv_content: str) -> list[list[str]]:
    """Split every line of the file into comma-separated cells."""
    return [
        split_csv_line(line, VALIDATION_DELIMITER) for line in csv_content.strip().split("\n")
    ]


def split_list_field(value: str) -> list[str]:
    """Decode a pipe-separated cell into its non-empty, trimmed items."""
    return [item.strip() for item in value.split(LIST_SEPARATOR) if item.strip()]


def _split_known(
    record: dict[str, str], target: type, exclude: Iterable[str] = ()
) -> tuple[dict[str, Any], dict[str, str]]:
    """Separate cells that map onto ``target`` fields from unrecognised ones."""
    known = {f.name for f in fields(target)} - {"extras", *exclude}
    values = {k: v for k, v in record.items() if k in known}
    extras = {k: v for k, v in record.items() if k not in known}
    return values, extras


class CSVRowValidator(ABC):
    """
    Row-by-row validator for header-addressed CSV files.

    Subclasses declare the headers they need, the fields that may not be
    empty, a check per field and how a clean record is promoted.
    """

    name: ClassVar[str] = "csv"
    required_headers: ClassVar[tuple[str, ...]] = ()
    required_fields: ClassVar[tuple[str, ...]] = ()
    field_checks: ClassVar[dict[str, FieldCheck]] = {}

    def validate(self, csv_content: str) -> ValidationResult:
        """
        Validate a whole file.

        Never raises: unexpected failures become a single file-level error.
        """
        try:
            result = self._validate(csv_content)
        except Exception as e:
            logger.exception("csv_validation_failed", validator=self.name)
            return ValidationResult(
                errors=[
                    ValidationError(
                        row=0,
                        field="file",
                        value="",
                        message=f"Erro ao processar arquivo: {e}",
                    )
                ]
            )

        logger.info(
            "csv_validated",
            validator=self.name,
            total_rows=result.total_rows,
            valid_rows=len(result.valid_rows),
            errors=len(result.errors),
        )
        return result

    def _validate(self, csv_content: str) -> ValidationResult:
        if not csv_content.strip():
            return ValidationResult(
                errors=[ValidationError(row=0, field="file", value="", message=MSG_EMPTY_FILE)]
            )

        rows = parse_csv_rows(csv_content)
        headers = [strip_quotes(header).lower() for header in rows[0]]
        data_rows = rows[1:]

        errors: list[ValidationError] = []
        valid_rows: list[Any] = []

        missing = [header for header in self.required_headers if header not in headers]
        if missing:
            errors.append(
                ValidationError(
                    row=0,
                    field="headers",
                    value=",".join(headers),
                    message=f"Colunas obrigatórias faltando: {', '.join(missing)}",
                )
            )

        for index, row in enumerate(data_rows):
            row_number = index + 2  # header is line 1

            if len(row) != len(headers):
                errors.append(
                    ValidationError(
                        row=row_number,
                        field="structure",
                        value=",".join(row),
                        message=f"Linha tem {len(row)} colunas, esperado {len(headers)}",
                    )
                )
                continue

            cells = [(header, strip_quotes(value)) for header, value in zip(headers, row)]
            row_errors = self.check_row(row_number, cells)
            if row_errors:
                errors.extend(row_errors)
            else:
                valid_rows.append(self.promote(dict(cells)))

        return ValidationResult(errors=errors, valid_rows=valid_rows, total_rows=len(data_rows))

    def check_row(self, row_number: int, cells: Sequence[tuple[str, str]]) -> list[ValidationError]:
        """Run the required-field rule and the field checks on one row."""
        errors: list[ValidationError] = []
        for header, value in cells:
            if header in self.required_fields and not value:
                errors.append(ValidationError(row_number, header, value, MSG_REQUIRED))

            check = self.field_checks.get(header)
            if check is None or not value:
                continue
            predicate, message = check
            if not predicate(value):
                errors.append(ValidationError(row_number, header, value, message))
        return errors

    @abstractmethod
    def promote(self, record: dict[str, str]) -> Any:
        """Turn a clean row into its typed record."""


class ClienteCSVValidator(CSVRowValidator):
    """Validates the client import template."""

    name = "clientes"
    required_headers = CLIENTE_REQUIRED_HEADERS
    required_fields = CLIENTE_REQUIRED_HEADERS
    field_checks = {
        "email": (validate_email, "Email inválido"),
        "relacionamento_exterior": (validate_boolean, 'Deve ser "true" ou "false"'),
        "whatsapp": (
            validate_phone_number,
            "Formato de telefone inválido. Use: (xx) xxxxx-xxxx",
        ),
        "cpf_cnpj": (
            lambda value: validate_cpf_cnpj(value, strict=False),
            "CPF/CNPJ deve ter 11 dígitos (CPF) ou 14 dígitos (CNPJ). Formatos aceitos: "
            "000.000.000-00, 00000000000, 00.000.000/0000-00, 00000000000000",
        ),
        "estado": (
            validate_estado,
            f"Estado inválido. Use uma das siglas: {', '.join(VALID_ESTADOS)}",
        ),
        "porte_empresa": (
            validate_porte_empresa,
            f"Porte da empresa inválido. Use um dos valores: {', '.join(VALID_PORTES_EMPRESA)}",
        ),
        "segmento_economico": (
            validate_segmento_economico,
            "Segmento econômico inválido. Use um dos valores: "
            f"{', '.join(VALID_SEGMENTOS_ECONOMICOS)}",
        ),
        "tipo_contrato": (
            validate_tipo_contrato_cliente,
            f"Tipo de contrato inválido. Use um dos valores: {', '.join(VALID_TIPOS_CONTRATO)}",
        ),
        "nota_potencial": (
            validate_nota_potencial,
            "Nota potencial deve ser um número inteiro de 1 a 10",
        ),
        "data_inicio": (validate_date, MSG_DATE),
    }

    def promote(self, record: dict[str, str]) -> ClienteCSVRow:
        values, extras = _split_known(record, ClienteCSVRow)
        for list_field in CLIENTE_LIST_FIELDS:
            if list_field in values:
                values[list_field] = split_list_field(values[list_field])
        if "relacionamento_exterior" in values:
            values["relacionamento_exterior"] = values["relacionamento_exterior"].lower() == "true"
        return ClienteCSVRow(**values, extras=extras)


class ContratoCSVValidator(CSVRowValidator):
    """Validates the contract import template without checking references."""

    name = "contratos"
    required_headers = CONTRATO_REQUIRED_HEADERS
    required_fields = CONTRATO_REQUIRED_HEADERS
    field_checks = {
        "email_cliente": (
            validate_email,
            "E-mail deve ter formato válido (ex: cliente@empresa.com)",
        ),
        "data_inicio": (validate_date, MSG_DATE),
        "data_fim": (validate_date, MSG_DATE),
        "tipo_contrato": (
            validate_tipo_contrato,
            f"Tipo de contrato inválido. Use um dos valores: {', '.join(TIPOS_CONTRATO_TAGS)}",
        ),
        "valor_contrato": (
            validate_valor_contrato,
            "Valor deve ser um número decimal positivo (ex: 15000.00)",
        ),
    }

    _foreign_keys: ClassVar[tuple[str, ...]] = ("cliente_id", "area_id", "servico_id", "produto_id")

    def promote(self, record: dict[str, str]) -> ContratoCSVRow:
        values, extras = _split_known(record, ContratoCSVRow, exclude=self._foreign_keys)
        valor = values.get("valor_contrato")
        values["valor_contrato"] = float(valor) if valor else None
        return ContratoCSVRow(**values, **self.resolve(values), extras=extras)

    def resolve(self, values: dict[str, Any]) -> dict[str, str | None]:
        """Foreign keys for a clean row; none without reference data."""
        return {}


def _index_by(entries: Iterable[Any], attribute: str) -> dict[str, str]:
    # First entry wins on duplicates.
    index: dict[str, str] = {}
    for entry in entries:
        key = getattr(entry, attribute)
        if key is not None and key not in index:
            index[key] = entry.id
    return index


class ContratoReferenceValidator(ContratoCSVValidator):
    """
    Contract validator that also checks rows against existing records.

    ``email_cliente`` must match an existing client exactly. ``area``,
    ``servico`` and ``produto`` are matched by exact name; a name that
    matches nothing leaves the foreign key empty instead of failing the row.
    """

    name = "contratos_referencias"

    def __init__(
        self,
        clientes: Iterable[ClienteReferencia],
        areas: Iterable[CatalogoReferencia] = (),
        servicos: Iterable[CatalogoReferencia] = (),
        produtos: Iterable[CatalogoReferencia] = (),
    ) -> None:
        self._clientes = _index_by(clientes, "email")
        self._catalogos = {
            "area": _index_by(areas, "name"),
            "servico": _index_by(servicos, "name"),
            "produto": _index_by(produtos, "name"),
        }

    def check_row(self, row_number: int, cells: Sequence[tuple[str, str]]) -> list[ValidationError]:
        errors = super().check_row(row_number, cells)
        for header, value in cells:
            if header != "email_cliente" or not value or not validate_email(value):
                continue
            if value not in self._clientes:
                errors.append(
                    ValidationError(
                        row_number,
                        header,
                        value,
                        f'Cliente com e-mail "{value}" não encontrado. '
                        "Cadastre o cliente primeiro.",
                    )
                )
        return errors

    def resolve(self, values: dict[str, Any]) -> dict[str, str | None]:
        resolved: dict[str, str | None] = {
            "cliente_id": self._clientes.get(values.get("email_cliente", ""))
        }
        for field_name, index in self._catalogos.items():
            name = values.get(field_name, "")
            resolved[f"{field_name}_id"] = index.get(name) if name else None
            if name and resolved[f"{field_name}_id"] is None:
                # TODO: confirm with product whether an unknown name should fail the row
                logger.warning("contrato_referencia_nao_encontrada", field=field_name, value=name)
        return resolved


def validate_clientes_csv(csv_content: str) -> ValidationResult:
    """Validate a client import file."""
    return ClienteCSVValidator().validate(csv_content)


def validate_contratos_csv(csv_content: str) -> ValidationResult:
    """Validate a contract import file without reference data."""
    return ContratoCSVValidator().validate(csv_content)


def validate_contratos_csv_with_references(
    csv_content: str,
    clientes: Iterable[ClienteReferencia],
    areas: Iterable[CatalogoReferencia] = (),
    servicos: Iterable[CatalogoReferencia] = (),
    produtos: Iterable[CatalogoReferencia] = (),
) -> ValidationResult:
    """Validate a contract import file against existing clients and catalog entries."""
    validator = ContratoReferenceValidator(clientes, areas, servicos, produtos)
    return validator.validate(csv_content)
