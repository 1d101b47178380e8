"""Import API schemas."""

from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from carteira.models.records import ImportedData, SchemaTag
from carteira.models.validation import ValidationError, ValidationResult


class DetectRequest(BaseModel):
    """Header cells to classify."""

    headers: list[str]


class DetectResponse(BaseModel):
    """Detected CSV layout."""

    type: SchemaTag
    display_name: str
    description: str

    @classmethod
    def from_tag(cls, tag: SchemaTag) -> "DetectResponse":
        return cls(type=tag, display_name=tag.display_name, description=tag.description)


class ImportedDataResponse(BaseModel):
    """Best-effort parse result."""

    type: SchemaTag
    data: list[dict[str, Any]]
    total_imported: int

    @classmethod
    def from_imported(cls, imported: ImportedData) -> "ImportedDataResponse":
        return cls(
            type=imported.type,
            data=[asdict(record) for record in imported.data],
            total_imported=imported.total_imported,
        )


class ValidationErrorResponse(BaseModel):
    """One validation failure."""

    row: int
    field: str
    value: str
    message: str

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationErrorResponse":
        return cls(**asdict(error))


class ValidationResultResponse(BaseModel):
    """Strict validation result."""

    is_valid: bool
    errors: list[ValidationErrorResponse]
    valid_rows: list[dict[str, Any]]
    total_rows: int

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultResponse":
        return cls(
            is_valid=result.is_valid,
            errors=[ValidationErrorResponse.from_error(e) for e in result.errors],
            valid_rows=[asdict(row) for row in result.valid_rows],
            total_rows=result.total_rows,
        )


class FailedImport(BaseModel):
    """Row that passed validation but could not be stored."""

    label: str
    error: str


class ImportCommitResponse(BaseModel):
    """Import commit result."""

    imported_count: int
    failed: list[FailedImport]


class ClienteResponse(BaseModel):
    """Client response."""

    id: str
    nome_cliente: str
    email: str | None
    cpf_cnpj: str | None
    estado: str | None
    porte_empresa: str | None
    tipo_contrato: str | None
    area: list[str] | None
    servico_prestado: list[str] | None
    produtos_vendidos: list[str] | None
    relacionamento_exterior: bool
    data_inicio: date | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ContratoResponse(BaseModel):
    """Contract response."""

    id: str
    cliente_id: str
    area_id: str | None
    servico_id: str | None
    produto_id: str | None
    tipo_contrato: str | None
    valor_contrato: float | None
    data_inicio: date | None
    data_fim: date | None
    quem_trouxe: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
