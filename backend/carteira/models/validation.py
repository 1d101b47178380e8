"""Validation-layer shapes for the strict import path."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation failure.

    ``row`` is 1-based counting the header line; row 0 marks a
    whole-file problem (``field`` is then ``"file"`` or ``"headers"``).
    """

    row: int
    field: str
    value: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating a whole CSV file."""

    errors: list[ValidationError] = field(default_factory=list)
    valid_rows: list[Any] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_by_row(self) -> dict[int, list[ValidationError]]:
        """Group errors by row number, keeping their original order."""
        grouped: dict[int, list[ValidationError]] = {}
        for error in self.errors:
            grouped.setdefault(error.row, []).append(error)
        return grouped


@dataclass(frozen=True)
class ClienteCSVRow:
    """Validated client row ready to be persisted."""

    nome_cliente: str = ""
    contato_principal: str = ""
    grupo_economico: str = ""
    cpf_cnpj: str = ""
    segmento_economico: str = ""
    area: list[str] = field(default_factory=list)
    servico_prestado: list[str] = field(default_factory=list)
    produtos_vendidos: list[str] = field(default_factory=list)
    potencial: str = ""
    nota_potencial: str = ""
    data_inicio: str = ""
    cidade: str = ""
    estado: str = ""
    pais: str = ""
    relacionamento_exterior: bool = False
    porte_empresa: str = ""
    quem_trouxe: str = ""
    tipo_contrato: str = ""
    ocupacao_cliente: str = ""
    whatsapp: str = ""
    email: str = ""
    extras: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ContratoCSVRow:
    """Validated contract row; foreign keys are set only when resolved."""

    email_cliente: str = ""
    area: str = ""
    servico: str = ""
    produto: str = ""
    tipo_contrato: str = ""
    valor_contrato: float | None = None
    data_inicio: str = ""
    data_fim: str = ""
    quem_trouxe: str = ""
    cliente_id: str | None = None
    area_id: str | None = None
    servico_id: str | None = None
    produto_id: str | None = None
    extras: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ClienteReferencia:
    """Existing client a contract row may point to."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class CatalogoReferencia:
    """Existing area, service or product, matched by name."""

    id: str
    name: str
