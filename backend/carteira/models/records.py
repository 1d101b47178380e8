"""Record types produced by the best-effort CSV parsers."""

import uuid
from dataclasses import dataclass, field
from enum import Enum


def _new_id() -> str:
    return str(uuid.uuid4())


class SchemaTag(str, Enum):
    """Known CSV layouts."""

    PORTFOLIO = "portfolio"
    KANBAN = "kanban"
    CHECKLIST = "checklist"
    ATIVOS = "ativos"
    CLIENTES = "clientes"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DISPLAY_NAMES = {
    SchemaTag.PORTFOLIO: "Portfolio de Serviços",
    SchemaTag.KANBAN: "Kanban de Tarefas",
    SchemaTag.CHECKLIST: "Checklist Focal",
    SchemaTag.ATIVOS: "Ativos",
    SchemaTag.CLIENTES: "Lista de Clientes",
    SchemaTag.UNKNOWN: "Tipo Desconhecido",
}

_DESCRIPTIONS = {
    SchemaTag.PORTFOLIO: "Áreas, serviços, produtos e oportunidades de negócio",
    SchemaTag.KANBAN: "Tarefas por categoria, responsável e prazo",
    SchemaTag.CHECKLIST: "Campos de qualificação de clientes PF/PJ",
    SchemaTag.ATIVOS: "Base completa de ativos com informações detalhadas",
    SchemaTag.CLIENTES: "Lista simples de clientes e tipos de contrato",
    SchemaTag.UNKNOWN: "Formato de arquivo não reconhecido",
}


@dataclass(frozen=True)
class PortfolioItem:
    """Sellable offering (area / service / product) with market sizing."""

    id: str = field(default_factory=_new_id)
    area: str | None = None
    servico: str | None = None
    produto: str | None = None
    categoria: str | None = None
    o_que: str | None = None
    materia: str | None = None
    para_quem: str | None = None
    tamanho_mercado: str | None = None
    meta: str | None = None
    ticket_medio: str | None = None
    valor_global: str | None = None
    como_vender: str | None = None
    quem_vai_vender: str | None = None
    quando: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class KanbanTask:
    """Task card."""

    id: str = field(default_factory=_new_id)
    categoria: str | None = None
    tarefa: str | None = None
    responsavel: str | None = None
    prazo: str | None = None
    status: str | None = None
    comentarios: str | None = None


@dataclass(frozen=True)
class ChecklistFocal:
    """Checklist entry."""

    id: str = field(default_factory=_new_id)
    tipo: str | None = None  # PF ou PJ
    campo: str | None = None
    status: str | None = None
    valor: str | None = None


@dataclass(frozen=True)
class AtivoClient:
    """
    Rich client record.

    Only ``nome_cliente`` is needed for a row to be kept; every other
    field is free text exactly as exported.
    """

    id: str = field(default_factory=_new_id)
    identificador: str | None = None
    data_entrada: str | None = None
    grupo_economico: str | None = None
    nome_cliente: str | None = None
    contato_principal: str | None = None
    area: str | None = None
    servicos_prestados: str | None = None
    produto: str | None = None
    o_que_podemos_oferecer: str | None = None
    potencial: str | None = None
    nota_potencial: str | None = None
    cliente_novo_em_2025: str | None = None
    cidade: str | None = None
    estado: str | None = None
    pais: str | None = None
    relacionamento_exterior: str | None = None
    porte_empresa: str | None = None
    pf_pj: str | None = None
    segmento_economico: str | None = None
    quem_trouxe_vlma: str | None = None
    quem_trouxe_externo: str | None = None
    focal_interno: str | None = None
    tipo_contrato: str | None = None
    cap_mensal_horas: str | None = None
    valor_mensal: str | None = None
    valor_hora: str | None = None
    ocupacao_cliente: str | None = None
    whatsapp: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class SimpleClient:
    """Client name with its contract-type label."""

    id: str = field(default_factory=_new_id)
    cliente: str | None = None
    tipo: str | None = None


ParsedRecord = PortfolioItem | KanbanTask | ChecklistFocal | AtivoClient | SimpleClient


@dataclass
class ImportedData:
    """Result envelope of the dispatching parser."""

    type: SchemaTag
    data: list[ParsedRecord] = field(default_factory=list)

    @property
    def total_imported(self) -> int:
        return len(self.data)
