"""
Best-effort CSV parsers, one per known layout.

Columns are mapped by position, not by header name. Short or empty rows
are skipped silently: callers only learn that nothing usable was found
through ``ImportedData.total_imported == 0``.
"""

from collections.abc import Callable, Sequence
from typing import Any

from carteira.core.logging import get_logger
from carteira.models.records import (
    AtivoClient,
    ChecklistFocal,
    ImportedData,
    KanbanTask,
    ParsedRecord,
    PortfolioItem,
    SchemaTag,
    SimpleClient,
)
from carteira.services.csv_detector import detect_csv_type
from carteira.services.csv_lines import non_blank_lines, split_csv_line, strip_quotes

logger = get_logger(__name__)

SCHEMA_DELIMITER = ";"
SIMPLE_CLIENT_DELIMITER = ","

# Column index -> field name. ``None`` marks a column that is not imported.
PORTFOLIO_COLUMNS: tuple[str | None, ...] = (
    "area",
    "servico",
    "produto",
    "categoria",
    "o_que",
    "materia",
    "para_quem",
    "tamanho_mercado",
    "meta",
    "ticket_medio",
    "valor_global",
    "como_vender",
    "quem_vai_vender",
    "quando",
    "status",
)

KANBAN_COLUMNS: tuple[str | None, ...] = (
    "categoria",
    "tarefa",
    "responsavel",
    "prazo",
    "status",
    "comentarios",
)

CHECKLIST_COLUMNS: tuple[str | None, ...] = ("campo", "status", "valor")

ATIVOS_COLUMNS: tuple[str | None, ...] = (
    "identificador",
    "data_entrada",
    "grupo_economico",
    "nome_cliente",
    "contato_principal",
    "area",
    "servicos_prestados",
    "produto",
    "o_que_podemos_oferecer",
    "potencial",
    "nota_potencial",
    "cliente_novo_em_2025",
    "cidade",
    "estado",
    "pais",
    "relacionamento_exterior",
    "porte_empresa",
    "pf_pj",
    "segmento_economico",
    "quem_trouxe_vlma",
    "quem_trouxe_externo",
    "focal_interno",
    "tipo_contrato",
    "cap_mensal_horas",
    "valor_mensal",
    "valor_hora",
    "ocupacao_cliente",
    "whatsapp",
    "email",
)

SIMPLE_CLIENT_COLUMNS: tuple[str | None, ...] = (None, "cliente", "tipo")

# Display headers of the full client export, matched by name. Exports from the
# shared spreadsheet carry a " (Douglas)" suffix on some columns; both forms map.
NAMED_CLIENT_HEADERS: dict[str, str] = {
    "Identificador": "identificador",
    "Data de Entrada": "data_entrada",
    "Grupo Econômico": "grupo_economico",
    "Nome do Cliente": "nome_cliente",
    "Contato Principal": "contato_principal",
    "Área": "area",
    "Serviços Prestados": "servicos_prestados",
    "Produto": "produto",
    "O que podemos oferecer": "o_que_podemos_oferecer",
    "Potencial": "potencial",
    "Potencial (Douglas)": "potencial",
    "Nota Potencial": "nota_potencial",
    "Cliente Novo em 2025": "cliente_novo_em_2025",
    "Cidade": "cidade",
    "Estado": "estado",
    "País": "pais",
    "Relacionamento com Exterior": "relacionamento_exterior",
    "Porte da Empresa": "porte_empresa",
    "Porte da Empresa (Douglas)": "porte_empresa",
    "PF/PJ": "pf_pj",
    "Segmento Econômico/ Ocupação": "segmento_economico",
    "Quem trouxe (VLMA)": "quem_trouxe_vlma",
    "Quem trouxe (VLMA) (Douglas)": "quem_trouxe_vlma",
    "Quem trouxe (Externo)": "quem_trouxe_externo",
    "Quem trouxe (Externo) (Douglas)": "quem_trouxe_externo",
    "Focal Interno": "focal_interno",
    "Focal Interno (Douglas)": "focal_interno",
    "Tipo do contrato": "tipo_contrato",
    "Cap mensal de horas": "cap_mensal_horas",
    "Valor mensal": "valor_mensal",
    "Valor da hora": "valor_hora",
    "Ocupação do nosso cliente": "ocupacao_cliente",
    "Ocupação do nosso cliente (Douglas)": "ocupacao_cliente",
    "Whatsapp": "whatsapp",
    "E-mail": "email",
}


def map_columns(values: Sequence[str], columns: Sequence[str | None]) -> dict[str, Any]:
    """Map positional values onto field names; empty cells become ``None``."""
    mapped: dict[str, Any] = {}
    for index, field_name in enumerate(columns):
        if field_name is None:
            continue
        value = strip_quotes(values[index]) if index < len(values) else ""
        mapped[field_name] = value or None
    return mapped


def _data_rows(csv_content: str, skip: int, delimiter: str = SCHEMA_DELIMITER) -> list[list[str]]:
    return [split_csv_line(line, delimiter) for line in non_blank_lines(csv_content)[skip:]]


def _has_content(values: Sequence[str]) -> bool:
    return any(strip_quotes(value) for value in values)


def parse_portfolio_csv(csv_content: str) -> list[PortfolioItem]:
    """Parse a portfolio sheet; the first four lines are a fixed header block."""
    items: list[PortfolioItem] = []
    for values in _data_rows(csv_content, skip=4):
        if len(values) < 3 or not _has_content(values[:3]):
            continue
        items.append(PortfolioItem(**map_columns(values, PORTFOLIO_COLUMNS)))
    return items


def parse_kanban_csv(csv_content: str) -> list[KanbanTask]:
    """Parse a task board export."""
    tasks: list[KanbanTask] = []
    for values in _data_rows(csv_content, skip=1):
        task = KanbanTask(**map_columns(values, KANBAN_COLUMNS))
        if task.tarefa or task.categoria:
            tasks.append(task)
    return tasks


def parse_checklist_csv(csv_content: str) -> list[ChecklistFocal]:
    """Parse a qualification checklist; every line is data."""
    items: list[ChecklistFocal] = []
    for values in _data_rows(csv_content, skip=0):
        item = ChecklistFocal(**map_columns(values, CHECKLIST_COLUMNS))
        if item.campo:
            items.append(item)
    return items


def parse_ativos_csv(csv_content: str) -> list[AtivoClient]:
    """Parse the 29-column client base; rows need a client name in column 3."""
    clients: list[AtivoClient] = []
    for values in _data_rows(csv_content, skip=1):
        if len(values) < 4 or not strip_quotes(values[3]):
            continue
        clients.append(AtivoClient(**map_columns(values, ATIVOS_COLUMNS)))
    return clients


def parse_simple_clients_csv(csv_content: str) -> list[SimpleClient]:
    """Parse the two-column client list (comma separated, two header lines)."""
    clients: list[SimpleClient] = []
    for values in _data_rows(csv_content, skip=2, delimiter=SIMPLE_CLIENT_DELIMITER):
        if len(values) < 2 or not strip_quotes(values[1]):
            continue
        clients.append(SimpleClient(**map_columns(values, SIMPLE_CLIENT_COLUMNS)))
    return clients


def parse_named_clients_csv(csv_content: str) -> list[AtivoClient]:
    """
    Parse a comma-separated client export by header name.

    Unknown headers are ignored, rows shorter than the header are skipped
    and only rows with a client name are returned.
    """
    lines = csv_content.split("\n")
    headers = [strip_quotes(h) for h in split_csv_line(lines[0], SIMPLE_CLIENT_DELIMITER)]

    clients: list[AtivoClient] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = split_csv_line(line, SIMPLE_CLIENT_DELIMITER)
        if len(values) < len(headers):
            continue

        fields: dict[str, str] = {}
        for header, raw in zip(headers, values):
            field_name = NAMED_CLIENT_HEADERS.get(header)
            value = strip_quotes(raw)
            if field_name and value:
                fields[field_name] = value

        if fields.get("nome_cliente"):
            clients.append(AtivoClient(**fields))
    return clients


SCHEMA_PARSERS: dict[SchemaTag, Callable[[str], Sequence[ParsedRecord]]] = {
    SchemaTag.PORTFOLIO: parse_portfolio_csv,
    SchemaTag.KANBAN: parse_kanban_csv,
    SchemaTag.CHECKLIST: parse_checklist_csv,
    SchemaTag.ATIVOS: parse_ativos_csv,
    SchemaTag.CLIENTES: parse_simple_clients_csv,
}


def read_header(csv_content: str) -> list[str]:
    """Header cells of the first raw line, split on the schema delimiter."""
    first_line = csv_content.split("\n", 1)[0]
    return [strip_quotes(cell) for cell in split_csv_line(first_line, SCHEMA_DELIMITER)]


def _safe_parse(tag: SchemaTag, csv_content: str) -> list[ParsedRecord]:
    try:
        return list(SCHEMA_PARSERS[tag](csv_content))
    except Exception:
        logger.exception("csv_parse_failed", type=tag.value)
        return []


def parse_any_csv(csv_content: str) -> ImportedData:
    """
    Detect the layout of a CSV file and parse it with the matching parser.

    Files whose header matches no known layout are tried as the rich
    client base, the most common unlabeled export. Never raises.
    """
    tag = detect_csv_type(read_header(csv_content))

    if tag is SchemaTag.UNKNOWN:
        data = _safe_parse(SchemaTag.ATIVOS, csv_content)
        result = ImportedData(type=SchemaTag.ATIVOS if data else SchemaTag.UNKNOWN, data=data)
    else:
        result = ImportedData(type=tag, data=_safe_parse(tag, csv_content))

    logger.info(
        "csv_parsed",
        detected=tag.value,
        type=result.type.value,
        total_imported=result.total_imported,
    )
    return result
