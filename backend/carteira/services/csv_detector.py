"""Classify a CSV file into one of the known layouts from its header row."""

import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from carteira.models.records import SchemaTag

HeaderPredicate = Callable[[list[str]], bool]


def normalize_header(header: str) -> str:
    """Trim and lowercase a header, keeping accented characters."""
    return unicodedata.normalize("NFC", header).strip().lower()


def _any_contains(headers: list[str], *needles: str) -> bool:
    return any(needle in header for header in headers for needle in needles)


def _all_contain(headers: list[str], *needles: str) -> bool:
    return all(_any_contains(headers, needle) for needle in needles)


def _is_portfolio(headers: list[str]) -> bool:
    return _any_contains(headers, "área", "serviço", "produto") and _any_contains(
        headers, "categoria"
    )


def _is_kanban(headers: list[str]) -> bool:
    return _all_contain(headers, "categoria", "tarefa") or _all_contain(
        headers, "responsável", "prazo"
    )


def _is_checklist(headers: list[str]) -> bool:
    return (
        _all_contain(headers, "form", "qualificação")
        or _any_contains(headers, "script")
        or ("pf" in headers and "pj" in headers)
    )


def _is_ativos(headers: list[str]) -> bool:
    return _all_contain(headers, "identificador", "grupo econômico", "nome do cliente")


def _is_clientes(headers: list[str]) -> bool:
    return _all_contain(headers, "cliente", "tipo") and len(headers) <= 5


@dataclass(frozen=True)
class DetectionRule:
    tag: SchemaTag
    matches: HeaderPredicate


# Evaluated in order; the first matching rule wins.
DETECTION_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(SchemaTag.PORTFOLIO, _is_portfolio),
    DetectionRule(SchemaTag.KANBAN, _is_kanban),
    DetectionRule(SchemaTag.CHECKLIST, _is_checklist),
    DetectionRule(SchemaTag.ATIVOS, _is_ativos),
    DetectionRule(SchemaTag.CLIENTES, _is_clientes),
)


def detect_csv_type(
    headers: Sequence[str], rules: Sequence[DetectionRule] = DETECTION_RULES
) -> SchemaTag:
    """
    Detect the layout of a CSV file from its header cells.

    Args:
        headers: Header cells in file order
        rules: Ordered detection rules

    Returns:
        The tag of the first matching rule, or ``SchemaTag.UNKNOWN``
    """
    normalized = [normalize_header(header) for header in headers]
    for rule in rules:
        if rule.matches(normalized):
            return rule.tag
    return SchemaTag.UNKNOWN
