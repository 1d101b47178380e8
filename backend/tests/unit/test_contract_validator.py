"""Unit tests for contract validation against existing records."""

import pytest

from carteira.models.validation import CatalogoReferencia, ClienteReferencia
from carteira.services.csv_validator import validate_contratos_csv_with_references

HEADER = "email_cliente,area,servico,produto,tipo_contrato,valor_contrato"


@pytest.fixture
def clientes():
    return [
        ClienteReferencia(id="cli-1", email="a@acme.com"),
        ClienteReferencia(id="cli-2", email="a@acme.com"),
        ClienteReferencia(id="cli-3", email=None),
    ]


@pytest.fixture
def catalogo():
    return {
        "areas": [CatalogoReferencia(id="area-1", name="Tributário")],
        "servicos": [CatalogoReferencia(id="serv-1", name="Consultoria")],
        "produtos": [
            CatalogoReferencia(id="prod-1", name="Planejamento"),
            CatalogoReferencia(id="prod-2", name="Planejamento"),
        ],
    }


class TestContratoReferenceValidator:
    """Tests for validate_contratos_csv_with_references."""

    def test_resolves_all_references(self, clientes, catalogo):
        """Cliente e catálogo são resolvidos para ids"""
        content = f"{HEADER}\na@acme.com,Tributário,Consultoria,Planejamento,projeto,1000"
        result = validate_contratos_csv_with_references(content, clientes, **catalogo)

        assert result.is_valid is True
        row = result.valid_rows[0]
        assert row.cliente_id == "cli-1"
        assert row.area_id == "area-1"
        assert row.servico_id == "serv-1"
        assert row.produto_id == "prod-1"
        assert row.valor_contrato == 1000.0

    def test_unknown_client_email(self, clientes):
        """E-mail sem cliente cadastrado é erro"""
        content = f"{HEADER}\nninguem@acme.com,,,,,"
        result = validate_contratos_csv_with_references(content, clientes)

        assert result.valid_rows == []
        assert len(result.errors) == 1
        error = result.errors[0]
        assert (error.row, error.field, error.value) == (2, "email_cliente", "ninguem@acme.com")
        assert error.message == (
            'Cliente com e-mail "ninguem@acme.com" não encontrado. Cadastre o cliente primeiro.'
        )

    def test_malformed_email_reports_format_only(self, clientes):
        """E-mail mal formado não gera erro de cliente inexistente"""
        result = validate_contratos_csv_with_references(f"{HEADER}\nsem-arroba,,,,,", clientes)

        assert len(result.errors) == 1
        assert "formato válido" in result.errors[0].message

    def test_unmatched_catalog_name_leaves_foreign_key_empty(self, clientes, catalogo):
        """Nome de área, serviço ou produto desconhecido não falha a linha"""
        content = f"{HEADER}\na@acme.com,Trabalhista,Consultoria,Inexistente,,"
        result = validate_contratos_csv_with_references(content, clientes, **catalogo)

        assert result.is_valid is True
        row = result.valid_rows[0]
        assert row.area == "Trabalhista"
        assert row.area_id is None
        assert row.servico_id == "serv-1"
        assert row.produto_id is None

    def test_empty_catalog_cells(self, clientes, catalogo):
        """Células vazias deixam as chaves em None"""
        result = validate_contratos_csv_with_references(
            f"{HEADER}\na@acme.com,,,,,", clientes, **catalogo
        )

        row = result.valid_rows[0]
        assert (row.area_id, row.servico_id, row.produto_id) == (None, None, None)

    def test_field_errors_still_apply(self, clientes):
        """Validações de campo continuam valendo"""
        content = f"{HEADER}\na@acme.com,,,,mensal,abc"
        result = validate_contratos_csv_with_references(content, clientes)

        assert [e.field for e in result.errors] == ["tipo_contrato", "valor_contrato"]

    def test_mixed_rows(self, clientes):
        """Linhas válidas e inválidas são contadas separadamente"""
        content = f"{HEADER}\na@acme.com,,,,,\nb@beta.com,,,,,\na@acme.com,,,,horas,"
        result = validate_contratos_csv_with_references(content, clientes)

        assert result.total_rows == 3
        assert len(result.valid_rows) == 2
        assert [e.row for e in result.errors] == [3]
