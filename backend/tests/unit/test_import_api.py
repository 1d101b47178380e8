"""Tests for the CSV import API."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from carteira.db.models import AreaDB, ClienteDB

EMPRESA = "empresa-1"
BASE_URL = f"/api/v1/empresas/{EMPRESA}"


def csv_upload(content: str | bytes) -> dict:
    if isinstance(content, str):
        content = content.encode("utf-8")
    return {"file": ("dados.csv", content, "text/csv")}


async def seed_cliente(
    session_factory: async_sessionmaker[AsyncSession],
    email: str,
    empresa_id: str = EMPRESA,
) -> str:
    async with session_factory() as session:
        cliente = ClienteDB(empresa_id=empresa_id, nome_cliente="Acme", email=email)
        session.add(cliente)
        await session.commit()
        return cliente.id


class TestHealth:
    """Tests for the health endpoint."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        """Health check responde"""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestDetectEndpoint:
    """Tests for POST /imports/detect."""

    @pytest.mark.asyncio
    async def test_detects_kanban(self, client: AsyncClient):
        """Cabeçalhos de kanban são detectados"""
        response = await client.post(
            f"{BASE_URL}/imports/detect", json={"headers": ["Categoria", "Tarefa"]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "kanban"
        assert data["display_name"] == "Kanban de Tarefas"

    @pytest.mark.asyncio
    async def test_unknown(self, client: AsyncClient):
        """Cabeçalhos desconhecidos"""
        response = await client.post(f"{BASE_URL}/imports/detect", json={"headers": ["x"]})

        assert response.json()["type"] == "unknown"


class TestParseEndpoint:
    """Tests for POST /imports/parse."""

    @pytest.mark.asyncio
    async def test_parses_simple_client_list(self, client: AsyncClient):
        """Lista simples de clientes é lida"""
        content = ",Cliente,Tipo\n,,\n1,Acme,Fixo Mensal\n"
        response = await client.post(f"{BASE_URL}/imports/parse", files=csv_upload(content))

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "clientes"
        assert data["total_imported"] == 1
        assert data["data"][0]["cliente"] == "Acme"

    @pytest.mark.asyncio
    async def test_cp1252_upload(self, client: AsyncClient):
        """Arquivos em cp1252 são aceitos"""
        content = "Categoria;Tarefa;Responsável\nVendas;Revisão;Ana\n".encode("cp1252")
        response = await client.post(f"{BASE_URL}/imports/parse", files=csv_upload(content))

        data = response.json()
        assert data["type"] == "kanban"
        assert data["data"][0]["tarefa"] == "Revisão"

    @pytest.mark.asyncio
    async def test_empty_file(self, client: AsyncClient):
        """Arquivo vazio é rejeitado"""
        response = await client.post(f"{BASE_URL}/imports/parse", files=csv_upload("  \n"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Empty CSV file"


class TestClientExportEndpoint:
    """Tests for POST /imports/clientes/parse."""

    @pytest.mark.asyncio
    async def test_parses_export_by_header_name(self, client: AsyncClient):
        """Exportação de clientes é lida pelo nome das colunas"""
        content = "Nome do Cliente,Potencial (Douglas),E-mail\nAcme,Alto,a@acme.com\n,,\n"
        response = await client.post(
            f"{BASE_URL}/imports/clientes/parse", files=csv_upload(content)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "ativos"
        assert data["total_imported"] == 1
        assert data["data"][0]["potencial"] == "Alto"
        assert data["data"][0]["email"] == "a@acme.com"

    @pytest.mark.asyncio
    async def test_empty_file(self, client: AsyncClient):
        """Arquivo vazio é rejeitado"""
        response = await client.post(
            f"{BASE_URL}/imports/clientes/parse", files=csv_upload("\n")
        )

        assert response.status_code == 400


class TestClientesEndpoints:
    """Tests for client validation and import."""

    @pytest.mark.asyncio
    async def test_validate_reports_errors(self, client: AsyncClient):
        """Validação devolve erros por linha"""
        response = await client.post(
            f"{BASE_URL}/imports/clientes/validate",
            files=csv_upload('nome_cliente,estado\n"Acme Ltda","XX"'),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert data["total_rows"] == 1
        assert data["errors"][0]["row"] == 2
        assert data["errors"][0]["field"] == "estado"

    @pytest.mark.asyncio
    async def test_import_rejects_invalid_file(self, client: AsyncClient):
        """Arquivo com erros não importa nada"""
        content = "nome_cliente,estado\nAcme,SP\nBeta,XX\n"
        response = await client.post(f"{BASE_URL}/imports/clientes", files=csv_upload(content))

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["message"] == "Arquivo contém 1 erro(s)"
        assert detail["errors"][0]["row"] == 3

        listed = await client.get(f"{BASE_URL}/clientes")
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_import_and_list(self, client: AsyncClient):
        """Clientes válidos são gravados e listados"""
        content = (
            "nome_cliente,email,estado,area,relacionamento_exterior,data_inicio\n"
            "Acme,contato@acme.com,sp,Vendas|Suporte,true,2024-03-01\n"
            "Beta,,,,,\n"
        )
        response = await client.post(f"{BASE_URL}/imports/clientes", files=csv_upload(content))

        assert response.status_code == 200
        assert response.json() == {"imported_count": 2, "failed": []}

        listed = (await client.get(f"{BASE_URL}/clientes")).json()
        acme = next(c for c in listed if c["nome_cliente"] == "Acme")
        assert acme["estado"] == "SP"
        assert acme["area"] == ["Vendas", "Suporte"]
        assert acme["relacionamento_exterior"] is True
        assert acme["data_inicio"] == "2024-03-01"

        other = await client.get("/api/v1/empresas/outra/clientes")
        assert other.json() == []


class TestContratosEndpoints:
    """Tests for contract validation and import."""

    @pytest.mark.asyncio
    async def test_validate_unknown_client(self, client: AsyncClient):
        """Contrato de cliente inexistente é erro"""
        response = await client.post(
            f"{BASE_URL}/imports/contratos/validate",
            files=csv_upload("email_cliente,valor_contrato\nninguem@acme.com,10"),
        )

        data = response.json()
        assert data["is_valid"] is False
        assert "não encontrado" in data["errors"][0]["message"]

    @pytest.mark.asyncio
    async def test_clients_of_other_companies_are_not_referenced(
        self, client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
    ):
        """Clientes de outra empresa não são encontrados"""
        await seed_cliente(session_factory, "a@acme.com", empresa_id="outra")

        response = await client.post(
            f"{BASE_URL}/imports/contratos/validate",
            files=csv_upload("email_cliente\na@acme.com"),
        )

        assert response.json()["is_valid"] is False

    @pytest.mark.asyncio
    async def test_import_resolves_references(
        self, client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
    ):
        """Contratos são gravados com as chaves resolvidas"""
        cliente_id = await seed_cliente(session_factory, "a@acme.com")
        async with session_factory() as session:
            area = AreaDB(empresa_id=EMPRESA, name="Tributário")
            session.add(area)
            await session.commit()
            area_id = area.id

        content = (
            "email_cliente,area,produto,tipo_contrato,valor_contrato,data_inicio\n"
            "a@acme.com,Tributário,Desconhecido,projeto,15000.00,2024-01-01\n"
        )
        response = await client.post(f"{BASE_URL}/imports/contratos", files=csv_upload(content))

        assert response.status_code == 200
        assert response.json()["imported_count"] == 1

        contratos = (await client.get(f"{BASE_URL}/contratos")).json()
        assert len(contratos) == 1
        assert contratos[0]["cliente_id"] == cliente_id
        assert contratos[0]["area_id"] == area_id
        assert contratos[0]["produto_id"] is None
        assert contratos[0]["valor_contrato"] == 15000.0
        assert contratos[0]["data_inicio"] == "2024-01-01"

    @pytest.mark.asyncio
    async def test_import_rejects_invalid_file(self, client: AsyncClient):
        """Arquivo com erros não grava contratos"""
        response = await client.post(
            f"{BASE_URL}/imports/contratos",
            files=csv_upload("email_cliente\nninguem@acme.com"),
        )

        assert response.status_code == 400
        assert (await client.get(f"{BASE_URL}/contratos")).json() == []
