"""CSV import API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carteira.config import get_settings
from carteira.core.logging import get_logger
from carteira.db.models import AreaDB, ClienteDB, ContratoDB, ProdutoDB, ServicoDB
from carteira.db.session import get_session
from carteira.models.records import ImportedData, SchemaTag
from carteira.models.validation import (
    CatalogoReferencia,
    ClienteCSVRow,
    ClienteReferencia,
    ContratoCSVRow,
    ValidationResult,
)
from carteira.schemas.imports import (
    ClienteResponse,
    ContratoResponse,
    DetectRequest,
    DetectResponse,
    FailedImport,
    ImportCommitResponse,
    ImportedDataResponse,
    ValidationErrorResponse,
    ValidationResultResponse,
)
from carteira.services.csv_detector import detect_csv_type
from carteira.services.csv_lines import decode_csv
from carteira.services.csv_parsers import parse_any_csv, parse_named_clients_csv
from carteira.services.csv_validator import (
    validate_clientes_csv,
    validate_contratos_csv_with_references,
)

router = APIRouter(prefix="/empresas/{empresa_id}", tags=["imports"])

logger = get_logger(__name__)


def _optional_date(value: str) -> date | None:
    return date.fromisoformat(value) if value else None


async def _read_csv(file: UploadFile) -> str:
    """Read an uploaded CSV file into text."""
    content = await file.read()
    if len(content) > get_settings().max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="CSV file too large",
        )
    return decode_csv(content)


def _raise_invalid(result: ValidationResult) -> None:
    raise HTTPException(
        status_code=400,
        detail={
            "message": f"Arquivo contém {len(result.errors)} erro(s)",
            "errors": [
                ValidationErrorResponse.from_error(e).model_dump() for e in result.errors
            ],
        },
    )


async def _load_references(
    session: AsyncSession, empresa_id: str
) -> tuple[
    list[ClienteReferencia],
    list[CatalogoReferencia],
    list[CatalogoReferencia],
    list[CatalogoReferencia],
]:
    """Snapshot of the company's clients and catalog used to resolve contract rows."""
    clientes = (
        await session.execute(
            select(ClienteDB.id, ClienteDB.email)
            .where(ClienteDB.empresa_id == empresa_id)
            .order_by(ClienteDB.created_at)
        )
    ).all()

    catalogs = []
    for model in (AreaDB, ServicoDB, ProdutoDB):
        rows = (
            await session.execute(
                select(model.id, model.name)
                .where(model.empresa_id == empresa_id)
                .order_by(model.created_at)
            )
        ).all()
        catalogs.append([CatalogoReferencia(id=row.id, name=row.name) for row in rows])

    areas, servicos, produtos = catalogs
    return (
        [ClienteReferencia(id=row.id, email=row.email) for row in clientes],
        areas,
        servicos,
        produtos,
    )


def _cliente_to_db(empresa_id: str, row: ClienteCSVRow) -> ClienteDB:
    return ClienteDB(
        empresa_id=empresa_id,
        nome_cliente=row.nome_cliente,
        contato_principal=row.contato_principal or None,
        grupo_economico=row.grupo_economico or None,
        cpf_cnpj=row.cpf_cnpj or None,
        segmento_economico=row.segmento_economico or None,
        area=row.area or None,
        servico_prestado=row.servico_prestado or None,
        produtos_vendidos=row.produtos_vendidos or None,
        potencial=row.potencial or None,
        nota_potencial=row.nota_potencial or None,
        data_inicio=_optional_date(row.data_inicio),
        cidade=row.cidade or None,
        estado=row.estado.upper() or None,
        pais=row.pais or None,
        relacionamento_exterior=row.relacionamento_exterior,
        porte_empresa=row.porte_empresa or None,
        quem_trouxe=row.quem_trouxe or None,
        tipo_contrato=row.tipo_contrato or None,
        ocupacao_cliente=row.ocupacao_cliente or None,
        whatsapp=row.whatsapp or None,
        email=row.email or None,
    )


def _contrato_to_db(empresa_id: str, row: ContratoCSVRow) -> ContratoDB:
    return ContratoDB(
        empresa_id=empresa_id,
        cliente_id=row.cliente_id,
        area_id=row.area_id,
        servico_id=row.servico_id,
        produto_id=row.produto_id,
        tipo_contrato=row.tipo_contrato or None,
        valor_contrato=row.valor_contrato,
        data_inicio=_optional_date(row.data_inicio),
        data_fim=_optional_date(row.data_fim),
        quem_trouxe=row.quem_trouxe or None,
    )


async def _commit_each(
    session: AsyncSession, items: list[tuple[str, ClienteDB | ContratoDB]]
) -> ImportCommitResponse:
    """Store rows one at a time so a failing row does not discard the others."""
    imported_count = 0
    failed: list[FailedImport] = []

    for label, item in items:
        session.add(item)
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.warning("import_row_failed", label=label, error=str(e))
            failed.append(FailedImport(label=label, error="Falha ao salvar no banco de dados"))
            continue
        imported_count += 1

    return ImportCommitResponse(imported_count=imported_count, failed=failed)


@router.post("/imports/detect", response_model=DetectResponse)
async def detect_layout(empresa_id: str, request: DetectRequest) -> DetectResponse:
    """Classify a CSV file from its header cells."""
    return DetectResponse.from_tag(detect_csv_type(request.headers))


@router.post("/imports/parse", response_model=ImportedDataResponse)
async def parse_file(empresa_id: str, file: UploadFile) -> ImportedDataResponse:
    """
    Parse a CSV file of any known layout.

    Unusable files are not an error: ``total_imported`` is 0.
    """
    text = await _read_csv(file)
    if not text.strip():
        raise HTTPException(status_code=400, detail="Empty CSV file")
    return ImportedDataResponse.from_imported(parse_any_csv(text))


@router.post("/imports/clientes/parse", response_model=ImportedDataResponse)
async def parse_client_export(empresa_id: str, file: UploadFile) -> ImportedDataResponse:
    """Parse a comma-separated client export whose columns are matched by header name."""
    text = await _read_csv(file)
    if not text.strip():
        raise HTTPException(status_code=400, detail="Empty CSV file")
    clients = parse_named_clients_csv(text)
    logger.info("client_export_parsed", empresa_id=empresa_id, total_imported=len(clients))
    return ImportedDataResponse.from_imported(ImportedData(type=SchemaTag.ATIVOS, data=clients))


@router.post("/imports/clientes/validate", response_model=ValidationResultResponse)
async def validate_clientes(empresa_id: str, file: UploadFile) -> ValidationResultResponse:
    """Validate a client import file without storing anything."""
    text = await _read_csv(file)
    return ValidationResultResponse.from_result(validate_clientes_csv(text))


@router.post("/imports/clientes", response_model=ImportCommitResponse)
async def import_clientes(
    empresa_id: str,
    file: UploadFile,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ImportCommitResponse:
    """
    Validate and import clients.

    Nothing is stored unless the whole file is valid.
    """
    result = validate_clientes_csv(await _read_csv(file))
    if not result.is_valid:
        _raise_invalid(result)

    items = [
        (row.nome_cliente or f"Cliente {i}", _cliente_to_db(empresa_id, row))
        for i, row in enumerate(result.valid_rows, start=1)
    ]
    response = await _commit_each(session, items)
    logger.info(
        "clientes_imported",
        empresa_id=empresa_id,
        imported=response.imported_count,
        failed=len(response.failed),
    )
    return response


@router.post("/imports/contratos/validate", response_model=ValidationResultResponse)
async def validate_contratos(
    empresa_id: str,
    file: UploadFile,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ValidationResultResponse:
    """Validate a contract import file against the company's clients and catalog."""
    text = await _read_csv(file)
    references = await _load_references(session, empresa_id)
    return ValidationResultResponse.from_result(
        validate_contratos_csv_with_references(text, *references)
    )


@router.post("/imports/contratos", response_model=ImportCommitResponse)
async def import_contratos(
    empresa_id: str,
    file: UploadFile,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ImportCommitResponse:
    """
    Validate and import contracts.

    Client, area, service and product references are resolved once for
    the whole batch.
    """
    text = await _read_csv(file)
    references = await _load_references(session, empresa_id)
    result = validate_contratos_csv_with_references(text, *references)
    if not result.is_valid:
        _raise_invalid(result)

    items = [
        (row.email_cliente or f"Contrato {i}", _contrato_to_db(empresa_id, row))
        for i, row in enumerate(result.valid_rows, start=1)
    ]
    response = await _commit_each(session, items)
    logger.info(
        "contratos_imported",
        empresa_id=empresa_id,
        imported=response.imported_count,
        failed=len(response.failed),
    )
    return response


@router.get("/clientes", response_model=list[ClienteResponse])
async def list_clientes(
    empresa_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ClienteResponse]:
    """List the company's clients."""
    result = await session.execute(
        select(ClienteDB).where(ClienteDB.empresa_id == empresa_id).order_by(ClienteDB.created_at)
    )
    return [ClienteResponse.model_validate(cliente) for cliente in result.scalars().all()]


@router.get("/contratos", response_model=list[ContratoResponse])
async def list_contratos(
    empresa_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ContratoResponse]:
    """List the company's contracts."""
    result = await session.execute(
        select(ContratoDB)
        .where(ContratoDB.empresa_id == empresa_id)
        .order_by(ContratoDB.created_at)
    )
    return [ContratoResponse.model_validate(contrato) for contrato in result.scalars().all()]
