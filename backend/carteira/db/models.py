"""SQLAlchemy ORM models."""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carteira.db.base import Base


def utc_now() -> datetime:
    """Timezone-aware UTC now for defaults."""
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


class AreaDB(Base):
    """Business area owned by a company."""

    __tablename__ = "areas"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    empresa_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class ServicoDB(Base):
    """Service offered within an area."""

    __tablename__ = "servicos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    empresa_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    area_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("areas.id", ondelete="SET NULL")
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class ProdutoDB(Base):
    """Product sold under a service."""

    __tablename__ = "produtos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    empresa_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    servico_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("servicos.id", ondelete="SET NULL")
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class ClienteDB(Base):
    """Client table."""

    __tablename__ = "clientes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    empresa_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)

    nome_cliente: Mapped[str] = mapped_column(String(255), nullable=False)
    contato_principal: Mapped[str | None] = mapped_column(String(255))
    grupo_economico: Mapped[str | None] = mapped_column(String(255))
    cpf_cnpj: Mapped[str | None] = mapped_column(String(20))
    segmento_economico: Mapped[str | None] = mapped_column(String(100))

    area: Mapped[list[str] | None] = mapped_column(JSON)
    servico_prestado: Mapped[list[str] | None] = mapped_column(JSON)
    produtos_vendidos: Mapped[list[str] | None] = mapped_column(JSON)

    potencial: Mapped[str | None] = mapped_column(String(50))
    nota_potencial: Mapped[str | None] = mapped_column(String(2))
    data_inicio: Mapped[date | None] = mapped_column(Date)
    cidade: Mapped[str | None] = mapped_column(String(100))
    estado: Mapped[str | None] = mapped_column(String(2))
    pais: Mapped[str | None] = mapped_column(String(100))
    relacionamento_exterior: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    porte_empresa: Mapped[str | None] = mapped_column(String(50))
    quem_trouxe: Mapped[str | None] = mapped_column(String(255))
    tipo_contrato: Mapped[str | None] = mapped_column(String(50))
    ocupacao_cliente: Mapped[str | None] = mapped_column(Text)
    whatsapp: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255), index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    contratos: Mapped[list["ContratoDB"]] = relationship(
        back_populates="cliente",
        cascade="all, delete-orphan",
    )


class ContratoDB(Base):
    """Contract table."""

    __tablename__ = "contratos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    empresa_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    cliente_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("clientes.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    area_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("areas.id", ondelete="SET NULL")
    )
    servico_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("servicos.id", ondelete="SET NULL")
    )
    produto_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("produtos.id", ondelete="SET NULL")
    )

    tipo_contrato: Mapped[str | None] = mapped_column(String(50))
    valor_contrato: Mapped[float | None] = mapped_column(Float)
    data_inicio: Mapped[date | None] = mapped_column(Date)
    data_fim: Mapped[date | None] = mapped_column(Date)
    quem_trouxe: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    cliente: Mapped[ClienteDB] = relationship(back_populates="contratos")
