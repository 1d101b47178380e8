"""create clientes, contratos and catalog tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _catalog_table(name: str, parent: tuple[str, str] | None = None) -> None:
    columns = [
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("empresa_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    ]
    if parent is not None:
        column, target = parent
        columns.append(
            sa.Column(column, sa.String(length=36), sa.ForeignKey(target, ondelete="SET NULL"))
        )
    op.create_table(name, *columns)
    op.create_index(f"ix_{name}_empresa_id", name, ["empresa_id"])


def upgrade() -> None:
    _catalog_table("areas")
    _catalog_table("servicos", ("area_id", "areas.id"))
    _catalog_table("produtos", ("servico_id", "servicos.id"))

    op.create_table(
        "clientes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("empresa_id", sa.String(length=36), nullable=False),
        sa.Column("nome_cliente", sa.String(length=255), nullable=False),
        sa.Column("contato_principal", sa.String(length=255), nullable=True),
        sa.Column("grupo_economico", sa.String(length=255), nullable=True),
        sa.Column("cpf_cnpj", sa.String(length=20), nullable=True),
        sa.Column("segmento_economico", sa.String(length=100), nullable=True),
        sa.Column("area", sa.JSON(), nullable=True),
        sa.Column("servico_prestado", sa.JSON(), nullable=True),
        sa.Column("produtos_vendidos", sa.JSON(), nullable=True),
        sa.Column("potencial", sa.String(length=50), nullable=True),
        sa.Column("nota_potencial", sa.String(length=2), nullable=True),
        sa.Column("data_inicio", sa.Date(), nullable=True),
        sa.Column("cidade", sa.String(length=100), nullable=True),
        sa.Column("estado", sa.String(length=2), nullable=True),
        sa.Column("pais", sa.String(length=100), nullable=True),
        sa.Column(
            "relacionamento_exterior", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("porte_empresa", sa.String(length=50), nullable=True),
        sa.Column("quem_trouxe", sa.String(length=255), nullable=True),
        sa.Column("tipo_contrato", sa.String(length=50), nullable=True),
        sa.Column("ocupacao_cliente", sa.Text(), nullable=True),
        sa.Column("whatsapp", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_clientes_empresa_id", "clientes", ["empresa_id"])
    op.create_index("ix_clientes_email", "clientes", ["email"])

    op.create_table(
        "contratos",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("empresa_id", sa.String(length=36), nullable=False),
        sa.Column(
            "cliente_id",
            sa.String(length=36),
            sa.ForeignKey("clientes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "area_id", sa.String(length=36), sa.ForeignKey("areas.id", ondelete="SET NULL")
        ),
        sa.Column(
            "servico_id",
            sa.String(length=36),
            sa.ForeignKey("servicos.id", ondelete="SET NULL"),
        ),
        sa.Column(
            "produto_id",
            sa.String(length=36),
            sa.ForeignKey("produtos.id", ondelete="SET NULL"),
        ),
        sa.Column("tipo_contrato", sa.String(length=50), nullable=True),
        sa.Column("valor_contrato", sa.Float(), nullable=True),
        sa.Column("data_inicio", sa.Date(), nullable=True),
        sa.Column("data_fim", sa.Date(), nullable=True),
        sa.Column("quem_trouxe", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_contratos_empresa_id", "contratos", ["empresa_id"])
    op.create_index("ix_contratos_cliente_id", "contratos", ["cliente_id"])


def downgrade() -> None:
    op.drop_index("ix_contratos_cliente_id", table_name="contratos")
    op.drop_index("ix_contratos_empresa_id", table_name="contratos")
    op.drop_table("contratos")
    op.drop_index("ix_clientes_email", table_name="clientes")
    op.drop_index("ix_clientes_empresa_id", table_name="clientes")
    op.drop_table("clientes")
    for name in ("produtos", "servicos", "areas"):
        op.drop_index(f"ix_{name}_empresa_id", table_name=name)
        op.drop_table(name)
