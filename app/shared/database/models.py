import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, ForeignKey, JSON,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from app.config.database import Base


def generate_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class StorageNodeMixin(TimestampMixin):
    """Campos comunes a todos los nodos del árbol de almacenamiento"""
    id = Column(String(36), primary_key=True, default=generate_id)
    codigo = Column(String(100), unique=True, nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text)

    node_type = ""

    @property
    def parent_node(self):
        """Nodo padre cargado, o None para la raíz o si el enlace falta"""
        return None

# ===== JERARQUÍA DE ALMACENAMIENTO =====

class Ubicacion(Base, StorageNodeMixin):
    """Área de almacenamiento raíz (zona de almacén)"""
    __tablename__ = "ubicaciones"
    node_type = "ubicacion"

    # Relationships
    armarios = relationship("Armario", back_populates="ubicacion")
    estanterias = relationship("Estanteria", back_populates="ubicacion")


class Armario(Base, StorageNodeMixin):
    """Armario dentro de una ubicación"""
    __tablename__ = "armarios"
    node_type = "armario"

    ubicacion_id = Column(String(36), ForeignKey("ubicaciones.id"), nullable=False, index=True)

    # Relationships
    ubicacion = relationship("Ubicacion", back_populates="armarios")
    cajones = relationship("Cajon", back_populates="armario")
    organizadores = relationship("Organizador", back_populates="armario")

    @property
    def parent_node(self):
        return self.ubicacion


class Estanteria(Base, StorageNodeMixin):
    """Estantería dentro de una ubicación"""
    __tablename__ = "estanterias"
    node_type = "estanteria"

    ubicacion_id = Column(String(36), ForeignKey("ubicaciones.id"), nullable=False, index=True)

    # Relationships
    ubicacion = relationship("Ubicacion", back_populates="estanterias")
    estantes = relationship("Estante", back_populates="estanteria")
    cajones = relationship("Cajon", back_populates="estanteria")
    organizadores = relationship("Organizador", back_populates="estanteria")

    @property
    def parent_node(self):
        return self.ubicacion


class Estante(Base, StorageNodeMixin):
    """Estante de una estantería (hoja: no tiene hijos)"""
    __tablename__ = "estantes"
    node_type = "estante"

    estanteria_id = Column(String(36), ForeignKey("estanterias.id"), nullable=False, index=True)

    # Relationships
    estanteria = relationship("Estanteria", back_populates="estantes")

    @property
    def parent_node(self):
        return self.estanteria


class Cajon(Base, StorageNodeMixin):
    """Cajón de un armario o de una estantería"""
    __tablename__ = "cajones"
    node_type = "cajon"

    armario_id = Column(String(36), ForeignKey("armarios.id"), index=True)
    estanteria_id = Column(String(36), ForeignKey("estanterias.id"), index=True)

    __table_args__ = (
        CheckConstraint(
            "(armario_id IS NULL) <> (estanteria_id IS NULL)",
            name="cajones_un_solo_padre"
        ),
    )

    # Relationships
    armario = relationship("Armario", back_populates="cajones")
    estanteria = relationship("Estanteria", back_populates="cajones")
    divisiones = relationship("Division", back_populates="cajon")

    @property
    def parent_node(self):
        return self.armario or self.estanteria


class Division(Base, StorageNodeMixin):
    """División dentro de un cajón (hoja)"""
    __tablename__ = "divisiones"
    node_type = "division"

    cajon_id = Column(String(36), ForeignKey("cajones.id"), nullable=False, index=True)

    # Relationships
    cajon = relationship("Cajon", back_populates="divisiones")

    @property
    def parent_node(self):
        return self.cajon


class Organizador(Base, StorageNodeMixin):
    """Organizador de piezas pequeñas, en una estantería o un armario"""
    __tablename__ = "organizadores"
    node_type = "organizador"

    estanteria_id = Column(String(36), ForeignKey("estanterias.id"), index=True)
    armario_id = Column(String(36), ForeignKey("armarios.id"), index=True)

    __table_args__ = (
        CheckConstraint(
            "(armario_id IS NULL) <> (estanteria_id IS NULL)",
            name="organizadores_un_solo_padre"
        ),
    )

    # Relationships
    estanteria = relationship("Estanteria", back_populates="organizadores")
    armario = relationship("Armario", back_populates="organizadores")
    cajoncitos = relationship("Cajoncito", back_populates="organizador")

    @property
    def parent_node(self):
        return self.estanteria or self.armario


class Cajoncito(Base, StorageNodeMixin):
    """Compartimento de un organizador (hoja, único anclaje válido para componentes)"""
    __tablename__ = "cajoncitos"
    node_type = "cajoncito"

    organizador_id = Column(String(36), ForeignKey("organizadores.id"), nullable=False, index=True)

    # Relationships
    organizador = relationship("Organizador", back_populates="cajoncitos")

    @property
    def parent_node(self):
        return self.organizador


STORAGE_NODE_MODELS = {
    model.node_type: model
    for model in (Ubicacion, Armario, Estanteria, Estante, Cajon, Division, Organizador, Cajoncito)
}

# ===== ITEMS =====

class Repuesto(Base, TimestampMixin):
    """Repuesto con umbral de stock mínimo"""
    __tablename__ = "repuestos"

    id = Column(String(36), primary_key=True, default=generate_id)
    codigo = Column(String(100), unique=True, nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text)
    marca = Column(String(255))
    modelo = Column(String(255))
    numero_parte = Column(String(255))
    categoria = Column(String(100))
    stock_minimo = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    ubicaciones = relationship("RepuestoUbicacion", back_populates="repuesto")


class Componente(Base, TimestampMixin):
    """Componente electrónico categorizado (sin umbral de stock)"""
    __tablename__ = "componentes"

    id = Column(String(36), primary_key=True, default=generate_id)
    categoria = Column(String(100), nullable=False, index=True)
    descripcion = Column(String(255), nullable=False)
    valor_unidad = Column(JSON, default=list)  # [{"valor": "1K", "unidad": "Ω"}, ...]
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    ubicaciones = relationship("ComponenteUbicacion", back_populates="componente")

# ===== ASOCIACIONES DE UBICACIÓN =====

REPUESTO_ANCHOR_COLUMNS = (
    "armario_id", "estanteria_id", "estante_id", "cajon_id", "division_id", "cajoncito_id"
)


class RepuestoUbicacion(Base):
    """Cantidad de un repuesto guardada en un nodo concreto"""
    __tablename__ = "repuesto_ubicaciones"

    id = Column(String(36), primary_key=True, default=generate_id)
    repuesto_id = Column(String(36), ForeignKey("repuestos.id"), nullable=False, index=True)
    cantidad = Column(Integer, default=0, nullable=False)
    armario_id = Column(String(36), ForeignKey("armarios.id"), index=True)
    estanteria_id = Column(String(36), ForeignKey("estanterias.id"), index=True)
    estante_id = Column(String(36), ForeignKey("estantes.id"), index=True)
    cajon_id = Column(String(36), ForeignKey("cajones.id"), index=True)
    division_id = Column(String(36), ForeignKey("divisiones.id"), index=True)
    cajoncito_id = Column(String(36), ForeignKey("cajoncitos.id"), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("cantidad >= 0", name="repuesto_ubicaciones_cantidad_no_negativa"),
        CheckConstraint(
            " + ".join(f"(CASE WHEN {col} IS NULL THEN 0 ELSE 1 END)" for col in REPUESTO_ANCHOR_COLUMNS) + " = 1",
            name="repuesto_ubicaciones_un_solo_anclaje"
        ),
        UniqueConstraint('repuesto_id', 'armario_id', name='repuesto_ubicaciones_repuesto_armario_key'),
        UniqueConstraint('repuesto_id', 'estanteria_id', name='repuesto_ubicaciones_repuesto_estanteria_key'),
        UniqueConstraint('repuesto_id', 'estante_id', name='repuesto_ubicaciones_repuesto_estante_key'),
        UniqueConstraint('repuesto_id', 'cajon_id', name='repuesto_ubicaciones_repuesto_cajon_key'),
        UniqueConstraint('repuesto_id', 'division_id', name='repuesto_ubicaciones_repuesto_division_key'),
        UniqueConstraint('repuesto_id', 'cajoncito_id', name='repuesto_ubicaciones_repuesto_cajoncito_key'),
    )

    # Relationships
    repuesto = relationship("Repuesto", back_populates="ubicaciones")
    armario = relationship("Armario")
    estanteria = relationship("Estanteria")
    estante = relationship("Estante")
    cajon = relationship("Cajon")
    division = relationship("Division")
    cajoncito = relationship("Cajoncito")


class ComponenteUbicacion(Base):
    """Cantidad de un componente guardada en un cajoncito"""
    __tablename__ = "componente_ubicaciones"

    id = Column(String(36), primary_key=True, default=generate_id)
    componente_id = Column(String(36), ForeignKey("componentes.id"), nullable=False, index=True)
    cajoncito_id = Column(String(36), ForeignKey("cajoncitos.id"), nullable=False, index=True)
    cantidad = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("cantidad >= 0", name="componente_ubicaciones_cantidad_no_negativa"),
        UniqueConstraint('componente_id', 'cajoncito_id', name='componente_ubicaciones_componente_cajoncito_key'),
    )

    # Relationships
    componente = relationship("Componente", back_populates="ubicaciones")
    cajoncito = relationship("Cajoncito")
