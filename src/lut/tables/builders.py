"""
Construção de tabelas a partir de vetores numpy.
- table_from_grid: grade retangular (eixos + matriz de valores).
- table_from_samples: amostras irregulares (pontos espalhados).
"""
import logging
import numpy as np

from src.lut.tables.lookup_table import LookupTable

logger = logging.getLogger(__name__)


def table_from_grid(axes, values, default=LookupTable.DEFAULT_VALUE) -> LookupTable:
    """
    Monta uma tabela de dimensão len(axes) a partir de uma grade.
    values.shape deve começar por (len(axes[0]), len(axes[1]), ...).
    Dimensões extras no final viram valores vetoriais (np.ndarray) nas folhas.
    """
    axes = [np.asarray(a) for a in axes]
    if not axes:
        raise ValueError("É necessário pelo menos um eixo.")
    for i, axis in enumerate(axes):
        if axis.ndim != 1:
            raise ValueError(f"O eixo {i} deve ser unidimensional (shape={axis.shape}).")

    values = np.asarray(values)
    expected = tuple(len(a) for a in axes)
    if values.shape[:len(axes)] != expected:
        raise ValueError(f"Shape de values {values.shape} incompatível com os eixos {expected}.")

    table = _build_grid(axes, values, default)
    logger.debug("Tabela montada a partir de grade %s", expected)
    return table


def _build_grid(axes, values, default):
    table = LookupTable(dim=len(axes), default=default)
    for i, key in enumerate(axes[0]):
        if len(axes) == 1:
            payload = _leaf(values[i])
        else:
            payload = _build_grid(axes[1:], values[i], default)
        table.insert(key.item(), payload)
    return table


def table_from_samples(points, values, default=LookupTable.DEFAULT_VALUE) -> LookupTable:
    """
    Monta uma tabela a partir de pontos espalhados, shape (n, dim).
    Os pontos são agrupados pela primeira coordenada, recursivamente,
    gerando uma sub-tabela por coordenada distinta.
    Pontos repetidos: vale o primeiro (mesma regra do insert).
    """
    points = np.asarray(points)
    if points.ndim == 1:
        points = points.reshape(-1, 1)
    if points.ndim != 2 or points.shape[0] == 0 or points.shape[1] == 0:
        raise ValueError(f"points deve ter shape (n, dim) com n > 0 (recebido: {points.shape}).")

    values = np.asarray(values)
    if values.ndim == 0 or len(values) != len(points):
        raise ValueError("points e values devem ter o mesmo número de amostras.")

    table = _build_samples(points, values, default)
    logger.debug("Tabela montada a partir de %d amostras (dim=%d)", len(points), points.shape[1])
    return table


def _build_samples(points, values, default):
    dim = points.shape[1]
    table = LookupTable(dim=dim, default=default)

    # Agrupa as linhas pela primeira coordenada, preservando a ordem de chegada
    groups = {}
    for row, key in enumerate(points[:, 0].tolist()):
        groups.setdefault(key, []).append(row)

    for key, rows in groups.items():
        if dim == 1:
            payload = _leaf(values[rows[0]])
        else:
            payload = _build_samples(points[rows, 1:], values[rows], default)
        table.insert(key, payload)
    return table


def _leaf(value):
    if np.ndim(value) == 0:
        return value.item() if hasattr(value, "item") else value
    return np.array(value)
