import logging
from typing import Any, NamedTuple

import numpy as np

from src.lut.structures.avl_tree import BalancedTree

logger = logging.getLogger(__name__)


class Element(NamedTuple):
    """Par armazenado na árvore: coordenada + valor (ou sub-tabela)."""
    key: Any
    payload: Any


def compare_keys(lhs, rhs):
    """Comparador de três vias que olha apenas a chave."""
    if lhs.key == rhs.key:
        return 0
    if lhs.key > rhs.key:
        return 1
    return -1


class LookupTable:
    """
    Tabela de busca N-dimensional sobre uma Árvore AVL por dimensão.

    - dim == 1: cada elemento guarda (chave, valor).
    - dim > 1: cada elemento guarda (chave, sub-tabela de dimensão dim - 1).

    A busca faz o enquadramento na primeira coordenada, resolve as
    sub-tabelas recursivamente e interpola linearmente na dimensão externa
    (interpolação em cascata, não multilinear).

    As sub-tabelas são referências compartilhadas: a tabela não copia nem
    assume posse exclusiva delas.
    """
    DEFAULT_VALUE = 0.0

    def __init__(self, dim: int = 1, default=DEFAULT_VALUE):
        if not isinstance(dim, int) or isinstance(dim, bool) or dim < 1:
            raise ValueError(f"A dimensão da tabela deve ser um inteiro >= 1 (recebido: {dim!r}).")

        self.dim = dim
        self.default = default
        self._tree = BalancedTree(compare_keys)

    # --- Inserção e Remoção ---

    def insert(self, key, payload):
        """
        Insere um ponto de amostra. Chave duplicada é ignorada
        (o valor original permanece).
        """
        if self.dim > 1:
            if not isinstance(payload, LookupTable) or payload.dim != self.dim - 1:
                raise ValueError(
                    f"Tabela de dimensão {self.dim} espera sub-tabela de dimensão {self.dim - 1}."
                )
        logger.debug("insert dim=%d key=%r", self.dim, key)
        self._tree.insert(Element(key, payload))

    def insert_many(self, entries):
        for key, payload in entries:
            self.insert(key, payload)

    def remove(self, key, payload=None):
        """Remove pela chave. O payload é aceito mas não precisa coincidir."""
        logger.debug("remove dim=%d key=%r", self.dim, key)
        self._tree.remove(Element(key, payload))

    def remove_many(self, entries):
        for key, payload in entries:
            self.remove(key, payload)

    def clear(self):
        self._tree.clear()

    # --- Busca ---

    def lookup(self, point):
        """
        Retorna o valor interpolado no ponto.
        dim == 1 aceita um escalar; dim > 1 exige uma sequência com dim coordenadas.
        """
        return self._lookup(self._as_point(point))

    def lookup_many(self, points):
        """Aplica lookup a cada ponto, preservando a ordem de entrada."""
        return [self.lookup(p) for p in points]

    def _as_point(self, point):
        if self.dim == 1 and np.ndim(point) == 0:
            return (point,)

        coords = tuple(point)
        if len(coords) != self.dim:
            raise ValueError(
                f"Ponto com {len(coords)} coordenadas para tabela de dimensão {self.dim}."
            )
        return coords

    def _lookup(self, point):
        x = point[0]
        lower, upper = self._tree.lookup(Element(x, None))

        if lower is None and upper is None:
            logger.debug("Tabela vazia (dim=%d), retornando valor padrão", self.dim)
            return _detached(self.default)

        # Fora do intervalo: devolve o limite mais próximo sem extrapolar
        if lower is None:
            return self._resolve(upper, point)
        if upper is None:
            return self._resolve(lower, point)

        if x == lower.key:
            return self._resolve(lower, point)
        if x == upper.key:
            return self._resolve(upper, point)

        # TODO: trocar a cascata 1-D por interpolação multilinear sobre os 2^dim vértices
        lower_val = self._resolve(lower, point)
        upper_val = self._resolve(upper, point)
        t = (x - lower.key) / (upper.key - lower.key)
        return lower_val + t * (upper_val - lower_val)

    def _resolve(self, element, point):
        if self.dim == 1:
            return _detached(element.payload)
        return element.payload._lookup(point[1:])

    # --- Leitura ---

    def keys(self):
        return [e.key for e in self._tree.items()]

    def items(self):
        return [(e.key, e.payload) for e in self._tree.items()]

    def __contains__(self, key):
        lower, _ = self._tree.lookup(Element(key, None))
        return lower is not None and lower.key == key

    def __len__(self):
        return len(self._tree)

    def __repr__(self):
        return f"LookupTable(dim={self.dim}, entries={len(self)})"


def _detached(value):
    # Arrays armazenados não podem vazar por referência para quem chamou
    if isinstance(value, np.ndarray):
        return value.copy()
    return value

