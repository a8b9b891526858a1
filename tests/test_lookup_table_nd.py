import sys
import os

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.lut.tables.lookup_table import LookupTable


def make_row(pairs, default=0.0):
    row = LookupTable(dim=1, default=default)
    row.insert_many(pairs)
    return row


def make_square():
    """f(0, y) = 10y ; f(1, y) = 100 + 10y, amostrado em y = 0 e 1."""
    table = LookupTable(dim=2)
    table.insert(0.0, make_row([(0.0, 0.0), (1.0, 10.0)]))
    table.insert(1.0, make_row([(0.0, 100.0), (1.0, 110.0)]))
    return table


def test_two_dim_interpolation():
    print("--- Iniciando Teste da Tabela 2-D ---")
    table = make_square()

    assert table.lookup((0.5, 0.5)) == 55.0
    assert table.lookup((0.0, 1.0)) == 10.0
    assert table.lookup((1.0, 0.25)) == 102.5
    assert table.lookup([0.25, 0.0]) == 25.0
    print(">> SUCESSO: Interpolação 2-D em cascata correta.")


def test_two_dim_out_of_range_clamps():
    table = make_square()
    assert table.lookup((-1.0, 0.5)) == 5.0
    assert table.lookup((2.0, 5.0)) == 110.0
    assert table.lookup((0.5, -3.0)) == 50.0


def test_cascade_uses_each_subtable_independently():
    # Sub-tabelas com amostras em posições diferentes de y
    table = LookupTable(dim=2)
    table.insert(0.0, make_row([(0.0, 0.0), (2.0, 20.0)]))
    table.insert(1.0, make_row([(1.0, 100.0)]))

    # x = 0 resolve y = 1 para 10; x = 1 tem uma única amostra (100)
    assert table.lookup((0.5, 1.0)) == 55.0
    assert table.lookup((0.5, 2.0)) == 60.0


def test_three_dim_linear_function_is_reproduced():
    xs, ys, zs = [0.0, 1.0, 3.0], [0.0, 2.0], [-1.0, 1.0]

    def f(x, y, z):
        return x + 10.0 * y + 100.0 * z

    table = LookupTable(dim=3)
    for x in xs:
        plane = LookupTable(dim=2)
        for y in ys:
            plane.insert(y, make_row([(z, f(x, y, z)) for z in zs]))
        table.insert(x, plane)

    for point in [(2.0, 1.0, 0.0), (0.5, 0.5, 0.5), (3.0, 2.0, -1.0)]:
        assert table.lookup(point) == pytest.approx(f(*point))

    results = table.lookup_many(np.array([[2.0, 1.0, 0.0], [0.0, 0.0, -1.0]]))
    assert results == pytest.approx([12.0, -100.0])


def test_empty_tables_return_default():
    assert LookupTable(dim=2, default=-1.0).lookup((1.0, 2.0)) == -1.0

    # Sub-tabela vazia devolve o próprio valor padrão
    table = LookupTable(dim=2)
    table.insert(0.0, LookupTable(dim=1, default=7.0))
    assert table.lookup((0.0, 3.0)) == 7.0


def test_subtables_are_shared_references():
    shared = make_row([(0.0, 1.0)])
    table = LookupTable(dim=2)
    table.insert(0.0, shared)
    table.insert(1.0, shared)

    assert table.lookup((0.5, 0.0)) == 1.0

    # Mudanças na sub-tabela aparecem em todas as chaves que a referenciam
    shared.insert(1.0, 3.0)
    assert table.lookup((0.5, 1.0)) == 3.0

    # Remover da tabela externa não altera a sub-tabela
    table.remove(0.0, shared)
    assert len(shared) == 2
    assert table.keys() == [1.0]
    assert table.items()[0][1] is shared


def test_remove_and_reinsert_subtable():
    table = make_square()
    table.remove(1.0)
    assert table.lookup((0.5, 0.5)) == 5.0

    table.insert(1.0, make_row([(0.0, 200.0)]))
    assert table.lookup((0.5, 0.0)) == 100.0


def test_invalid_subtable_or_point_raises():
    table = LookupTable(dim=2)
    with pytest.raises(ValueError):
        table.insert(0.0, 5.0)
    with pytest.raises(ValueError):
        table.insert(0.0, LookupTable(dim=2))
    with pytest.raises(ValueError):
        make_square().lookup((0.5,))
    with pytest.raises(ValueError):
        make_square().lookup((0.5, 0.5, 0.5))


if __name__ == "__main__":
    test_two_dim_interpolation()
