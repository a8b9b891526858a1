import logging

logger = logging.getLogger(__name__)


class BalancedNode:
    """
    Nó interno da Árvore AVL.
    Armazena um item de dados opaco e a altura da subárvore (cacheada).
    Os filhos só mudam por substituição completa (set_left / set_right),
    que já recalcula a altura.
    """
    def __init__(self, data):
        self.data = data
        self._left = None
        self._right = None
        self._height = 1        # Altura inicial do nó é 1

    @property
    def height(self):
        return self._height

    @property
    def left(self):
        return self._left

    @property
    def right(self):
        return self._right

    def set_left(self, node):
        self._left = node
        self._height = 1 + max(self.height_of(self._left), self.height_of(self._right))

    def set_right(self, node):
        self._right = node
        self._height = 1 + max(self.height_of(self._left), self.height_of(self._right))

    @staticmethod
    def height_of(node):
        if not node:
            return 0
        return node.height

    @staticmethod
    def balance_of(node):
        if not node:
            return 0
        return BalancedNode.height_of(node.left) - BalancedNode.height_of(node.right)

    def __repr__(self):
        return f"BalancedNode({self.data!r}, h={self._height})"


class BalancedTree:
    """
    Árvore AVL genérica ordenada por um comparador de três vias.
    comparator(a, b) retorna < 0, 0 ou > 0.
    Garante inserção, remoção e busca por intervalo em O(log n).
    """
    def __init__(self, comparator):
        self._comparator = comparator
        self.root = None

    @property
    def comparator(self):
        return self._comparator

    @property
    def height(self):
        return BalancedNode.height_of(self.root)

    def insert(self, item):
        """Insere um item e rebalanceia a árvore. Duplicatas são ignoradas."""
        self.root = self._insert_recursive(self.root, item)

    def remove(self, item):
        """Remove o item equivalente (pelo comparador). Se não existir, nada muda."""
        self.root = self._remove_recursive(self.root, item)

    def lookup(self, query):
        """
        Busca de enquadramento: retorna (maior item <= query, menor item >= query).
        Uma única descida da raiz até a folha, sem retrocesso.
        Qualquer um dos lados pode ser None fora do intervalo armazenado.
        """
        lower = None
        upper = None
        current = self.root
        while current:
            cmp = self._comparator(query, current.data)
            if cmp < 0:
                upper = current
                current = current.left
            elif cmp > 0:
                lower = current
                current = current.right
            else:
                # Acerto exato
                return current.data, current.data

        return (lower.data if lower else None), (upper.data if upper else None)

    def _insert_recursive(self, node, item):
        # 1. Inserção normal de BST
        if not node:
            return BalancedNode(item)

        cmp = self._comparator(item, node.data)
        if cmp < 0:
            node.set_left(self._insert_recursive(node.left, item))
        elif cmp > 0:
            node.set_right(self._insert_recursive(node.right, item))
        else:
            # Chaves duplicadas não são permitidas, o item original permanece
            logger.debug("Item duplicado ignorado: %r", item)
            return node

        # 2. A altura já foi atualizada pelo set_*; verificar o fator de balanceamento
        balance = BalancedNode.balance_of(node)

        # Casos Left-Left / Left-Right
        if balance > 1:
            if self._comparator(item, node.left.data) > 0:
                node.set_left(self._rotate_left(node.left))
            return self._rotate_right(node)

        # Casos Right-Right / Right-Left
        if balance < -1:
            if self._comparator(item, node.right.data) < 0:
                node.set_right(self._rotate_right(node.right))
            return self._rotate_left(node)

        return node

    def _remove_recursive(self, node, item):
        if not node:
            return None

        cmp = self._comparator(item, node.data)
        if cmp < 0:
            node.set_left(self._remove_recursive(node.left, item))
        elif cmp > 0:
            node.set_right(self._remove_recursive(node.right, item))
        else:
            left = node.left
            right = node.right
            # Zero ou um filho: a subárvore restante já está balanceada
            if not left:
                return right
            if not right:
                return left

            # Dois filhos: copia o sucessor em ordem (mais à esquerda da direita)
            successor = right
            while successor.left:
                successor = successor.left
            node.data = successor.data
            node.set_right(self._remove_recursive(right, successor.data))

        balance = BalancedNode.balance_of(node)

        # Na remoção, a escolha da rotação olha o fator do filho
        if balance > 1:
            if BalancedNode.balance_of(node.left) < 0:
                node.set_left(self._rotate_left(node.left))
            return self._rotate_right(node)

        if balance < -1:
            if BalancedNode.balance_of(node.right) > 0:
                node.set_right(self._rotate_right(node.right))
            return self._rotate_left(node)

        return node

    # --- Rotações ---

    def _rotate_left(self, x):
        """
        Rotação simples à esquerda.
        Usada quando o peso está na direita (Right-Right).
        """
        y = x.right
        subtree = y.left

        x.set_right(subtree)
        y.set_left(x)

        logger.debug("Rotação à esquerda em %r", x.data)
        return y

    def _rotate_right(self, y):
        """
        Rotação simples à direita.
        Usada quando o peso está na esquerda (Left-Left).
        """
        x = y.left
        subtree = x.right

        y.set_left(subtree)
        x.set_right(y)

        logger.debug("Rotação à direita em %r", y.data)
        return x

    # --- Leitura e Depuração ---

    def is_empty(self):
        return self.root is None

    def clear(self):
        """Descarta a árvore inteira (toda a subárvore cai junto com a raiz)."""
        self.root = None

    def items(self):
        """Retorna todos os itens em ordem (in-order traversal)."""
        values = []
        self._in_order(self.root, values)
        return values

    def _in_order(self, node, values):
        if node:
            self._in_order(node.left, values)
            values.append(node.data)
            self._in_order(node.right, values)

    def __iter__(self):
        return iter(self.items())

    def __len__(self):
        return self._count(self.root)

    def _count(self, node):
        if not node:
            return 0
        return 1 + self._count(node.left) + self._count(node.right)

    def is_balanced(self):
        """Verifica a invariante AVL e as alturas cacheadas de todos os nós."""
        return self._check(self.root) >= 0

    def _check(self, node):
        # Retorna a altura real, ou -1 se alguma invariante falhar
        if not node:
            return 0
        lh = self._check(node.left)
        rh = self._check(node.right)
        if lh < 0 or rh < 0 or abs(lh - rh) > 1:
            return -1
        if node.height != 1 + max(lh, rh):
            return -1
        return node.height
