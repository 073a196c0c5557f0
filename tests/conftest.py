import pytest

from famtree.tree import FamilyTree


@pytest.fixture
def tree():
    return FamilyTree()


@pytest.fixture
def family(tree):
    """Grandma(1) -> Mom(2) -> Me(3), with an aunt(4) and a cousin(5)"""
    tree.insert(1, "Grandma", 0)
    tree.insert(2, "Mom", 1)
    tree.insert(3, "Me", 2)
    tree.insert(4, "Aunt", 1)
    tree.insert(5, "Cousin", 4)
    return tree
