# src/ordered_index/tree/errors.py


class DuplicateKeyError(KeyError):
    """La clave ya existe en el árbol (insert sin replace)."""


class InvariantViolation(AssertionError):
    """
    Estructura interna corrupta: orden, aridad, profundidad de hojas o tamaño.
    Es un error de lógica, no se intenta recuperar.
    """
