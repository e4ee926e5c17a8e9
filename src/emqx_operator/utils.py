"""Small helpers shared by the webhooks."""

from collections.abc import Mapping
from pydantic import BaseModel


def deep_equal(left, right):
    """Recursive value equality over models, mappings, sequences and scalars.

    Two pydantic models are equal when they are of the same class and all of
    their fields, extra fields included, are deep-equal. ``None`` only equals
    ``None``, so an unset value never equals an empty one.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, BaseModel) or isinstance(right, BaseModel):
        if type(left) is not type(right):
            return False
        return deep_equal(left.model_dump(), right.model_dump())

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))

    if type(left) is not type(right):
        return False
    return left == right
