"""Outcomes of catalog operations, mapped to HTTP by the router"""

from dataclasses import dataclass, field
from typing import List, Union

from ..schemas.product import ProductRead


@dataclass(frozen=True)
class Created:
    product: ProductRead


@dataclass(frozen=True)
class Found:
    value: Union[ProductRead, List[ProductRead]]


@dataclass(frozen=True)
class Deleted:
    product_id: int


@dataclass(frozen=True)
class NotFound:
    product_id: int


@dataclass(frozen=True)
class BadRequest:
    reasons: List[str] = field(default_factory=list)


ProductResult = Union[Created, Found, Deleted, NotFound, BadRequest]
