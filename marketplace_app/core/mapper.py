from typing import Callable, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    """Converts ORM rows into response DTOs."""

    @staticmethod
    def one(item, schema: Type[T]) -> T:
        return schema.model_validate(item)

    @staticmethod
    def many(
        items: Iterable,
        schema: Type[T],
        *,
        order_by: Optional[Callable[[T], object]] = None,
    ) -> list[T]:
        mapped = [schema.model_validate(item) for item in items]
        if order_by is not None:
            mapped.sort(key=order_by)
        return mapped
