# app/services/table_view.py
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from .export_service import ExportService


@dataclass(frozen=True)
class FieldKey:
    """Cell value read straight from a record field"""
    name: str


@dataclass(frozen=True)
class Derived:
    """Cell value computed from the whole record"""
    fn: Callable[[Mapping[str, Any]], Any]


Accessor = Union[FieldKey, Derived]


@dataclass(frozen=True)
class Column:
    header: str
    accessor: Accessor


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def resolve(column: Column, record: Mapping[str, Any]) -> str:
    accessor = column.accessor
    if isinstance(accessor, FieldKey):
        return cell_text(record.get(accessor.name))
    if isinstance(accessor, Derived):
        return cell_text(accessor.fn(record))
    raise TypeError(f"Unknown column accessor: {accessor!r}")


@dataclass
class RenderedRow:
    record: Mapping[str, Any]
    cells: List[str]
    can_edit: bool = False
    can_delete: bool = False


class TableView:
    """
    A record list rendered against a column specification.

    Exports serialize exactly the rendered headers and cells, so what a user
    sees is what ends up in `{title}.csv` / `{title}.pdf`.
    """

    def __init__(
        self,
        title: str,
        records: Sequence[Mapping[str, Any]],
        columns: Sequence[Column],
        on_edit: Optional[Callable[[Mapping[str, Any]], Any]] = None,
        on_delete: Optional[Callable[[Mapping[str, Any]], Any]] = None,
    ):
        self.title = title
        self.records = list(records)
        self.columns = list(columns)
        self.on_edit = on_edit
        self.on_delete = on_delete

    @property
    def headers(self) -> List[str]:
        return [column.header for column in self.columns]

    @property
    def has_actions(self) -> bool:
        return self.on_edit is not None or self.on_delete is not None

    def rows(self) -> List[List[str]]:
        return [[resolve(column, record) for column in self.columns] for record in self.records]

    def render(self) -> List[RenderedRow]:
        return [
            RenderedRow(
                record=record,
                cells=cells,
                can_edit=self.on_edit is not None,
                can_delete=self.on_delete is not None,
            )
            for record, cells in zip(self.records, self.rows())
        ]

    def edit(self, index: int):
        if self.on_edit is None:
            raise ValueError(f"Table '{self.title}' has no edit action")
        return self.on_edit(self.records[index])

    def delete(self, index: int):
        if self.on_delete is None:
            raise ValueError(f"Table '{self.title}' has no delete action")
        return self.on_delete(self.records[index])

    @property
    def csv_filename(self) -> str:
        return f"{self.title}.csv"

    @property
    def pdf_filename(self) -> str:
        return f"{self.title}.pdf"

    def to_csv(self) -> str:
        return ExportService.to_csv(self.headers, self.rows())

    def to_pdf(self) -> bytes:
        return ExportService.to_pdf(self.headers, self.rows(), title=self.title)
