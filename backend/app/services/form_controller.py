# app/services/form_controller.py
import enum
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..exceptions import PersistenceError, RecordValidationError
from ..schemas.records import validate_form
from .registry import EntityDefinition
from .table_view import TableView

logger = logging.getLogger(__name__)


class FormState(str, enum.Enum):
    CLOSED = "closed"
    OPEN = "open"


class FormMode(str, enum.Enum):
    CREATE = "create"
    EDIT = "edit"


class EntityFormController:
    """
    Create/edit workflow for one entity page.

    Closed -> Open(Create) via open_create, Closed -> Open(Edit) via
    open_edit. Cancel, close and a successful submit return to Closed.
    A failed submit keeps the form open with either field errors or a
    failure notice. Delete runs outside this state machine and needs
    an explicit confirmation.
    """

    def __init__(self, db: Session, entity: EntityDefinition):
        self.db = db
        self.entity = entity
        self.records: List[Dict] = []
        self.state = FormState.CLOSED
        self.mode: Optional[FormMode] = None
        self.editing: Optional[Mapping[str, Any]] = None
        self.values: Dict[str, str] = {}
        self.errors: Dict[str, str] = {}
        self.notice: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.state == FormState.OPEN

    def load(self) -> List[Dict]:
        """Replace the in-memory record list with a fresh fetch"""
        try:
            self.records = self.entity.service.list(self.db)
        except PersistenceError as e:
            logger.error(f"Error fetching {self.entity.name}: {e}")
            self.notice = f"Failed to fetch {self.entity.name}"
            raise
        return self.records

    def _reload(self):
        # The write already committed; a failed fetch only leaves the notice from load()
        try:
            self.load()
        except PersistenceError:
            pass

    def table(self, confirm: Callable[[str], bool]) -> TableView:
        """Current records with edit wired to open_edit and delete guarded by `confirm`"""
        return TableView(
            self.entity.title,
            self.records,
            self.entity.columns,
            on_edit=self.open_edit,
            on_delete=lambda record: self.delete(record, confirm),
        )

    def _reset(self):
        self.editing = None
        self.mode = None
        self.values = {}
        self.errors = {}
        self.notice = None

    def open_create(self):
        self._reset()
        self.mode = FormMode.CREATE
        self.values = {name: "" for name in self.entity.form.model_fields}
        self.state = FormState.OPEN

    def open_edit(self, record: Mapping[str, Any]):
        self._reset()
        self.mode = FormMode.EDIT
        self.editing = record
        self.values = self.entity.to_form_values(record)
        self.state = FormState.OPEN

    def close(self):
        self._reset()
        self.state = FormState.CLOSED

    cancel = close

    def submit(self, values: Mapping[str, Any]) -> bool:
        """Validate and persist. Returns True when the form closed successfully."""
        if not self.is_open:
            raise RuntimeError(f"{self.entity.title} form is not open")

        self.values = dict(values)
        self.errors = {}
        self.notice = None

        try:
            record = validate_form(self.entity.form, values)
        except RecordValidationError as e:
            logger.info(f"Invalid {self.entity.singular} input: {e.errors}")
            self.errors = e.errors
            return False

        try:
            if self.mode == FormMode.EDIT:
                self.entity.service.update(self.db, self.editing["id"], record)
            else:
                self.entity.service.create(self.db, record)
        except PersistenceError as e:
            logger.error(f"Error saving {self.entity.singular}: {e}")
            self.notice = f"Failed to save {self.entity.singular}"
            return False

        self.close()
        self._reload()
        return True

    def delete(self, record: Mapping[str, Any], confirm: Callable[[str], bool]) -> bool:
        """Delete after confirmation. Returns True when the record was deleted."""
        if not confirm(f"Are you sure you want to delete this {self.entity.singular}?"):
            return False

        try:
            self.entity.service.delete(self.db, record["id"])
        except PersistenceError as e:
            logger.error(f"Error deleting {self.entity.singular}: {e}")
            self.notice = f"Failed to delete {self.entity.singular}"
            return False

        self._reload()
        return True
