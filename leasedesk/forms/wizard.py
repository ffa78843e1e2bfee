"""The LOI wizard: form values, per-step validation, stepping and submission."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from ..models.loi import LOIFormValues, LOIPayload, Step, SubmitStatus, Utilities
from ..state import Fulfilled, Rejected, Result
from ..utils.logging import get_logger
from .stepper import FormStepper
from .steps import STEPS, VALIDATION_SCHEMAS, check_schema_map, initial_values
from .transform import from_api_record, to_api_payload
from .validation import FieldErrors, FormSchema, validate_form

LOGGER = get_logger("forms.wizard")

SubmitFn = Callable[[LOIPayload], Result]
FetchFn = Callable[[], Result]


class WizardOutcome(str, Enum):
    INVALID = "invalid"
    ADVANCED = "advanced"
    SUBMITTED = "submitted"
    SAVED = "saved"
    FAILED = "failed"


class LOIWizard:
    """Drives the five-step LOI form.

    Validation only ever looks at the schema of the step being shown. The
    submit callable is injected so the same wizard works against the HTTP
    client, a state slice or a test double; it must return a
    :class:`~leasedesk.state.Fulfilled` or :class:`~leasedesk.state.Rejected`.
    """

    def __init__(
        self,
        submit: SubmitFn,
        mode: str = "create",
        loi_id: Optional[str] = None,
        steps: Optional[List[Step]] = None,
        schemas: Optional[Mapping[int, Type[FormSchema]]] = None,
    ) -> None:
        if mode not in ("create", "edit"):
            raise ValueError(f"unknown wizard mode: {mode}")
        if mode == "edit" and not loi_id:
            raise ValueError("edit mode needs an loi_id")
        self.steps = list(steps or STEPS)
        self.schemas = dict(schemas or VALIDATION_SCHEMAS)
        check_schema_map(self.steps, self.schemas)

        self.submit = submit
        self.mode = mode
        self.loi_id = loi_id
        self.stepper = FormStepper.for_steps(self.steps)
        self.values: LOIFormValues = initial_values()
        self.errors: FieldErrors = {}
        self.loading = mode == "edit"
        self.load_error: Optional[str] = None
        self.submit_error: Optional[str] = None
        self.submitting = False
        self.saving = False
        self.last_saved: Optional[datetime] = None
        self._loaded: Optional[LOIFormValues] = None

    # -- state ---------------------------------------------------------------

    @property
    def current_step(self) -> int:
        return self.stepper.current_step

    @property
    def active_step(self) -> Step:
        return self.steps[self.current_step - 1]

    @property
    def active_schema(self) -> Type[FormSchema]:
        return self.schemas[self.current_step]

    @property
    def is_editing(self) -> bool:
        return self.mode == "edit"

    @property
    def ready(self) -> bool:
        return not self.loading and self.load_error is None

    def set_field(self, name: str, value: Any) -> None:
        if name.startswith("utilities."):
            _, flag = name.split(".", 1)
            if flag not in Utilities.model_fields:
                raise KeyError(name)
            self.values.utilities = self.values.utilities.model_copy(update={flag: bool(value)})
        elif name in LOIFormValues.model_fields:
            setattr(self.values, name, value)
        else:
            raise KeyError(name)
        self.errors.pop(name, None)

    def field_value(self, name: str) -> Any:
        if name.startswith("utilities."):
            return getattr(self.values.utilities, name.split(".", 1)[1])
        return getattr(self.values, name)

    # -- edit mode -----------------------------------------------------------

    def load(self, fetch: FetchFn) -> bool:
        """Populate the form from the stored LOI; on failure the form stays unavailable."""

        self.loading = True
        self.load_error = None
        result = fetch()
        self.loading = False
        if isinstance(result, Rejected):
            self.load_error = result.message or "Failed to load LOI"
            LOGGER.warning("loi_load_failed loi_id=%s status=%s", self.loi_id, result.status)
            return False
        self.values = from_api_record(result.payload)
        self._loaded = self.values.model_copy(deep=True)
        LOGGER.info("loi_loaded loi_id=%s", self.loi_id)
        return True

    # -- actions -------------------------------------------------------------

    def validate_current_step(self) -> FieldErrors:
        self.errors = validate_form(self.active_schema, self.values.model_dump())
        return self.errors

    def on_advance(self) -> WizardOutcome:
        if self.validate_current_step():
            LOGGER.debug("step_invalid step=%s fields=%s", self.current_step, sorted(self.errors))
            return WizardOutcome.INVALID
        if not self.stepper.is_last_step:
            self.stepper.next_step()
            return WizardOutcome.ADVANCED

        self.submitting = True
        try:
            result = self._dispatch(SubmitStatus.SUBMITTED)
        finally:
            self.submitting = False
        return WizardOutcome.SUBMITTED if isinstance(result, Fulfilled) else WizardOutcome.FAILED

    def on_save_draft(self) -> WizardOutcome:
        self.saving = True
        try:
            result = self._dispatch(SubmitStatus.DRAFT)
        finally:
            self.saving = False
        return WizardOutcome.SAVED if isinstance(result, Fulfilled) else WizardOutcome.FAILED

    def prev_step(self) -> int:
        self.errors = {}
        return self.stepper.prev_step()

    def reset(self) -> None:
        self.values = self._loaded.model_copy(deep=True) if self._loaded else initial_values()
        self.stepper.reset()
        self.errors = {}
        self.submit_error = None

    def payload(self, submit_status: SubmitStatus = SubmitStatus.SUBMITTED) -> LOIPayload:
        return to_api_payload(self.values, doc_id=self.loi_id, submit_status=submit_status)

    def _dispatch(self, submit_status: SubmitStatus) -> Result:
        self.submit_error = None
        result = self.submit(self.payload(submit_status))
        if isinstance(result, Rejected):
            self.submit_error = result.message
            LOGGER.warning("loi_submit_failed status=%s submit_status=%s", result.status, submit_status.value)
            return result
        self.last_saved = datetime.now(timezone.utc)
        record = result.payload if isinstance(result.payload, dict) else {}
        # A first draft gets its id from the server; later saves update that record.
        if record.get("id") and not self.loi_id:
            self.loi_id = record["id"]
        LOGGER.info("loi_dispatched loi_id=%s submit_status=%s", self.loi_id, submit_status.value)
        return result

    def summary(self) -> Dict[str, Any]:
        """Review-step view of the payload, keyed the way the API stores it."""
        return self.payload().wire()


__all__ = ["LOIWizard", "WizardOutcome"]
