from typing import List, Optional, Sequence

from dataporter.backend.types import (
    ExportBackend,
    FieldMetadataProvider,
    FileSaver,
    FileSource,
    ImportBackend,
    NotificationSink,
    export_filename,
)
from dataporter.core.errors import (
    BackendRejection,
    BusyError,
    FileReadError,
    PartialFailure,
    PorterError,
    ProviderError,
    TransportError,
    ValidationError,
    error_message,
)
from dataporter.core.logger import logger
from dataporter.v1_0.entities import (
    ExportResult,
    ExportState,
    FieldDescriptor,
    ImportOutcome,
    ImportReport,
    ImportState,
    Notification,
    OrderedField,
    PreviewTable,
    Severity,
)
from dataporter.v1_0.helper.io import (
    DEFAULT_MAX_ROWS,
    SelectionState,
    build_preview,
    decode_text,
    empty_preview,
    has_preview,
    to_transfer_payload,
)

NO_FIELDS_MSG = "Please select at least one field before exporting."
NO_FILE_MSG = "Please select a CSV file before importing."
NO_OBJECT_MSG = "No object selected."
UNKNOWN_REJECTION_MSG = "Unknown CSV validation errors."


def classify_outcome(outcome: ImportOutcome) -> ImportState:
    if not outcome.succeeded:
        return ImportState.REJECTED
    if outcome.failed_count > 0:
        return ImportState.PARTIALLY_FAILED
    return ImportState.SUCCEEDED


def rejection_message(outcome: ImportOutcome) -> str:
    return "\n".join(outcome.errors) if outcome.errors else UNKNOWN_REJECTION_MSG


def outcome_notification(state: ImportState, outcome: ImportOutcome) -> Notification:
    """User-facing message for a classified backend outcome."""
    if state is ImportState.REJECTED:
        return Notification("Import cancelled", rejection_message(outcome), Severity.ERROR, sticky=True)
    if state is ImportState.PARTIALLY_FAILED:
        msg = f"{outcome.inserted_count} records imported, {outcome.failed_count} failed."
        if outcome.errors:
            msg += "\n" + "\n".join(outcome.errors)
        return Notification("Import completed with errors", msg, Severity.WARNING)
    return Notification(
        "Import completed",
        f"{outcome.inserted_count} records imported successfully.",
        Severity.SUCCESS,
    )


class PorterService:
    """
    Export/import workflow for one porter session (one record/object context).

    Holds the field selection, the chosen file and its preview. Every terminal
    outcome, precondition failure and caught exception is reported to the
    notification sink; the busy flags are cleared on every exit path.
    """

    def __init__(
        self,
        metadata_provider: FieldMetadataProvider,
        export_backend: ExportBackend,
        import_backend: ImportBackend,
        notifier: NotificationSink,
        file_saver: Optional[FileSaver] = None,
        preview_max_rows: int = DEFAULT_MAX_ROWS,
    ) -> None:
        self.metadata_provider = metadata_provider
        self.export_backend = export_backend
        self.import_backend = import_backend
        self.notifier = notifier
        self.file_saver = file_saver
        self.preview_max_rows = preview_max_rows

        self.record_id: Optional[str] = None
        self.object_name: str = ""
        self.selection = SelectionState()
        self.file: Optional[FileSource] = None
        self.preview: PreviewTable = empty_preview()
        self.is_exporting = False
        self.is_importing = False
        self.export_state = ExportState.IDLE
        self.import_state = ImportState.IDLE
        self.last_error: Optional[str] = None
        self._context_generation = 0

    # ---------- context ----------

    async def load_context(self, record_id: Optional[str] = None, object_name: Optional[str] = None) -> List[FieldDescriptor]:
        """
        Discover the object type and its fields, discarding any previous state.

        Args:
            record_id: Record whose object type should be resolved.
            object_name: Object type to use directly when no record id is given.

        Returns:
            Candidate fields; empty when the provider failed.
        """
        self._context_generation += 1
        generation = self._context_generation
        self.record_id = record_id
        self.object_name = object_name or ""
        self.selection = SelectionState()
        self.clear_file()
        self.last_error = None
        # an operation still in flight belongs to the previous context
        self.export_state = ExportState.IDLE
        self.import_state = ImportState.IDLE

        if not record_id and not object_name:
            return []
        try:
            object_type = object_name or ""
            if record_id:
                object_type = await self.metadata_provider.resolve_object_type(record_id)
            fields = await self.metadata_provider.list_fields(object_type)
        except Exception as e:
            err = ProviderError(error_message(e))
            logger.error("[PorterService] field discovery failed record=%s: %s", record_id, err.message, exc_info=True)
            if not self._is_current(generation):
                return []
            self.last_error = err.message
            await self.notifier.notify(Notification("Error", err.message, Severity.ERROR))
            return []

        if not self._is_current(generation):
            return list(fields)
        self.object_name = object_type
        self.selection = SelectionState(fields)
        logger.info("[PorterService] object=%s fields=%s", self.object_name, len(fields))
        return self.selection.fields

    # ---------- selection ----------

    @property
    def fields(self) -> List[FieldDescriptor]:
        return self.selection.fields

    @property
    def ordered_fields(self) -> List[OrderedField]:
        return self.selection.order

    @property
    def selected_fields(self) -> List[str]:
        return self.selection.selected

    def select_fields(self, api_names: Sequence[str]) -> List[OrderedField]:
        return self.selection.apply(api_names)

    def move_up(self, position: int) -> List[OrderedField]:
        return self.selection.move_up(position)

    def move_down(self, position: int) -> List[OrderedField]:
        return self.selection.move_down(position)

    def remove_field(self, position: int) -> List[OrderedField]:
        return self.selection.remove(position)

    # ---------- file & preview ----------

    async def choose_file(self, source: FileSource) -> PreviewTable:
        """
        Remember the chosen file and rebuild its preview.

        When selections overlap, only the read belonging to the latest
        selection publishes its preview.
        """
        self.file = source
        try:
            content = await source.read()
        except Exception as e:
            logger.warning("[PorterService] preview read failed file=%s: %s", getattr(source, "filename", None), e)
            content = b""
        table = build_preview(decode_text(content), self.preview_max_rows)
        if self.file is source:
            self.preview = table
        return table

    def clear_file(self) -> None:
        self.file = None
        self.preview = empty_preview()

    @property
    def has_preview(self) -> bool:
        return has_preview(self.preview)

    def _is_current(self, generation: int) -> bool:
        return generation == self._context_generation

    # ---------- export ----------

    async def _reject_export(self, err: PorterError, notification: Notification) -> ExportResult:
        if not isinstance(err, BusyError):
            self.export_state = ExportState.IDLE
        await self.notifier.notify(notification)
        return ExportResult(state=ExportState.IDLE, notification=notification, error=err)

    async def export(self) -> ExportResult:
        """
        Export the records of the current object with the ordered fields as columns.

        If the context changes while the backend call is pending, the result
        is still returned but neither the state nor a notification is
        published into the new context.

        Returns:
            ExportResult in SUCCEEDED or FAILED, or IDLE when a precondition
            failed (no backend call in that case).
        """
        if self.is_exporting:
            err = BusyError("An export is already running.")
            return await self._reject_export(err, Notification("Operation in progress", err.message, Severity.WARNING))
        if not self.object_name:
            err = ValidationError(NO_OBJECT_MSG)
            return await self._reject_export(err, Notification("Error", err.message, Severity.ERROR))
        object_name = self.object_name
        field_names = self.selection.api_names
        if not field_names:
            err = ValidationError(NO_FIELDS_MSG)
            return await self._reject_export(err, Notification("Error", err.message, Severity.ERROR))

        generation = self._context_generation
        self.is_exporting = True
        self.export_state = ExportState.EXPORTING
        try:
            logger.info("[PorterService] exporting object=%s fields=%s record=%s", object_name, field_names, self.record_id)
            payload = await self.export_backend.export_records(object_name, field_names, self.record_id)
            filename = export_filename(object_name)
            if self.file_saver is not None:
                await self.file_saver.save(filename, payload)
        except Exception as e:
            err = TransportError(error_message(e))
            logger.error("[PorterService] export failed object=%s: %s", object_name, err.message, exc_info=True)
            notification = Notification("Error", err.message, Severity.ERROR, sticky=True)
            if self._is_current(generation):
                self.export_state = ExportState.FAILED
                await self.notifier.notify(notification)
            return ExportResult(state=ExportState.FAILED, notification=notification, error=err)
        finally:
            self.is_exporting = False

        notification = Notification("Success", "CSV exported successfully", Severity.SUCCESS)
        if self._is_current(generation):
            self.export_state = ExportState.SUCCEEDED
            await self.notifier.notify(notification)
        else:
            logger.info("[PorterService] export of object=%s finished after a context change", object_name)
        return ExportResult(
            state=ExportState.SUCCEEDED,
            notification=notification,
            filename=filename,
            payload=payload,
        )

    # ---------- import ----------

    async def _reject_import(self, err: PorterError, notification: Notification) -> ImportReport:
        if not isinstance(err, BusyError):
            self.import_state = ImportState.IDLE
        await self.notifier.notify(notification)
        return ImportReport(state=ImportState.IDLE, notification=notification, error=err)

    async def _fail_import(self, err: PorterError, title: str, object_name: str, generation: int) -> ImportReport:
        logger.error("[PorterService] import failed object=%s: %s", object_name, err.message, exc_info=True)
        notification = Notification(title, err.message, Severity.ERROR, sticky=True)
        if self._is_current(generation):
            self.import_state = ImportState.FAILED
            await self.notifier.notify(notification)
        return ImportReport(state=ImportState.FAILED, notification=notification, error=err)

    async def import_file(self) -> ImportReport:
        """
        Send the chosen file to the import backend and classify the result.

        States: IDLE -> READING -> IMPORTING -> SUCCEEDED | PARTIALLY_FAILED
        | REJECTED | FAILED. A failed precondition leaves the report in IDLE.
        After a context change the report is returned unpublished, as for
        `export`.
        """
        if self.is_importing:
            err = BusyError("An import is already running.")
            return await self._reject_import(err, Notification("Operation in progress", err.message, Severity.WARNING))
        if not self.object_name:
            err = ValidationError(NO_OBJECT_MSG)
            return await self._reject_import(err, Notification("Error", err.message, Severity.ERROR))
        object_name = self.object_name
        source = self.file
        if source is None:
            err = ValidationError(NO_FILE_MSG)
            return await self._reject_import(err, Notification("Error", err.message, Severity.ERROR))

        generation = self._context_generation
        self.is_importing = True
        try:
            self.import_state = ImportState.READING
            try:
                payload = to_transfer_payload(await source.read())
            except Exception as e:
                return await self._fail_import(FileReadError(error_message(e)), "Error", object_name, generation)

            if self._is_current(generation):
                self.import_state = ImportState.IMPORTING
            logger.info("[PorterService] importing object=%s file=%s", object_name, source.filename)
            try:
                outcome = await self.import_backend.import_records(object_name, payload)
            except Exception as e:
                return await self._fail_import(TransportError(error_message(e)), "Server error", object_name, generation)
        finally:
            self.is_importing = False

        state = classify_outcome(outcome)
        notification = outcome_notification(state, outcome)
        failure: Optional[PorterError] = None
        if state is ImportState.REJECTED:
            failure = BackendRejection(notification.message)
        elif state is ImportState.PARTIALLY_FAILED:
            failure = PartialFailure(notification.message)
        logger.info(
            "[PorterService] import %s object=%s inserted=%s failed=%s",
            state, object_name, outcome.inserted_count, outcome.failed_count,
        )
        if self._is_current(generation):
            self.import_state = state
            await self.notifier.notify(notification)
        else:
            logger.info("[PorterService] import of object=%s finished after a context change", object_name)
        return ImportReport(state=state, notification=notification, outcome=outcome, error=failure)
