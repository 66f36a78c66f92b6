"""CatalogService — read-only views of the registry, classifier and normalizer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from voiceform.domain.classifier import CommandClassifier
from voiceform.domain.commands import COMMAND_HELP
from voiceform.domain.fields import FieldNotFound, FieldRegistry
from voiceform.domain.normalize import normalize
from voiceform.domain.types import FieldKind
from voiceform.services.base import BaseService
from voiceform.services.result import ServiceResult
from voiceform.services.telemetry import traced
from voiceform.services.voice_form import FIELD_NOT_FOUND

if TYPE_CHECKING:
    from voiceform.plugins.manager import PluginManager


class CatalogService(BaseService):
    """Inspect fields, spoken commands, and normalization without a session."""

    def __init__(
        self,
        registry: FieldRegistry | None = None,
        *,
        classifier: CommandClassifier | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        super().__init__(plugins)
        self._registry = registry or FieldRegistry.default()
        self._classifier = classifier or CommandClassifier(registry=self._registry)

    @traced
    def list_fields(self) -> ServiceResult:
        items = [
            {
                "id": desc.id,
                "label": desc.label,
                "kind": str(desc.kind),
                "order": desc.order,
                "aliases": list(desc.aliases),
            }
            for desc in self._registry
        ]
        return ServiceResult(ok=True, op="list_fields", data={"items": items, "count": len(items)})

    def list_commands(self) -> ServiceResult:
        items = [entry.model_dump() for entry in COMMAND_HELP]
        return ServiceResult(
            ok=True, op="list_commands", data={"items": items, "count": len(items)}
        )

    @traced
    def classify(self, transcript: str) -> ServiceResult:
        """Classify *transcript* and report the command plus the matching pattern."""
        command = self._classifier.classify(transcript)
        data = {
            "transcript": transcript,
            "command": command.model_dump(),
            "pattern": self._classifier.match_name(transcript),
        }
        field_ref = getattr(command, "field_ref", None)
        if field_ref is not None:
            try:
                data["field_id"] = self._registry.resolve(field_ref)
            except FieldNotFound:
                data["field_id"] = None
        return ServiceResult(ok=True, op="classify", data=data)

    @traced
    def normalize(self, kind_or_field: str, raw: str) -> ServiceResult:
        """Normalize *raw* for a field kind, or for the kind of a spoken field name."""
        op = "normalize"
        data: dict[str, object] = {"raw": raw}
        try:
            kind = FieldKind(kind_or_field)
        except ValueError:
            try:
                field_id = self._registry.resolve(kind_or_field)
            except FieldNotFound:
                return ServiceResult.failure(
                    op,
                    FIELD_NOT_FOUND,
                    f'"{kind_or_field}" is neither a field kind nor a known field',
                    field_ref=kind_or_field,
                )
            kind = self._registry.describe(field_id).kind
            data["field_id"] = field_id
        data["kind"] = str(kind)
        data["value"] = normalize(kind, raw)
        return ServiceResult(ok=True, op=op, data=data)
