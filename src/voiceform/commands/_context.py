"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin/registry initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from voiceform.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from voiceform.config.settings import VoiceFormSettings
    from voiceform.domain.fields import FieldRegistry
    from voiceform.plugins.manager import PluginManager
    from voiceform.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins and the field registry are built on first use so ``--help``
    and ``--version`` never load entry points.
    """

    def __init__(self, settings: VoiceFormSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        self._plugins_loaded = False
        self._registry: FieldRegistry | None = None

        # Configure structured logging
        from voiceform.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from voiceform.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def plugins(self) -> PluginManager | None:
        """Entry-point plugins, or None when ``[plugins] enabled = false``."""
        if not self._plugins_loaded:
            self._plugins_loaded = True
            if self.settings.plugins.enabled:
                from voiceform.plugins.manager import PluginManager

                self._plugins = PluginManager()
                loaded = self._plugins.discover_and_load()
                if loaded:
                    logger.debug("Loaded plugins: %s", ", ".join(loaded))
        return self._plugins

    @property
    def registry(self) -> FieldRegistry:
        """Built-in tax form plus ``[form.aliases]`` and plugin aliases."""
        if self._registry is None:
            from voiceform.domain.fields import FieldNotFound, FieldRegistry

            base = FieldRegistry.default()
            try:
                registry = base.with_aliases(self.settings.form.aliases)
            except FieldNotFound as exc:
                msg = f"Unknown field id in [form.aliases]: {exc.phrase}"
                raise click.ClickException(msg) from exc
            except ValueError as exc:
                raise click.ClickException(f"Invalid [form.aliases]: {exc}") from exc

            if self.plugins is not None:
                contributed = self.plugins.collect_field_aliases()
                known = {k: v for k, v in contributed.items() if k in registry}
                for field_id in sorted(set(contributed) - set(known)):
                    logger.warning("Ignoring plugin aliases for unknown field %s", field_id)
                try:
                    registry = registry.with_aliases(known)
                except ValueError:
                    logger.warning("Ignoring conflicting plugin aliases", exc_info=True)
            self._registry = registry
        return self._registry

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        self.echo(result)
        if not result.ok:
            raise SystemExit(1)

    def echo(self, result: ServiceResult) -> None:
        """Format *result* and route it to stdout or stderr without exiting."""
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
