"""App Kivy: PIN de acceso, registro de peso, resumen y recordatorio diario."""

from __future__ import annotations

import logging
import traceback
from dataclasses import replace
from pathlib import Path

from peso_tool.excel_writer import ExcelLayout, default_export_path, write_weights_xlsx
from peso_tool.model import UnitSystem, WeightEntry
from peso_tool.reminders import (
    REMINDER_TEXT,
    REMINDER_TITLE,
    local_now,
    seconds_until_reminder,
)
from peso_tool.storage import SQLiteStore
from peso_tool.summary import build_overview, overview_lines
from peso_tool.units import format_weight, from_display, unit_label
from peso_tool.validation import parse_weight_text, validate_pin, validate_weight

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "peso_tool.sqlite3"


def run_app(db_path: Path | None = None) -> int:
    """Lanza la app Kivy."""
    from kivy.app import App
    from kivy.clock import Clock
    from kivy.core.window import Window
    from kivy.uix.boxlayout import BoxLayout
    from kivy.uix.button import Button
    from kivy.uix.gridlayout import GridLayout
    from kivy.uix.label import Label
    from kivy.uix.popup import Popup
    from kivy.uix.scrollview import ScrollView
    from kivy.uix.textinput import TextInput

    class PesoToolApp(App):
        """Main Kivy app."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.store = SQLiteStore(db_path or Path.cwd() / DEFAULT_DB_NAME)
            self.app_config = self.store.load_config()
            self.entries: list[WeightEntry] = []
            self.root_box: BoxLayout | None = None
            self.status: Label | None = None
            self.overview_label: Label | None = None
            self.history_grid: GridLayout | None = None
            self._reminder_event: object | None = None

        def build(self) -> BoxLayout:
            Window.bind(on_key_down=self._on_key_down)
            self.root_box = BoxLayout(orientation="vertical", spacing=8, padding=10)
            if self.store.has_pin():
                self._show_enter_pin()
            else:
                self._show_set_pin()
            return self.root_box

        def on_start(self) -> None:
            if self.app_config.reminder_enabled:
                self._schedule_reminder()

        def _on_key_down(
            self,
            _window: object,
            keycode: int,
            _scancode: int,
            _text: str,
            _modifiers: list[str],
        ) -> bool:
            # Esc: salir de fullscreen o cerrar app.
            if keycode != 27:
                return False
            if Window.fullscreen:
                Window.fullscreen = False
            else:
                self.stop()
            return True

        def _replace_root(self, widget: BoxLayout) -> None:
            if self.root_box is None:
                return
            self.root_box.clear_widgets()
            self.root_box.add_widget(widget)

        # ---------------------------------------------------------- PIN gate

        def _pin_input(self) -> TextInput:
            return TextInput(
                password=True,
                multiline=False,
                input_filter="int",
                size_hint_y=None,
                height=40,
            )

        def _show_set_pin(self) -> None:
            box = BoxLayout(orientation="vertical", spacing=8, padding=20)
            box.add_widget(Label(text="Crea un PIN de 4 dígitos"))
            pin = self._pin_input()
            confirm = self._pin_input()
            error = Label(text="", size_hint_y=None, height=30)
            save_btn = Button(text="Guardar PIN", size_hint_y=None, height=44)

            def on_save(*_: object) -> None:
                message = validate_pin(pin.text)
                if message is None and pin.text != confirm.text:
                    message = "Los PIN no coinciden"
                if message is not None:
                    error.text = message
                    return
                self.store.set_pin(pin.text)
                logger.info("PIN created, unlocking")
                self._show_main()

            save_btn.bind(on_press=on_save)
            box.add_widget(pin)
            box.add_widget(confirm)
            box.add_widget(error)
            box.add_widget(save_btn)
            self._replace_root(box)

        def _show_enter_pin(self) -> None:
            box = BoxLayout(orientation="vertical", spacing=8, padding=20)
            box.add_widget(Label(text="Ingresa tu PIN"))
            pin = self._pin_input()
            error = Label(text="", size_hint_y=None, height=30)
            unlock_btn = Button(text="Desbloquear", size_hint_y=None, height=44)

            def on_unlock(*_: object) -> None:
                if self.store.check_pin(pin.text):
                    logger.info("Unlocked")
                    self._show_main()
                    return
                logger.debug("Wrong PIN")
                pin.text = ""
                error.text = "PIN incorrecto"

            unlock_btn.bind(on_press=on_unlock)
            pin.bind(on_text_validate=on_unlock)
            box.add_widget(pin)
            box.add_widget(error)
            box.add_widget(unlock_btn)
            self._replace_root(box)

        # ------------------------------------------------------- main screen

        def _show_main(self) -> None:
            root = BoxLayout(orientation="vertical", spacing=8)

            units = BoxLayout(orientation="horizontal", spacing=8, size_hint_y=None, height=40)
            kg_btn = Button(text="Kilogramos")
            lb_btn = Button(text="Libras")
            kg_btn.bind(on_press=lambda *_args: self._set_unit(UnitSystem.KG))
            lb_btn.bind(on_press=lambda *_args: self._set_unit(UnitSystem.LB))
            units.add_widget(kg_btn)
            units.add_widget(lb_btn)
            root.add_widget(units)

            reminders = BoxLayout(
                orientation="horizontal", spacing=8, size_hint_y=None, height=40
            )
            hour = self.app_config.reminder_hour
            minute = self.app_config.reminder_minute
            enable_btn = Button(text=f"Recordar a las {hour:02d}:{minute:02d}")
            disable_btn = Button(text="Sin recordatorio")
            enable_btn.bind(on_press=lambda *_args: self._set_reminder(True))
            disable_btn.bind(on_press=lambda *_args: self._set_reminder(False))
            reminders.add_widget(enable_btn)
            reminders.add_widget(disable_btn)
            root.add_widget(reminders)

            self.overview_label = Label(text="", size_hint_y=None, height=130)
            root.add_widget(self.overview_label)

            actions = BoxLayout(orientation="horizontal", spacing=8, size_hint_y=None, height=40)
            add_btn = Button(text="Agregar peso")
            export_btn = Button(text="Exportar Excel")
            exit_btn = Button(text="Salir")
            add_btn.bind(on_press=self._open_add_popup)
            export_btn.bind(on_press=self._on_export)
            exit_btn.bind(on_press=lambda *_args: self.stop())
            actions.add_widget(add_btn)
            actions.add_widget(export_btn)
            actions.add_widget(exit_btn)
            root.add_widget(actions)

            self.status = Label(text="", size_hint_y=None, height=30)
            root.add_widget(self.status)

            root.add_widget(Label(text="Tus registros", size_hint_y=None, height=30))
            self.history_grid = GridLayout(cols=1, spacing=4, size_hint_y=None)
            self.history_grid.bind(minimum_height=self.history_grid.setter("height"))
            scroll = ScrollView()
            scroll.add_widget(self.history_grid)
            root.add_widget(scroll)

            self._replace_root(root)
            self._refresh()

        def _refresh(self) -> None:
            self.entries = self.store.list_entries()
            unit = self.app_config.unit
            if self.overview_label is not None:
                overview = build_overview(self.entries, unit)
                self.overview_label.text = "\n".join(overview_lines(overview))
            if self.history_grid is None:
                return
            self.history_grid.clear_widgets()
            for entry in self.entries:
                row = BoxLayout(orientation="horizontal", size_hint_y=None, height=36)
                row.add_widget(Label(text=_entry_text(entry, unit)))
                delete_btn = Button(text="Borrar", size_hint_x=0.25)
                delete_btn.bind(
                    on_press=lambda *_args, entry_id=entry.id: self._on_delete(entry_id)
                )
                row.add_widget(delete_btn)
                self.history_grid.add_widget(row)

        def _set_unit(self, unit: UnitSystem) -> None:
            self._save_config(unit=unit)
            self._refresh()

        def _save_config(self, **changes: object) -> None:
            self.app_config = replace(self.app_config, **changes)
            self.store.save_config(self.app_config)

        def _on_delete(self, entry_id: int) -> None:
            try:
                self.store.delete_entry(entry_id)
            except Exception as exc:
                self._show_error("borrar", exc)
                return
            self._refresh()
            if self.status is not None:
                self.status.text = f"Registro {entry_id} borrado."

        def _open_add_popup(self, _: object) -> None:
            unit = self.app_config.unit
            value_input = TextInput(
                multiline=False,
                input_filter="float",
                hint_text=f"Peso ({unit_label(unit)})",
                size_hint_y=None,
                height=40,
            )
            note_input = TextInput(
                multiline=False,
                hint_text="Nota (opcional)",
                size_hint_y=None,
                height=40,
            )
            error = Label(text="", size_hint_y=None, height=30)
            footer = BoxLayout(orientation="horizontal", size_hint_y=None, height=42)
            cancel_btn = Button(text="Cancelar")
            save_btn = Button(text="Guardar")
            footer.add_widget(cancel_btn)
            footer.add_widget(save_btn)

            content = BoxLayout(orientation="vertical", spacing=8, padding=8)
            content.add_widget(value_input)
            content.add_widget(note_input)
            content.add_widget(error)
            content.add_widget(footer)
            popup = Popup(title="Agregar peso", content=content, size_hint=(0.9, 0.6))

            def on_save(*_: object) -> None:
                value = parse_weight_text(value_input.text)
                message = validate_weight(value, unit)
                if message is not None or value is None:
                    error.text = message or ""
                    return
                try:
                    self.store.add_entry(from_display(value, unit), note=note_input.text)
                except Exception as exc:
                    popup.dismiss()
                    self._show_error("guardar", exc)
                    return
                popup.dismiss()
                self._refresh()
                if self.status is not None:
                    self.status.text = "Peso guardado."

            cancel_btn.bind(on_press=lambda *_args: popup.dismiss())
            save_btn.bind(on_press=on_save)
            popup.open()

        def _on_export(self, _: object) -> None:
            config = self.app_config
            if not self.entries:
                if self.status is not None:
                    self.status.text = "No hay datos para exportar."
                return
            out_path = default_export_path(config.export_dir, local_now())
            try:
                write_weights_xlsx(self.entries, out_path, ExcelLayout(), config.unit)
            except Exception as exc:
                self._show_error("exportar", exc)
                return
            if self.status is not None:
                self.status.text = f"Excel generado: {out_path}"

        # --------------------------------------------------------- reminders

        def _set_reminder(self, enabled: bool) -> None:
            self._save_config(reminder_enabled=enabled)
            if enabled:
                self._schedule_reminder()
                text = (
                    f"Recordatorio diario a las "
                    f"{self.app_config.reminder_hour:02d}:"
                    f"{self.app_config.reminder_minute:02d}."
                )
            else:
                self._cancel_reminder()
                text = "Recordatorio desactivado."
            if self.status is not None:
                self.status.text = text

        def _schedule_reminder(self) -> None:
            self._cancel_reminder()
            delay = seconds_until_reminder(
                local_now(),
                self.app_config.reminder_hour,
                self.app_config.reminder_minute,
            )
            self._reminder_event = Clock.schedule_once(self._on_reminder, delay)
            logger.info("Reminder scheduled in %.0f s", delay)

        def _cancel_reminder(self) -> None:
            if self._reminder_event is not None:
                self._reminder_event.cancel()  # type: ignore[attr-defined]
                self._reminder_event = None
                logger.info("Reminder cancelled")

        def _on_reminder(self, _dt: float) -> None:
            self._reminder_event = None
            Popup(
                title=REMINDER_TITLE,
                content=Label(text=REMINDER_TEXT),
                size_hint=(0.8, 0.3),
            ).open()
            if self.app_config.reminder_enabled:
                self._schedule_reminder()

        def _show_error(self, action: str, exc: Exception) -> None:
            logger.error("Error al %s: %s", action, exc)
            summary, trace = error_report(action, exc)
            if self.status is not None:
                self.status.text = summary
            details = TextInput(
                readonly=True,
                text=trace,
                multiline=True,
                do_wrap=False,
            )
            Popup(
                title=f"Error al {action}",
                content=details,
                size_hint=(0.92, 0.7),
            ).open()

    PesoToolApp().run()
    return 0


def _entry_text(entry: WeightEntry, unit: UnitSystem) -> str:
    """One history row: value, date and note."""
    text = f"{format_weight(entry.weight_kg, unit)}   {entry.date}"
    if entry.note:
        text += f"   {entry.note}"
    return text


def error_report(action: str, exc: BaseException) -> tuple[str, str]:
    """Status line and traceback text shown when an action fails."""
    summary = f"Error al {action} ({type(exc).__name__}): {exc}"
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return summary, trace
