# date_controller.py
"""State and event handling behind :class:`UI.date_picker.DatePicker`.

The controller reconciles typed text, calendar selections and host props
into one consistent state (selected date, displayed text, error message and
popup visibility).  It knows nothing about Tk; the widget forwards events to
it and re-renders from the state passed to its listeners.

``error_message`` is deliberately four-valued:

* ``None``  - never validated
* ``" "``   - touched, required and empty, no message text to show
* ``""``    - validated and valid
* other     - validated and invalid, the text is shown to the user
"""
import datetime
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Callable, Optional

from logging_config import get_logger
from utils import compare_dates, default_format_date, default_parse_date, to_day

logger = get_logger(__name__)

REQUIRED_SENTINEL = " "
WEEKDAYS = ("monday", "sunday")
_DATE_PROPS = ("value", "today", "min_date", "max_date", "initial_picker_date")


class DismissReason(str, Enum):
    SELECTION = "selection"
    BLUR = "blur"
    OUTSIDE_CLICK = "outside-click"
    ESCAPE = "escape"


@dataclass
class DatePickerStrings:
    """User facing texts. Missing error messages are shown as a blank error."""

    invalid_input_error_message: Optional[str] = None
    is_out_of_bounds_error_message: Optional[str] = None
    required_error_message: Optional[str] = None
    go_to_today: str = "Go to today"


@dataclass
class DatePickerProps:
    value: Optional[datetime.date] = None
    today: Optional[datetime.date] = None
    min_date: Optional[datetime.date] = None
    max_date: Optional[datetime.date] = None
    initial_picker_date: Optional[datetime.date] = None
    is_required: bool = False
    disabled: bool = False
    allow_text_input: bool = False
    disable_auto_focus: bool = False
    format_date: Callable[[datetime.date], str] = default_format_date
    parse_date: Callable[[str], Optional[datetime.date]] = default_parse_date
    strings: DatePickerStrings = field(default_factory=DatePickerStrings)
    on_select_date: Optional[Callable[[Optional[datetime.date]], None]] = None
    on_after_menu_dismiss: Optional[Callable[[], None]] = None
    first_day_of_week: str = "sunday"
    show_week_numbers: bool = False
    show_go_to_today: bool = True

    def __post_init__(self):
        for name in _DATE_PROPS:
            setattr(self, name, to_day(getattr(self, name)))
        if self.format_date is None:
            self.format_date = default_format_date
        if self.parse_date is None:
            self.parse_date = default_parse_date
        if self.strings is None:
            self.strings = DatePickerStrings()
        for name in ("format_date", "parse_date"):
            if not callable(getattr(self, name)):
                raise TypeError(f"{name} must be callable")
        if self.first_day_of_week not in WEEKDAYS:
            raise ValueError(f"Invalid first_day_of_week: {self.first_day_of_week!r}")


@dataclass
class DatePickerState:
    selected_date: Optional[datetime.date] = None
    display_text: str = ""
    error_message: Optional[str] = None
    popup_shown: bool = False


@dataclass(frozen=True)
class CalendarProps:
    """What the calendar popup needs to render itself."""

    selected_date: Optional[datetime.date]
    today: datetime.date
    anchor_date: datetime.date
    min_date: Optional[datetime.date]
    max_date: Optional[datetime.date]
    format_date: Callable[[datetime.date], str]
    first_day_of_week: str
    show_week_numbers: bool
    show_go_to_today: bool


def validate_bounds(date, min_date=None, max_date=None) -> bool:
    """Return ``True`` if *date* lies inside the inclusive ``[min_date, max_date]`` range.

    Comparison is done per day; a ``None`` bound is open.
    """
    day = to_day(date)
    if min_date is not None and day < to_day(min_date):
        return False
    if max_date is not None and day > to_day(max_date):
        return False
    return True


class DateInputController:
    """Owns the date picker state; every change goes through one of its handlers."""

    def __init__(self, props: Optional[DatePickerProps] = None, **overrides):
        if props is None:
            props = DatePickerProps(**overrides)
        elif overrides:
            props = replace(props, **overrides)
        self._props = props
        self._state = DatePickerState(
            selected_date=props.value,
            display_text=self._format(props.value),
        )
        self._listeners = []
        # which check produced the current error: "bounds", "parse" or "required"
        self._error_kind = None
        # focus returning to the field after the calendar closes must not reopen it
        self._prevent_focus_opening_picker = False

    # ------------------------------------------------------------------
    # Read-only view of the state
    # ------------------------------------------------------------------
    @property
    def props(self) -> DatePickerProps:
        return self._props

    @property
    def state(self) -> DatePickerState:
        return replace(self._state)

    @property
    def selected_date(self):
        return self._state.selected_date

    @property
    def display_text(self) -> str:
        return self._state.display_text

    @property
    def error_message(self):
        return self._state.error_message

    @property
    def popup_shown(self) -> bool:
        return self._state.popup_shown

    @property
    def anchor_date(self) -> datetime.date:
        """Month the calendar opens on."""
        return (
            self._state.selected_date
            or self._props.initial_picker_date
            or datetime.date.today()
        )

    def calendar_props(self) -> CalendarProps:
        props = self._props
        return CalendarProps(
            selected_date=self._state.selected_date,
            today=props.today or datetime.date.today(),
            anchor_date=self.anchor_date,
            min_date=props.min_date,
            max_date=props.max_date,
            format_date=props.format_date,
            first_day_of_week=props.first_day_of_week,
            show_week_numbers=props.show_week_numbers,
            show_go_to_today=props.show_go_to_today,
        )

    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # Popup
    # ------------------------------------------------------------------
    def open_popup(self):
        if self._props.disabled:
            logger.debug("Open request ignored: date picker is disabled")
            return
        if self._state.popup_shown:
            return
        self._update(popup_shown=True)
        logger.debug("Calendar popup opened on %s", self.anchor_date.strftime("%B %Y"))

    def dismiss_popup(self, reason=DismissReason.BLUR):
        reason = DismissReason(reason)
        if not self._state.popup_shown:
            return
        changes = {"popup_shown": False}
        if (
            reason is not DismissReason.SELECTION
            and self._props.is_required
            and self._state.selected_date is None
            and not (self._state.error_message or "").strip()
        ):
            changes["error_message"] = REQUIRED_SENTINEL
            changes["error_kind"] = "required"
        if reason is not DismissReason.BLUR:
            self._prevent_focus_opening_picker = True
        self._update(**changes)
        logger.debug("Calendar popup dismissed (%s)", reason.value)
        self._after_menu_dismiss()

    def on_calendar_date_selected(self, date):
        if self._props.disabled:
            logger.debug("Calendar selection ignored: date picker is disabled")
            return
        day = to_day(date)
        was_open = self._state.popup_shown
        self._prevent_focus_opening_picker = True
        self._update(
            selected_date=day,
            display_text=self._format(day),
            error_message=self._bounds_error(day),
            error_kind="bounds",
            popup_shown=False,
        )
        logger.debug("Date %s selected from calendar", day.isoformat())
        self._notify_select(day)
        if was_open:
            self._after_menu_dismiss()

    # ------------------------------------------------------------------
    # Text field
    # ------------------------------------------------------------------
    def on_text_changed(self, raw: str):
        props = self._props
        if not props.allow_text_input or props.disabled:
            return
        if self._state.popup_shown:
            self.dismiss_popup(DismissReason.BLUR)
        self._update(display_text=raw)

    def on_text_committed(self):
        props = self._props
        strings = props.strings
        state = self._state
        text = state.display_text

        if not props.allow_text_input:
            if props.is_required and state.selected_date is None:
                self._update(error_message=self._required_error(), error_kind="required")
            return

        selected = state.selected_date
        if selected is not None and text == self._format(selected):
            # nothing new was typed, just refresh the bound check
            self._update(error_message=self._bounds_error(selected), error_kind="bounds")
            return

        if not text.strip():
            error = self._required_error() if props.is_required else ""
            self._update(selected_date=None, display_text="", error_message=error, error_kind="required")
            logger.debug("Empty text committed, selection cleared")
            self._notify_select(None)
            return

        parsed = self._parse(text)
        if parsed is None:
            self._update(
                error_message=strings.invalid_input_error_message or REQUIRED_SENTINEL,
                error_kind="parse",
            )
            logger.debug("Could not parse %r as a date", text)
            return

        error = self._bounds_error(parsed)
        self._update(
            selected_date=parsed,
            display_text=self._format(parsed),
            error_message=error,
            error_kind="bounds",
        )
        if error:
            logger.debug("Typed date %s is out of bounds", parsed.isoformat())
        self._notify_select(parsed)

    def on_text_field_click(self):
        props = self._props
        if not props.disable_auto_focus and not self._state.popup_shown and not props.disabled:
            self.open_popup()
            return
        if props.allow_text_input:
            self.dismiss_popup(DismissReason.BLUR)

    def on_text_field_focus(self):
        props = self._props
        if props.disable_auto_focus or props.allow_text_input:
            return
        if self._prevent_focus_opening_picker:
            self._prevent_focus_opening_picker = False
        else:
            self.open_popup()

    def on_enter_key(self):
        if not self._state.popup_shown:
            self.on_text_committed()
            self.open_popup()
        elif self._props.allow_text_input:
            self.dismiss_popup(DismissReason.BLUR)
            self.on_text_committed()

    def on_escape_key(self):
        self.dismiss_popup(DismissReason.ESCAPE)

    # ------------------------------------------------------------------
    # Host updates
    # ------------------------------------------------------------------
    def update_props(self, **changes):
        """Apply new props from the host and re-validate what they affect."""
        known = {f.name for f in fields(DatePickerProps)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise TypeError(f"Unknown date picker props: {', '.join(unknown)}")

        old = self._props
        new = replace(old, **changes)
        self._props = new
        selected = self._state.selected_date

        if new.disabled and self._state.popup_shown:
            self._update(popup_shown=False)
            logger.debug("Calendar popup closed: date picker disabled")

        if (
            "value" in changes
            and not compare_dates(old.value, new.value)
            and not compare_dates(selected, new.value)
        ):
            error, kind = self._error_for_value(new)
            self._update(
                selected_date=new.value,
                display_text=self._format(new.value),
                error_message=error,
                error_kind=kind,
                popup_shown=False,
            )
            logger.debug("Value overridden by host: %s", new.value)
            return

        if selected is not None and new.format_date is not old.format_date:
            self._update(display_text=self._format(selected))

        bounds_changed = not (
            compare_dates(old.min_date, new.min_date)
            and compare_dates(old.max_date, new.max_date)
        )
        if selected is not None and bounds_changed:
            if not validate_bounds(selected, new.min_date, new.max_date):
                logger.debug("Bounds changed, %s is now out of bounds", selected.isoformat())
                self._update(error_message=self._out_of_bounds_error(), error_kind="bounds")
            elif self._error_kind == "bounds":
                self._update(error_message="")

        if new.is_required != old.is_required and selected is None and not self._state.display_text:
            if new.is_required and new.initial_picker_date is None:
                self._update(error_message=self._required_error(), error_kind="required")
            elif not new.is_required and self._error_kind == "required":
                self._update(error_message="")

    def reset(self):
        self._update(selected_date=None, display_text="", error_message=None, popup_shown=False)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _format(self, day) -> str:
        if day is None:
            return ""
        return str(self._props.format_date(day))

    def _parse(self, text):
        try:
            parsed = self._props.parse_date(text)
        except (ValueError, OverflowError) as exc:
            logger.debug("parse_date rejected %r: %s", text, exc)
            return None
        return to_day(parsed)

    def _required_error(self, props=None) -> str:
        props = props or self._props
        return props.strings.required_error_message or REQUIRED_SENTINEL

    def _out_of_bounds_error(self, props=None) -> str:
        props = props or self._props
        return props.strings.is_out_of_bounds_error_message or REQUIRED_SENTINEL

    def _bounds_error(self, day) -> str:
        if validate_bounds(day, self._props.min_date, self._props.max_date):
            return ""
        return self._out_of_bounds_error()

    def _error_for_value(self, props):
        """Return the ``(error_message, error_kind)`` a host supplied value starts with."""
        if props.value is None:
            if props.is_required and props.initial_picker_date is None:
                return self._required_error(props), "required"
            return None, None
        if not validate_bounds(props.value, props.min_date, props.max_date):
            return self._out_of_bounds_error(props), "bounds"
        return None, None

    def _update(self, error_kind=None, **changes):
        if "error_message" in changes:
            self._error_kind = error_kind if changes["error_message"] else None
        changed = False
        for name, value in changes.items():
            if getattr(self._state, name) != value:
                setattr(self._state, name, value)
                changed = True
        if changed:
            for listener in list(self._listeners):
                listener(self.state)

    def _notify_select(self, day):
        if self._props.on_select_date:
            self._props.on_select_date(day)

    def _after_menu_dismiss(self):
        if self._props.on_after_menu_dismiss:
            self._props.on_after_menu_dismiss()
