import datetime
import tkinter as tk
from dataclasses import fields
from tkinter import ttk
from tkcalendar import Calendar

from date_controller import DateInputController, DatePickerProps, DismissReason
from logging_config import get_logger

logger = get_logger(__name__)

_PROP_NAMES = {f.name for f in fields(DatePickerProps)}


class DatePicker(ttk.Frame):
    """Entry with a popup calendar for selecting a date.

    Keyword arguments named like :class:`DatePickerProps` fields configure
    the picker, everything else is passed to ``ttk.Frame``.  Each time the
    picker reports a date (or ``None``) the ``<<DateEntrySelected>>``
    virtual event is generated.
    """

    def __init__(self, master=None, date=None, width=12, controller=None, **kwargs):
        props = {name: kwargs.pop(name) for name in list(kwargs) if name in _PROP_NAMES}
        super().__init__(master, **kwargs)

        if controller is None:
            if date is not None:
                props.setdefault("value", date)
            self._user_on_select = props.pop("on_select_date", None)
            controller = DateInputController(**props)
        else:
            self._user_on_select = controller.props.on_select_date
        controller.update_props(on_select_date=self._on_select_date)
        self.controller = controller

        self._top = None
        self._calendar = None
        self._syncing = False

        self._var = tk.StringVar()
        self._error_var = tk.StringVar()
        self.entry = ttk.Entry(self, textvariable=self._var, width=width)
        self.entry.grid(row=0, column=0, sticky="ew")
        self.button = ttk.Button(self, text="📅", width=2, command=self._on_button)
        self.button.grid(row=0, column=1)
        self.error_label = ttk.Label(self, textvariable=self._error_var, foreground="red")
        self.error_label.grid(row=1, column=0, columnspan=2, sticky="w")
        self.columnconfigure(0, weight=1)

        self._var.trace_add("write", self._on_var_write)
        self.entry.bind("<FocusIn>", lambda e: self.controller.on_text_field_focus())
        self.entry.bind("<FocusOut>", self._on_focus_out)
        self.entry.bind("<Button-1>", lambda e: self.controller.on_text_field_click())
        self.entry.bind("<Return>", lambda e: self.controller.on_enter_key())
        self.entry.bind("<Escape>", lambda e: self.controller.on_escape_key())

        self.controller.add_listener(self._render)
        self._render(self.controller.state)

    # -------------------------
    # Public API
    # -------------------------
    def get_date(self):
        """Return the selected date, or today when nothing is selected."""
        return self.controller.selected_date or datetime.date.today()

    def set_date(self, date):
        """Make *date* the picker value, like the host changing the ``value`` prop."""
        self.configure_props(value=date)

    def configure_props(self, **changes):
        if "on_select_date" in changes:
            self._user_on_select = changes.pop("on_select_date")
        self.controller.update_props(**changes)
        self._render(self.controller.state)

    def reset(self):
        self.controller.reset()

    def destroy(self):
        self.controller.remove_listener(self._render)
        self._close_popup()
        super().destroy()

    # -------------------------
    # Event handlers
    # -------------------------
    def _on_var_write(self, *_):
        if self._syncing:
            return
        self.controller.on_text_changed(self._var.get())

    def _on_focus_out(self, _event):
        # focus moves into the popup while it is open; commit once it closes
        if self.controller.popup_shown:
            return
        self.controller.on_text_committed()

    def _on_button(self):
        if self.controller.popup_shown:
            self.controller.dismiss_popup(DismissReason.BLUR)
        else:
            self.controller.open_popup()

    def _on_calendar_pick(self, day):
        if day is None:
            return
        self.controller.on_calendar_date_selected(day)
        if self.entry.winfo_exists():
            self.entry.focus_set()

    def _on_select_date(self, day):
        if self._user_on_select:
            self._user_on_select(day)
        self.event_generate("<<DateEntrySelected>>")

    # -------------------------
    # Rendering
    # -------------------------
    def _render(self, state):
        props = self.controller.props
        if self._var.get() != state.display_text:
            self._syncing = True
            try:
                self._var.set(state.display_text)
            finally:
                self._syncing = False
        self._error_var.set((state.error_message or "").strip())

        if props.disabled:
            self.entry.configure(state="disabled")
            self.button.state(["disabled"])
        else:
            self.entry.configure(state="normal" if props.allow_text_input else "readonly")
            self.button.state(["!disabled"])

        if state.popup_shown and self._top is None:
            self._open_popup()
        elif not state.popup_shown and self._top is not None:
            self._close_popup()

    def _open_popup(self):
        cal_props = self.controller.calendar_props()
        self._top = tk.Toplevel(self)
        self._top.transient(self)
        self._top.title("Calendar")
        x = self.entry.winfo_rootx()
        y = self.entry.winfo_rooty() + self.entry.winfo_height()
        self._top.geometry(f"+{x}+{y}")

        anchor = cal_props.anchor_date
        options = {
            "selectmode": "day",
            "year": anchor.year,
            "month": anchor.month,
            "firstweekday": cal_props.first_day_of_week,
            "showweeknumbers": cal_props.show_week_numbers,
            "mindate": cal_props.min_date,
            "maxdate": cal_props.max_date,
            "font": ("Segoe UI", 11),
        }
        if cal_props.selected_date is not None:
            options["day"] = cal_props.selected_date.day
        cal = Calendar(self._top, **options)
        cal.calevent_create(cal_props.today, cal_props.format_date(cal_props.today), "today")
        cal.tag_config("today", background="#1f6aa5", foreground="white")
        cal.pack(fill="both", expand=True)
        self._calendar = cal
        cal.bind("<<CalendarSelected>>", lambda e: self._on_calendar_pick(cal.selection_get()))

        if cal_props.show_go_to_today:
            ttk.Button(
                self._top,
                text=self.controller.props.strings.go_to_today,
                command=lambda: self._on_calendar_pick(cal_props.today),
            ).pack(fill="x")

        self._top.bind("<Escape>", lambda e: self.controller.on_escape_key())
        self._top.bind("<FocusOut>", lambda e: self.after_idle(self._check_popup_focus))
        self._top.protocol(
            "WM_DELETE_WINDOW",
            lambda: self.controller.dismiss_popup(DismissReason.OUTSIDE_CLICK),
        )
        cal.focus_set()
        logger.debug("Calendar popup created for %s", anchor.isoformat())

    def _check_popup_focus(self):
        top = self._top
        if top is None or not self.controller.popup_shown:
            return
        try:
            focused = self.focus_get()
        except KeyError:
            # focus sits on a Tk internal widget (e.g. a menu), leave the popup alone
            return
        if focused is not None:
            path, top_path = str(focused), str(top)
            if path == top_path or path.startswith(top_path + "."):
                return
        self.controller.dismiss_popup(DismissReason.OUTSIDE_CLICK)

    def _close_popup(self):
        top, self._top = self._top, None
        self._calendar = None
        if top is not None and top.winfo_exists():
            top.destroy()
            logger.debug("Calendar popup destroyed")
