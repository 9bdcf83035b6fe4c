import tkinter as tk
from tkinter import ttk, messagebox

from UI.date_picker import DatePicker
from UI.utils import load_picker_options
from logging_config import get_logger

logger = get_logger(__name__)


def describe_range(start, end) -> str:
    """Return a status line for the *start* / *end* selection."""
    if start is None and end is None:
        return "No dates selected"
    if end is None:
        return f"From {start.isoformat()}"
    if start is None:
        return f"Until {end.isoformat()}"
    days = (end - start).days
    if days < 0:
        return f"{start.isoformat()} - {end.isoformat()} (end before start)"
    return f"{start.isoformat()} - {end.isoformat()} ({days + 1} days)"


def build_range_form(parent, options=None):
    """Create the start/end pickers inside *parent* and wire them together.

    The end picker's ``min_date`` follows the start selection, so moving the
    start past the current end date flags the end picker immediately.
    Returns ``(start_picker, end_picker, status_var)``.
    """
    options = dict(options if options is not None else load_picker_options())
    options.setdefault("allow_text_input", True)

    frm = ttk.Frame(parent, padding=10)
    frm.pack(fill="x", side="top")
    status_var = tk.StringVar(value=describe_range(None, None))

    def refresh_status(_day=None):
        status_var.set(describe_range(dp_start.controller.selected_date, dp_end.controller.selected_date))

    def on_start_selected(day):
        dp_end.configure_props(min_date=day or options.get("min_date"))
        refresh_status()

    ttk.Label(frm, text="Start:").grid(row=0, column=0, sticky="ne", padx=5, pady=5)
    dp_start = DatePicker(frm, width=18, is_required=True, on_select_date=on_start_selected, **options)
    dp_start.grid(row=0, column=1, sticky="w", padx=5, pady=5)

    ttk.Label(frm, text="End:").grid(row=1, column=0, sticky="ne", padx=5, pady=5)
    dp_end = DatePicker(frm, width=18, on_select_date=refresh_status, **options)
    dp_end.grid(row=1, column=1, sticky="w", padx=5, pady=5)

    ttk.Label(frm, textvariable=status_var).grid(row=2, column=0, columnspan=2, sticky="w", padx=5, pady=(10, 5))
    return dp_start, dp_end, status_var


def start_app(root=None, options=None):
    """Launch the demo window; an existing ``Tk`` instance can be passed as *root*."""
    owns_root = root is None
    if owns_root:
        root = tk.Tk()
        style = ttk.Style(root)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

    root.title("Date range")
    root.minsize(360, 200)

    dp_start, dp_end, status_var = build_range_form(root, options)

    def save():
        for name, picker in (("Start", dp_start), ("End", dp_end)):
            # commit whatever is still being typed
            picker.controller.on_text_committed()
            error = picker.controller.error_message
            if error:
                messagebox.showwarning("Invalid date", f"{name}: {error.strip() or 'please choose a date'}")
                return
        logger.info("Range saved: %s", status_var.get())
        messagebox.showinfo("Saved", status_var.get())

    def clear():
        dp_start.reset()
        dp_end.reset()
        status_var.set(describe_range(None, None))

    frm_bottom = ttk.Frame(root, padding=10)
    frm_bottom.pack(fill="x", side="bottom")
    ttk.Button(frm_bottom, text="Save", command=save).pack(side="right", padx=5)
    ttk.Button(frm_bottom, text="Clear", command=clear).pack(side="right", padx=5)

    if owns_root:
        root.mainloop()
    return dp_start, dp_end
