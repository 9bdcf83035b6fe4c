import datetime
import os
from dotenv import load_dotenv

from date_controller import DatePickerStrings, WEEKDAYS

# Load variables from the `.env` file placed in the project root so the
# widgets pick up the same configuration wherever they are created from.
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(value: str | None) -> bool | None:
    """Return a boolean parsed from *value* or ``None`` when it is empty."""
    if not value or not value.strip():
        return None
    value = value.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _parse_weekday(value: str | None) -> str | None:
    """Return ``"monday"`` / ``"sunday"`` from *value* or ``None``."""
    if not value or not value.strip():
        return None
    value = value.strip().lower()
    if value in WEEKDAYS:
        return value
    raise ValueError(f"Invalid first day of week: {value!r}")


def _parse_iso_date(value: str | None) -> datetime.date | None:
    """Return the ``YYYY-MM-DD`` date in *value* or ``None``."""
    if not value or not value.strip():
        return None
    try:
        return datetime.date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"Invalid ISO date: {value!r}") from None


def load_strings() -> DatePickerStrings:
    """Return the picker messages configured in the environment."""
    strings = DatePickerStrings(
        invalid_input_error_message=os.environ.get("DATEPICKER_INVALID_INPUT_MESSAGE") or None,
        is_out_of_bounds_error_message=os.environ.get("DATEPICKER_OUT_OF_BOUNDS_MESSAGE") or None,
        required_error_message=os.environ.get("DATEPICKER_REQUIRED_MESSAGE") or None,
    )
    go_to_today = os.environ.get("DATEPICKER_GO_TO_TODAY")
    if go_to_today:
        strings.go_to_today = go_to_today
    return strings


def load_picker_options() -> dict:
    """Return ``DatePickerProps`` overrides read from the environment.

    Only variables that are set are included, so the result can be splatted
    over the widget defaults.
    """
    options = {"strings": load_strings()}

    allow_text = _parse_bool(os.environ.get("DATEPICKER_ALLOW_TEXT_INPUT"))
    if allow_text is not None:
        options["allow_text_input"] = allow_text

    week_numbers = _parse_bool(os.environ.get("DATEPICKER_SHOW_WEEK_NUMBERS"))
    if week_numbers is not None:
        options["show_week_numbers"] = week_numbers

    first_day = _parse_weekday(os.environ.get("DATEPICKER_FIRST_DAY_OF_WEEK"))
    if first_day:
        options["first_day_of_week"] = first_day

    min_date = _parse_iso_date(os.environ.get("DATEPICKER_MIN_DATE"))
    max_date = _parse_iso_date(os.environ.get("DATEPICKER_MAX_DATE"))
    if min_date and max_date and min_date > max_date:
        raise ValueError(f"DATEPICKER_MIN_DATE {min_date} is after DATEPICKER_MAX_DATE {max_date}")
    if min_date:
        options["min_date"] = min_date
    if max_date:
        options["max_date"] = max_date

    return options
