# app/shared/utils/dates.py
from datetime import date, datetime
from typing import Optional, Tuple, Union

from dateutil.relativedelta import relativedelta


def last_month_window(today: Optional[Union[date, datetime]] = None) -> Tuple[datetime, datetime]:
    """
    Ventana del mes calendario anterior: [primer día del mes pasado, primer día del mes actual).

    Usa el calendario local del servidor (datetime naive).
    """
    today = today or datetime.now()
    first_day_current = datetime(today.year, today.month, 1)
    first_day_previous = first_day_current - relativedelta(months=1)
    return first_day_previous, first_day_current
