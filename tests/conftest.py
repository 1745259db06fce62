import pytest

from factories import make_event, utc


@pytest.fixture
def weekly_class():
    # Mon-Fri 9:00-10:00 in MY since the start of October
    return make_event(
        "class-1",
        utc(2026, 10, 5, 9, 0),
        location="MY 150",
        rrule="FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR",
    )
