from datetime import datetime, timedelta, timezone

from tweetfleet.categories import categorize
from tweetfleet.messages import (
    esi_status_attachments,
    format_esi_time,
    format_running_for,
    server_status_attachment,
    server_unavailable_attachment,
)
from tweetfleet.models import RouteStatus, ServerStatus, parse_esi_time

STARTED = datetime(2026, 10, 19, 11, 2, 3, tzinfo=timezone.utc)


def test_esi_time_round_trips_layout():
    assert parse_esi_time("2026-10-19T11:02:03Z") == STARTED
    assert format_esi_time(STARTED) == "2026-10-19T11:02:03Z"


def test_running_for_renders_hours_minutes_seconds():
    now = STARTED + timedelta(hours=3, minutes=4, seconds=5)

    assert format_running_for(STARTED, now) == "03h 04m 05s"


def test_running_for_wraps_after_a_day():
    now = STARTED + timedelta(days=1, hours=2, minutes=0, seconds=9)

    assert format_running_for(STARTED, now) == "02h 00m 09s"


def test_server_unavailable_reports_offline_on_503():
    attachment = server_unavailable_attachment(503)

    assert attachment["color"] == "danger"
    assert attachment["text"] == "Offline"
    assert attachment["fallback"] == "Tranquility Status: Offline"


def test_server_unavailable_is_indeterminate_for_other_errors():
    attachment = server_unavailable_attachment(502)

    assert attachment["text"].startswith("Cannot determine server status")


def test_server_status_summary_fields():
    status = ServerStatus(players=23456, server_version="2345678", start_time=STARTED)
    now = STARTED + timedelta(hours=1)

    attachment = server_status_attachment(status, now)

    assert attachment["color"] == "good"
    fields = {field["title"]: field["value"] for field in attachment["fields"]}
    assert fields == {
        "Players Online": "23456",
        "Started At": "2026-10-19T11:02:03Z",
        "Running For": "01h 00m 00s",
    }
    assert attachment["fallback"] == "Tranquility status: 23456 player online, started at 2026-10-19T11:02:03Z"


def test_server_status_in_vip_is_flagged():
    status = ServerStatus(players=0, start_time=STARTED, vip=True)

    attachment = server_status_attachment(status, STARTED)

    assert attachment["color"] == "warning"
    assert attachment["fallback"].endswith(", in VIP")


def test_esi_status_attachments_all_green():
    assert esi_status_attachments([]) == [{"text": ":ok_hand:"}]


def test_esi_status_attachments_per_bucket():
    routes = [
        RouteStatus(method="get", route="/v1/a/", status="red"),
        RouteStatus(method="get", route="/v1/b/", status="yellow"),
        RouteStatus(method="get", route="/v1/c/", status="green"),
        RouteStatus(method="get", route="/v1/d/", status="green"),
    ]

    attachments = esi_status_attachments(categorize(routes))

    assert [a["color"] for a in attachments] == ["danger", "warning"]
    assert attachments[0]["fallback"] == "Red: 1 out of 4, -24.000%"
    assert attachments[0]["text"] == ":fire: 1 Red (out of 4,  -24.000%) :fire: ```GET /v1/a/```"
