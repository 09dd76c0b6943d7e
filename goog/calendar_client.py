"""
CalendarClient — typed, high-level wrapper around the Google Calendar API v3 service.

Covers events (read, create, update, quick-add, RSVP, recurring instances),
the user's calendar list, calendar ACL rules and free/busy queries. Timed
events carry UTC-aware datetimes; all-day events carry midnight in the
client's local timezone (UTC unless configured).
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from googleapiclient.errors import HttpError

from .exceptions import CalendarError, InvalidTimeRangeError, ValidationError
from .google_factory import GoogleServiceFactory
from .models import (
    ACLRule,
    ACLScope,
    Attendee,
    Calendar,
    ConferenceData,
    Event,
    FreeBusyRequest,
    FreeBusyResponse,
    Reminder,
    TimePeriod,
    is_valid_response_status,
)

logger = logging.getLogger(__name__)

_UTC = ZoneInfo("UTC")


def _parse_rfc3339(s: str) -> Optional[datetime]:
    """Parse an RFC 3339 datetime string to an aware datetime, or None."""
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_event_dt(dt_dict: dict, tz: ZoneInfo) -> tuple[datetime, bool]:
    """
    Parse a Calendar API 'start' or 'end' dict into (datetime, is_all_day).

    All-day events have a 'date' key; timed events have 'dateTime'.
    """
    if "dateTime" in dt_dict:
        return datetime.fromisoformat(dt_dict["dateTime"].replace("Z", "+00:00")).astimezone(
            timezone.utc
        ), False
    d = date.fromisoformat(dt_dict["date"])
    return datetime(d.year, d.month, d.day, tzinfo=tz), True


def _parse_attendee(raw: dict) -> Attendee:
    return Attendee(
        email=raw.get("email", ""),
        display_name=raw.get("displayName", ""),
        response_status=raw.get("responseStatus", "needsAction"),
        optional=raw.get("optional", False),
        organizer=raw.get("organizer", False),
        is_self=raw.get("self", False),
    )


def _parse_conference(raw: Optional[dict]) -> Optional[ConferenceData]:
    """Keep conference data only when it has a video entry point."""
    if not raw:
        return None
    uri = next(
        (ep.get("uri", "") for ep in raw.get("entryPoints", [])
         if ep.get("entryPointType") == "video"),
        "",
    )
    if not uri:
        return None
    conf_type = raw.get("conferenceSolution", {}).get("key", {}).get("type", "")
    return ConferenceData(type=conf_type, uri=uri)


def _parse_event(raw: dict, calendar_id: str, tz: ZoneInfo = _UTC) -> Event:
    start, all_day = _parse_event_dt(raw.get("start", {}), tz)
    end, _ = _parse_event_dt(raw.get("end", {}), tz)

    reminders: list[Reminder] = []
    raw_reminders = raw.get("reminders", {})
    if not raw_reminders.get("useDefault", False):
        reminders = [
            Reminder(method=r.get("method", ""), minutes=int(r.get("minutes", 0)))
            for r in raw_reminders.get("overrides", [])
        ]

    organizer = raw.get("organizer")
    return Event(
        id=raw["id"],
        calendar_id=calendar_id,
        title=raw.get("summary", ""),
        description=raw.get("description", ""),
        location=raw.get("location", ""),
        start=start,
        end=end,
        all_day=all_day,
        recurrence=list(raw.get("recurrence", [])),
        attendees=[_parse_attendee(a) for a in raw.get("attendees", [])],
        organizer=Attendee(
            email=organizer.get("email", ""),
            display_name=organizer.get("displayName", ""),
        ) if organizer else None,
        status=raw.get("status", "confirmed"),
        visibility=raw.get("visibility", "private"),
        color_id=raw.get("colorId", ""),
        reminders=reminders,
        conference_data=_parse_conference(raw.get("conferenceData")),
        created=_parse_rfc3339(raw.get("created", "")),
        updated=_parse_rfc3339(raw.get("updated", "")),
        html_link=raw.get("htmlLink", ""),
    )


def _parse_calendar(raw: dict) -> Calendar:
    return Calendar(
        id=raw["id"],
        title=raw.get("summaryOverride") or raw.get("summary", ""),
        description=raw.get("description", ""),
        time_zone=raw.get("timeZone", ""),
        color_id=raw.get("colorId", ""),
        primary=raw.get("primary", False),
        selected=raw.get("selected", False),
        access_role=raw.get("accessRole", "owner"),
    )


def _parse_acl_rule(raw: dict) -> ACLRule:
    scope = raw.get("scope")
    return ACLRule(
        id=raw.get("id", ""),
        scope=ACLScope(type=scope.get("type", ""), value=scope.get("value", ""))
        if scope else None,
        role=raw.get("role", ""),
    )


def _check_event(event: Event) -> None:
    if not event.title.strip():
        raise ValidationError("event title is required")
    if not event.start < event.end:
        raise InvalidTimeRangeError()


def _event_body(event: Event, tz: ZoneInfo) -> dict:
    """Inverse of _parse_event for the writable fields. Empty fields are omitted."""
    if event.all_day:
        start: dict = {"date": event.start.date().isoformat()}
        end: dict = {"date": event.end.date().isoformat()}
    else:
        start = {"dateTime": event.start.isoformat(), "timeZone": str(tz)}
        end = {"dateTime": event.end.isoformat(), "timeZone": str(tz)}

    body: dict = {
        "summary": event.title,
        "start": start,
        "end": end,
        "status": event.status,
        "visibility": event.visibility,
    }
    if event.description:
        body["description"] = event.description
    if event.location:
        body["location"] = event.location
    if event.color_id:
        body["colorId"] = event.color_id
    if event.recurrence:
        body["recurrence"] = list(event.recurrence)
    if event.attendees:
        body["attendees"] = [
            {
                "email": a.email,
                "displayName": a.display_name,
                "responseStatus": a.response_status,
                "optional": a.optional,
            }
            for a in event.attendees
        ]
    if event.reminders:
        body["reminders"] = {
            "useDefault": False,
            "overrides": [{"method": r.method, "minutes": r.minutes} for r in event.reminders],
        }
    return body


class CalendarClient:
    """
    High-level Google Calendar operations.

    Usage:
        cal = CalendarClient(factory)
        events = cal.list_events("primary", start, end)
    """

    def __init__(self, factory: GoogleServiceFactory, local_tz: ZoneInfo = _UTC) -> None:
        self._svc = factory.calendar
        self.local_tz = local_tz

    # ── Events ────────────────────────────────────────────────────────────────

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 100,
        query: Optional[str] = None,
    ) -> list[Event]:
        """
        Return events within [time_min, time_max), sorted by start time.

        Both datetimes must be timezone-aware. Recurring events are expanded.
        """
        kwargs: dict = dict(
            calendarId=calendar_id,
            timeMin=time_min.isoformat(),
            timeMax=time_max.isoformat(),
            maxResults=max_results,
            singleEvents=True,   # expand recurring events
            orderBy="startTime",
        )
        if query:
            kwargs["q"] = query

        try:
            resp = self._svc.events().list(**kwargs).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to list events: {exc}") from exc
        return [_parse_event(e, calendar_id, self.local_tz) for e in resp.get("items", [])]

    def get_event(self, calendar_id: str, event_id: str) -> Event:
        try:
            raw = self._svc.events().get(calendarId=calendar_id, eventId=event_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to get event {event_id}: {exc}") from exc
        return _parse_event(raw, calendar_id, self.local_tz)

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        try:
            self._svc.events().delete(calendarId=calendar_id, eventId=event_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to delete event {event_id}: {exc}") from exc
        logger.info("Deleted event %s", event_id)

    def create_event(self, calendar_id: str, event: Event, notify: bool = False) -> Event:
        """
        Insert `event` into `calendar_id` and return it as created.

        Args:
            calendar_id:  Target calendar ("primary" for the user's own).
            event:        Title, times and optional fields; id is ignored.
            notify:       Email invitations to the attendees.
        """
        _check_event(event)
        try:
            raw = self._svc.events().insert(
                calendarId=calendar_id,
                body=_event_body(event, self.local_tz),
                sendUpdates="all" if notify else "none",
            ).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to create event: {exc}") from exc
        logger.info("Created event %s: %s", raw["id"], event.title)
        return _parse_event(raw, calendar_id, self.local_tz)

    def update_event(self, calendar_id: str, event: Event) -> Event:
        """Replace the stored event with `event` (matched on event.id)."""
        if not event.id:
            raise ValidationError("event id is required for update")
        _check_event(event)
        try:
            raw = self._svc.events().update(
                calendarId=calendar_id,
                eventId=event.id,
                body=_event_body(event, self.local_tz),
            ).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to update event {event.id}: {exc}") from exc
        logger.info("Updated event %s", event.id)
        return _parse_event(raw, calendar_id, self.local_tz)

    def quick_add(self, calendar_id: str, text: str) -> Event:
        """Create an event from free text, e.g. "Lunch with Sam tomorrow at noon"."""
        if not text.strip():
            raise ValidationError("quick-add text cannot be empty")
        try:
            raw = self._svc.events().quickAdd(calendarId=calendar_id, text=text).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to quick-add event: {exc}") from exc
        logger.info("Quick-added event %s", raw["id"])
        return _parse_event(raw, calendar_id, self.local_tz)

    def list_instances(
        self,
        calendar_id: str,
        event_id: str,
        time_min: Optional[datetime] = None,
        time_max: Optional[datetime] = None,
        max_results: int = 25,
    ) -> list[Event]:
        """Return the occurrences of a recurring event, optionally within a window."""
        kwargs: dict = dict(calendarId=calendar_id, eventId=event_id, maxResults=max_results)
        if time_min is not None:
            kwargs["timeMin"] = time_min.isoformat()
        if time_max is not None:
            kwargs["timeMax"] = time_max.isoformat()
        try:
            resp = self._svc.events().instances(**kwargs).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to list instances of {event_id}: {exc}") from exc
        return [_parse_event(e, calendar_id, self.local_tz) for e in resp.get("items", [])]

    def rsvp(self, calendar_id: str, event_id: str, response: str) -> Event:
        """
        Set the user's own response ("accepted", "declined", "tentative" or
        "needsAction") on an event they were invited to.
        """
        if not is_valid_response_status(response):
            raise ValidationError(f"invalid response: {response}")
        try:
            raw = self._svc.events().get(calendarId=calendar_id, eventId=event_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to get event {event_id}: {exc}") from exc

        attendees = raw.get("attendees", [])
        me = next((a for a in attendees if a.get("self", False)), None)
        if me is None:
            raise CalendarError(f"not an attendee of event {event_id}")
        me["responseStatus"] = response

        try:
            raw = self._svc.events().patch(
                calendarId=calendar_id, eventId=event_id, body={"attendees": attendees}
            ).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to update RSVP for {event_id}: {exc}") from exc
        logger.info("RSVP %s for event %s", response, event_id)
        return _parse_event(raw, calendar_id, self.local_tz)

    # ── Calendars ─────────────────────────────────────────────────────────────

    def list_calendars(self) -> list[Calendar]:
        """Return every calendar on the user's calendar list."""
        try:
            resp = self._svc.calendarList().list().execute()
        except HttpError as exc:
            raise CalendarError(f"failed to list calendars: {exc}") from exc
        return [_parse_calendar(c) for c in resp.get("items", [])]

    def get_calendar(self, calendar_id: str) -> Calendar:
        try:
            raw = self._svc.calendarList().get(calendarId=calendar_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to get calendar {calendar_id}: {exc}") from exc
        return _parse_calendar(raw)

    # ── ACL ───────────────────────────────────────────────────────────────────

    def list_acl(self, calendar_id: str) -> list[ACLRule]:
        try:
            resp = self._svc.acl().list(calendarId=calendar_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to list ACL for {calendar_id}: {exc}") from exc
        return [_parse_acl_rule(r) for r in resp.get("items", [])]

    def get_acl_rule(self, calendar_id: str, rule_id: str) -> ACLRule:
        try:
            raw = self._svc.acl().get(calendarId=calendar_id, ruleId=rule_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to get ACL rule {rule_id}: {exc}") from exc
        return _parse_acl_rule(raw)

    def insert_acl_rule(self, calendar_id: str, rule: ACLRule) -> ACLRule:
        body: dict = {"role": rule.role}
        if rule.scope is not None:
            body["scope"] = {"type": rule.scope.type}
            if rule.scope.value:
                body["scope"]["value"] = rule.scope.value
        try:
            raw = self._svc.acl().insert(calendarId=calendar_id, body=body).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to insert ACL rule: {exc}") from exc
        created = _parse_acl_rule(raw)
        logger.info("Created ACL rule %s on %s", created.id, calendar_id)
        return created

    def delete_acl_rule(self, calendar_id: str, rule_id: str) -> None:
        try:
            self._svc.acl().delete(calendarId=calendar_id, ruleId=rule_id).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to delete ACL rule {rule_id}: {exc}") from exc
        logger.info("Deleted ACL rule %s on %s", rule_id, calendar_id)

    # ── Free/busy ─────────────────────────────────────────────────────────────

    def query_free_busy(self, request: FreeBusyRequest) -> FreeBusyResponse:
        """Return busy periods for each requested calendar, in request order."""
        body = {
            "timeMin": request.time_min.isoformat(),
            "timeMax": request.time_max.isoformat(),
            "items": [{"id": cid} for cid in request.calendar_ids],
        }
        try:
            resp = self._svc.freebusy().query(body=body).execute()
        except HttpError as exc:
            raise CalendarError(f"failed to query free/busy: {exc}") from exc

        raw_calendars = resp.get("calendars", {})
        calendars: dict[str, list[TimePeriod]] = {}
        for cid in request.calendar_ids:
            info = raw_calendars.get(cid, {})
            for err in info.get("errors", []):
                logger.warning("Free/busy for %s: %s", cid, err.get("reason", err))
            periods = []
            for busy in info.get("busy", []):
                start = _parse_rfc3339(busy.get("start", ""))
                end = _parse_rfc3339(busy.get("end", ""))
                if start and end and start < end:
                    periods.append(TimePeriod(start=start, end=end))
            calendars[cid] = periods
        return FreeBusyResponse(calendars=calendars)
