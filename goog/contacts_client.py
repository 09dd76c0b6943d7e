"""
ContactsClient — typed, high-level wrapper around the Google People API v1.

Supports listing, reading, searching, creating and deleting contacts, plus
contact groups and their membership.
Note: requires the 'contacts' (or 'contacts.readonly') OAuth scope.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from googleapiclient.errors import HttpError

from .exceptions import ContactsError, ValidationError
from .google_factory import GoogleServiceFactory
from .models import (
    Address,
    Biography,
    Birthday,
    Contact,
    ContactDate,
    ContactGroup,
    ContactMetadata,
    EmailAddress,
    GroupMetadata,
    Membership,
    Name,
    Nickname,
    Organization,
    PhoneNumber,
    Photo,
    Source,
    Url,
)

logger = logging.getLogger(__name__)

# Fields to request in every People API call
_PERSON_FIELDS = (
    "names,nicknames,emailAddresses,phoneNumbers,addresses,organizations,"
    "birthdays,biographies,photos,urls,memberships,metadata"
)
_SEARCH_FIELDS = "names,emailAddresses,phoneNumbers,organizations"


def _parse_time(s: str) -> Optional[datetime]:
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_date(raw: Optional[dict]) -> Optional[ContactDate]:
    if not raw:
        return None
    return ContactDate(year=raw.get("year", 0), month=raw.get("month", 0), day=raw.get("day", 0))


def _is_primary(raw: dict) -> bool:
    return raw.get("metadata", {}).get("primary", False)


# ── Parsers (module-level) ────────────────────────────────────────────────────

def _parse_person(raw: dict) -> Contact:
    """Convert a raw People API person dict into a typed Contact."""
    memberships = []
    for m in raw.get("memberships", []):
        group = m.get("contactGroupMembership")
        if group:
            memberships.append(Membership(
                contact_group_resource_name=group.get("contactGroupResourceName", ""),
                contact_group_id=group.get("contactGroupId", ""),
            ))

    metadata = None
    if "metadata" in raw:
        metadata = ContactMetadata(sources=[
            Source(
                type=s.get("type", ""),
                id=s.get("id", ""),
                etag=s.get("etag", ""),
                update_time=_parse_time(s.get("updateTime", "")),
            )
            for s in raw["metadata"].get("sources", [])
        ])

    return Contact(
        resource_name=raw.get("resourceName", ""),
        etag=raw.get("etag", ""),
        names=[
            Name(
                display_name=n.get("displayName", ""),
                given_name=n.get("givenName", ""),
                family_name=n.get("familyName", ""),
                middle_name=n.get("middleName", ""),
                honorific_prefix=n.get("honorificPrefix", ""),
                honorific_suffix=n.get("honorificSuffix", ""),
            )
            for n in raw.get("names", [])
        ],
        nicknames=[
            Nickname(value=n.get("value", ""), type=n.get("type", ""))
            for n in raw.get("nicknames", [])
        ],
        emails=[
            EmailAddress(
                value=e["value"],
                type=e.get("type", ""),
                display_name=e.get("displayName", ""),
                primary=_is_primary(e),
            )
            for e in raw.get("emailAddresses", []) if e.get("value")
        ],
        phones=[
            PhoneNumber(value=p["value"], type=p.get("type", ""), primary=_is_primary(p))
            for p in raw.get("phoneNumbers", []) if p.get("value")
        ],
        addresses=[
            Address(
                formatted_value=a.get("formattedValue", ""),
                type=a.get("type", ""),
                street_address=a.get("streetAddress", ""),
                city=a.get("city", ""),
                region=a.get("region", ""),
                postal_code=a.get("postalCode", ""),
                country=a.get("country", ""),
                country_code=a.get("countryCode", ""),
            )
            for a in raw.get("addresses", [])
        ],
        organizations=[
            Organization(
                name=o.get("name", ""),
                title=o.get("title", ""),
                department=o.get("department", ""),
                type=o.get("type", ""),
                current=o.get("current", False),
            )
            for o in raw.get("organizations", [])
        ],
        birthdays=[
            Birthday(date=_parse_date(b.get("date")), text=b.get("text", ""))
            for b in raw.get("birthdays", [])
        ],
        biographies=[
            Biography(value=b.get("value", ""), content_type=b.get("contentType", ""))
            for b in raw.get("biographies", [])
        ],
        photos=[
            Photo(url=p.get("url", ""), default=p.get("default", False))
            for p in raw.get("photos", [])
        ],
        urls=[Url(value=u.get("value", ""), type=u.get("type", "")) for u in raw.get("urls", [])],
        memberships=memberships,
        metadata=metadata,
    )


def _parse_group(raw: dict) -> ContactGroup:
    meta = raw.get("metadata")
    return ContactGroup(
        resource_name=raw.get("resourceName", ""),
        etag=raw.get("etag", ""),
        name=raw.get("name", ""),
        formatted_name=raw.get("formattedName", ""),
        group_type=raw.get("groupType", ""),
        member_count=raw.get("memberCount", 0),
        member_resource_names=list(raw.get("memberResourceNames", [])),
        metadata=GroupMetadata(
            update_time=_parse_time(meta.get("updateTime", "")),
            deleted=meta.get("deleted", False),
        ) if meta else None,
    )


def _person_body(contact: Contact) -> dict:
    """People API person resource for the writable fields of `contact`."""
    body: dict = {}
    if contact.names:
        body["names"] = [
            {"givenName": n.given_name, "familyName": n.family_name, "middleName": n.middle_name}
            for n in contact.names
        ]
    if contact.emails:
        body["emailAddresses"] = [
            {"value": e.value, "type": e.type} for e in contact.emails
        ]
    if contact.phones:
        body["phoneNumbers"] = [
            {"value": p.value, "type": p.type} for p in contact.phones
        ]
    if contact.organizations:
        body["organizations"] = [
            {"name": o.name, "title": o.title, "department": o.department}
            for o in contact.organizations
        ]
    if contact.biographies:
        body["biographies"] = [
            {"value": b.value, "contentType": b.content_type or "TEXT_PLAIN"}
            for b in contact.biographies
        ]
    return body


class ContactsClient:
    """
    High-level Google Contacts (People API v1) operations.

    Usage:
        contacts = ContactsClient(factory)
        results = contacts.search_contacts("Dennis")
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._svc = factory.people

    # ── Contacts ──────────────────────────────────────────────────────────────

    def list_contacts(self, max_results: int = 100) -> list[Contact]:
        """
        Return up to max_results contacts from the connected Google account.
        Sorted by the API's default (typically display name alphabetically).
        """
        try:
            resp = self._svc.people().connections().list(
                resourceName="people/me",
                pageSize=min(max_results, 1000),
                personFields=_PERSON_FIELDS,
            ).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to list contacts: {exc}") from exc
        return [_parse_person(p) for p in resp.get("connections", [])]

    def get_contact(self, resource_name: str) -> Contact:
        try:
            raw = self._svc.people().get(
                resourceName=resource_name, personFields=_PERSON_FIELDS
            ).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to get contact {resource_name}: {exc}") from exc
        return _parse_person(raw)

    def search_contacts(self, query: str, max_results: int = 10) -> list[Contact]:
        """Full-text search across contact names, email addresses and phone numbers."""
        try:
            resp = self._svc.people().searchContacts(
                query=query,
                readMask=_SEARCH_FIELDS,
                pageSize=max_results,
            ).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to search contacts: {exc}") from exc
        return [
            _parse_person(r["person"])
            for r in resp.get("results", [])
            if "person" in r
        ]

    def create_contact(self, contact: Contact) -> Contact:
        """
        Create a contact from the writable fields of `contact` (names,
        emails, phones, organizations, biographies) and return it as stored.
        """
        body = _person_body(contact)
        if "names" not in body and "emailAddresses" not in body:
            raise ValidationError("contact needs a name or an email address")
        try:
            raw = self._svc.people().createContact(
                body=body, personFields=_PERSON_FIELDS
            ).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to create contact: {exc}") from exc
        logger.info("Created contact %s", raw.get("resourceName", ""))
        return _parse_person(raw)

    def delete_contact(self, resource_name: str) -> None:
        try:
            self._svc.people().deleteContact(resourceName=resource_name).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to delete contact {resource_name}: {exc}") from exc
        logger.info("Deleted contact %s", resource_name)

    # ── Groups ────────────────────────────────────────────────────────────────

    def list_groups(self) -> list[ContactGroup]:
        try:
            resp = self._svc.contactGroups().list(pageSize=1000).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to list contact groups: {exc}") from exc
        return [_parse_group(g) for g in resp.get("contactGroups", [])]

    def get_group(self, resource_name: str) -> ContactGroup:
        try:
            raw = self._svc.contactGroups().get(resourceName=resource_name).execute()
        except HttpError as exc:
            raise ContactsError(f"failed to get contact group {resource_name}: {exc}") from exc
        return _parse_group(raw)

    def add_group_members(self, group_resource_name: str, resource_names: list[str]) -> None:
        """Add contacts to a user contact group."""
        self._modify_members(group_resource_name, {"resourceNamesToAdd": resource_names})

    def remove_group_members(self, group_resource_name: str, resource_names: list[str]) -> None:
        self._modify_members(group_resource_name, {"resourceNamesToRemove": resource_names})

    def _modify_members(self, group_resource_name: str, body: dict) -> None:
        try:
            resp = self._svc.contactGroups().members().modify(
                resourceName=group_resource_name, body=body
            ).execute()
        except HttpError as exc:
            raise ContactsError(
                f"failed to modify members of {group_resource_name}: {exc}"
            ) from exc
        for name in resp.get("notFoundResourceNames", []):
            logger.warning("Contact %s not found; group %s unchanged for it",
                           name, group_resource_name)
        logger.info("Modified members of %s: %s", group_resource_name, body)
