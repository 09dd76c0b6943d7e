"""Tests for the Contacts (People API) client."""

from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from goog.contacts_client import ContactsClient, _parse_group, _parse_person
from goog.exceptions import ContactsError, ValidationError
from goog.models import Biography, Name, new_contact

RAW_PERSON = {
    "resourceName": "people/c123",
    "etag": "abc",
    "names": [{"displayName": "Ada Lovelace", "givenName": "Ada", "familyName": "Lovelace"}],
    "emailAddresses": [
        {"value": "ada@home.org", "type": "home"},
        {"value": "ada@work.com", "type": "work", "metadata": {"primary": True}},
        {"type": "other"},
    ],
    "phoneNumbers": [{"value": "+1 555 0100", "type": "mobile"}],
    "organizations": [{"name": "Analytical Engines", "title": "Programmer", "current": True}],
    "birthdays": [{"date": {"month": 12, "day": 10}}],
    "memberships": [
        {"contactGroupMembership": {
            "contactGroupId": "myContacts",
            "contactGroupResourceName": "contactGroups/myContacts",
        }},
        {"domainMembership": {"inViewerDomain": True}},
    ],
    "metadata": {"sources": [{"type": "CONTACT", "id": "c123",
                              "updateTime": "2026-01-05T08:00:00.000Z"}]},
}


def http_error(status=500):
    return HttpError(httplib2.Response({"status": status}), b"backend error")


@pytest.fixture
def contacts():
    service = MagicMock()
    factory = MagicMock(people=service)
    return ContactsClient(factory), service


def test_parse_person():
    contact = _parse_person(RAW_PERSON)
    assert contact.resource_name == "people/c123"
    assert contact.display_name() == "Ada Lovelace"
    assert [e.value for e in contact.emails] == ["ada@home.org", "ada@work.com"]
    assert contact.primary_email() == "ada@work.com"
    assert contact.primary_phone() == "+1 555 0100"
    assert contact.organizations[0].current
    assert contact.birthdays[0].date.format() == "0000-12-10"
    assert contact.is_in_group("contactGroups/myContacts")
    assert len(contact.memberships) == 1
    assert contact.metadata.sources[0].update_time.year == 2026


def test_parse_person_minimal():
    contact = _parse_person({"resourceName": "people/c1"})
    assert contact.display_name() == ""
    assert contact.primary_email() is None
    assert contact.metadata is None


def test_parse_group():
    group = _parse_group({
        "resourceName": "contactGroups/starred",
        "name": "starred",
        "formattedName": "Starred",
        "groupType": "SYSTEM_CONTACT_GROUP",
        "memberCount": 4,
        "metadata": {"updateTime": "2026-01-05T08:00:00Z"},
    })
    assert group.is_system_group()
    assert not group.can_modify()
    assert group.member_count == 4
    assert group.metadata.update_time is not None


def test_list_contacts(contacts):
    client, service = contacts
    service.people().connections().list().execute.return_value = {"connections": [RAW_PERSON]}
    assert [c.resource_name for c in client.list_contacts(max_results=5000)] == ["people/c123"]
    assert service.people().connections().list.call_args.kwargs["pageSize"] == 1000


def test_search_contacts(contacts):
    client, service = contacts
    service.people().searchContacts().execute.return_value = {
        "results": [{"person": RAW_PERSON}, {}],
    }
    assert len(client.search_contacts("Ada")) == 1


def test_get_contact_error(contacts):
    client, service = contacts
    service.people().get().execute.side_effect = http_error(404)
    with pytest.raises(ContactsError, match="failed to get contact people/missing"):
        client.get_contact("people/missing")


def test_list_groups(contacts):
    client, service = contacts
    service.contactGroups().list().execute.return_value = {"contactGroups": [
        {"resourceName": "contactGroups/friends", "name": "Friends",
         "groupType": "USER_CONTACT_GROUP", "memberCount": 2},
    ]}
    groups = client.list_groups()
    assert groups[0].can_modify()
    assert groups[0].member_count == 2


def test_create_contact(contacts):
    client, service = contacts
    service.people().createContact().execute.return_value = RAW_PERSON
    contact = new_contact()
    contact.names.append(Name(given_name="Ada", family_name="Lovelace"))
    contact.add_email("ada@work.com", "work", primary=True)
    contact.add_phone("+1 555 0100")
    contact.biographies.append(Biography(value="Met at the Royal Society"))

    created = client.create_contact(contact)

    assert created.resource_name == "people/c123"
    kwargs = service.people().createContact.call_args.kwargs
    body = kwargs["body"]
    assert body["names"][0]["givenName"] == "Ada"
    assert body["emailAddresses"] == [{"value": "ada@work.com", "type": "work"}]
    assert body["phoneNumbers"] == [{"value": "+1 555 0100", "type": ""}]
    assert body["biographies"] == [
        {"value": "Met at the Royal Society", "contentType": "TEXT_PLAIN"},
    ]
    assert "organizations" not in body
    assert "emailAddresses" in kwargs["personFields"]


def test_create_contact_requires_name_or_email(contacts):
    client, service = contacts
    contact = new_contact()
    contact.add_phone("+1 555 0100")
    with pytest.raises(ValidationError):
        client.create_contact(contact)
    service.people().createContact.assert_not_called()


def test_delete_contact(contacts):
    client, service = contacts
    client.delete_contact("people/c123")
    service.people().deleteContact.assert_called_with(resourceName="people/c123")


def test_delete_contact_error(contacts):
    client, service = contacts
    service.people().deleteContact().execute.side_effect = http_error(404)
    with pytest.raises(ContactsError, match="failed to delete contact people/c123"):
        client.delete_contact("people/c123")


def test_group_membership(contacts):
    client, service = contacts
    members = service.contactGroups().members()
    members.modify().execute.return_value = {"notFoundResourceNames": ["people/gone"]}
    client.add_group_members("contactGroups/friends", ["people/c123", "people/gone"])
    members.modify.assert_called_with(
        resourceName="contactGroups/friends",
        body={"resourceNamesToAdd": ["people/c123", "people/gone"]},
    )
    client.remove_group_members("contactGroups/friends", ["people/c123"])
    members.modify.assert_called_with(
        resourceName="contactGroups/friends",
        body={"resourceNamesToRemove": ["people/c123"]},
    )


def test_group_membership_error(contacts):
    client, service = contacts
    service.contactGroups().members().modify().execute.side_effect = http_error()
    with pytest.raises(ContactsError, match="failed to modify members"):
        client.add_group_members("contactGroups/friends", ["people/c123"])
