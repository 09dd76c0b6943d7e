"""
GmailClient — typed, high-level wrapper around the Gmail API v1 service.

All methods return goog.models objects rather than raw API dicts.
Covers messages, threads, drafts and labels: reading, sending, replying,
forwarding and the label-based mutations (read state, archive, trash).
"""
from __future__ import annotations

import base64
import email.utils
import logging
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from googleapiclient.errors import HttpError

from .exceptions import MailError, ValidationError
from .google_factory import GoogleServiceFactory
from .models import Draft, Label, LabelColor, Message, Thread

logger = logging.getLogger(__name__)


# ── Parsing helpers ───────────────────────────────────────────────────────────

def _decode_payload(payload: dict, mime_type: str) -> str:
    """
    Recursively walk a Gmail message payload and extract the first part of `mime_type`.
    Handles simple messages (body.data) and multipart structures.
    """
    part_type = payload.get("mimeType", "")

    if part_type == mime_type:
        data = payload.get("body", {}).get("data", "")
        if data:
            # Gmail uses URL-safe base64; pad to multiple of 4
            padded = data + "=" * (-len(data) % 4)
            return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")

    if part_type.startswith("multipart/"):
        for part in payload.get("parts", []):
            text = _decode_payload(part, mime_type)
            if text:
                return text

    return ""


def _parse_date(raw: dict, header: str) -> datetime:
    """Message timestamp: internalDate (ms since epoch), else the Date header."""
    internal = raw.get("internalDate")
    if internal:
        return datetime.fromtimestamp(int(internal) / 1000, tz=timezone.utc)
    try:
        return email.utils.parsedate_to_datetime(header).astimezone(timezone.utc)
    except (TypeError, ValueError):
        return datetime.now(timezone.utc)


def _format_address(name: str, addr: str) -> str:
    if not name:
        return addr
    if name.isascii():
        return email.utils.formataddr((name, addr))
    # formataddr would RFC 2047-encode a non-ASCII display name
    return f'"{email.utils.quote(name)}" <{addr}>'


def _split_addresses(header: str) -> list[str]:
    """
    Split a To/Cc header into one string per recipient.

    Quoted display names may contain commas: '"Doe, Jane" <jane@x.com>' is
    a single recipient.
    """
    if not header:
        return []
    return [
        _format_address(name, addr)
        for name, addr in email.utils.getaddresses([header])
        if addr
    ]


def _parse_message(raw: dict) -> Message:
    """Convert a raw Gmail API message dict into a typed Message."""
    payload = raw.get("payload", {})
    headers = {h["name"].lower(): h["value"] for h in payload.get("headers", [])}
    labels = raw.get("labelIds", [])
    return Message(
        id=raw["id"],
        thread_id=raw.get("threadId", ""),
        sender=headers.get("from", ""),
        to=_split_addresses(headers.get("to", "")),
        cc=_split_addresses(headers.get("cc", "")),
        bcc=_split_addresses(headers.get("bcc", "")),
        subject=headers.get("subject", ""),
        body=_decode_payload(payload, "text/plain").strip(),
        body_html=_decode_payload(payload, "text/html"),
        labels=list(labels),
        date=_parse_date(raw, headers.get("date", "")),
        is_read="UNREAD" not in labels,
        is_starred="STARRED" in labels,
        snippet=raw.get("snippet", ""),
    )


def _parse_thread(raw: dict) -> Thread:
    messages = [_parse_message(m) for m in raw.get("messages", [])]
    labels: list[str] = []
    for msg in messages:
        for label in msg.labels:
            if label not in labels:
                labels.append(label)
    return Thread(
        id=raw["id"],
        messages=messages,
        snippet=raw.get("snippet", messages[-1].snippet if messages else ""),
        labels=labels,
    )


def _parse_draft(raw: dict) -> Draft:
    message = _parse_message(raw["message"]) if raw.get("message", {}).get("id") else None
    # The API exposes no draft timestamps; the message date stands in for both
    stamp = message.date if message else datetime.now(timezone.utc)
    return Draft(id=raw["id"], message=message, created=stamp, updated=stamp)


def _parse_label(raw: dict) -> Label:
    color = raw.get("color")
    return Label(
        id=raw["id"],
        name=raw.get("name", ""),
        type=raw.get("type", "user"),
        message_list_visibility=raw.get("messageListVisibility", ""),
        label_list_visibility=raw.get("labelListVisibility", ""),
        color=LabelColor(
            background=color.get("backgroundColor", ""),
            text=color.get("textColor", ""),
        ) if color else None,
    )


# ── Composing ─────────────────────────────────────────────────────────────────

def reply_subject(subject: str) -> str:
    """Prefix "Re: " unless the subject already starts with it (any case)."""
    if subject.lower().startswith("re:"):
        return subject
    return "Re: " + subject


def forward_subject(subject: str) -> str:
    if subject.lower().startswith("fwd:"):
        return subject
    return "Fwd: " + subject


def _forward_body(intro: str, original: Message) -> str:
    quoted = "\n".join([
        "---------- Forwarded message ---------",
        f"From: {original.sender}",
        f"Date: {email.utils.format_datetime(original.date)}",
        f"Subject: {original.subject}",
        f"To: {', '.join(original.to)}",
        "",
        original.body,
    ])
    return f"{intro}\n\n{quoted}" if intro else quoted


def _build_mime(msg: Message, in_reply_to: str = "") -> MIMEText | MIMEMultipart:
    """
    RFC 2822 message for `msg`. With both bodies set it is
    multipart/alternative; with only body_html it is text/html.
    """
    mime: MIMEText | MIMEMultipart
    if msg.body_html and msg.body:
        mime = MIMEMultipart("alternative")
        mime.attach(MIMEText(msg.body, "plain", "utf-8"))
        mime.attach(MIMEText(msg.body_html, "html", "utf-8"))
    elif msg.body_html:
        mime = MIMEText(msg.body_html, "html", "utf-8")
    else:
        mime = MIMEText(msg.body, "plain", "utf-8")

    mime["To"] = ", ".join(msg.to)
    if msg.cc:
        mime["Cc"] = ", ".join(msg.cc)
    if msg.bcc:
        mime["Bcc"] = ", ".join(msg.bcc)
    mime["From"] = msg.sender or "me"
    mime["Subject"] = msg.subject
    if in_reply_to:
        mime["In-Reply-To"] = in_reply_to
        mime["References"] = in_reply_to
    return mime


def _raw_body(msg: Message, in_reply_to: str = "") -> dict:
    raw = base64.urlsafe_b64encode(_build_mime(msg, in_reply_to).as_bytes()).decode()
    body: dict = {"raw": raw}
    if msg.thread_id:
        body["threadId"] = msg.thread_id
    return body


# ── Client class ──────────────────────────────────────────────────────────────

class GmailClient:
    """
    High-level Gmail operations.

    Instantiate with a GoogleServiceFactory so credentials are shared:
        client = GmailClient(factory)
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._svc = factory.gmail

    # ── Messages ──────────────────────────────────────────────────────────────

    def list_messages(self, query: str = "", max_results: int = 20) -> list[Message]:
        """
        List messages matching a Gmail query string.

        Common query examples:
            "is:unread"
            "from:boss@company.com"
            "subject:invoice after:2026/01/01"
        """
        try:
            resp = self._svc.users().messages().list(
                userId="me", q=query, maxResults=max_results
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to list messages: {exc}") from exc

        results: list[Message] = []
        for item in resp.get("messages", []):
            try:
                results.append(self.get_message(item["id"]))
            except MailError as exc:
                logger.warning("Skipping message %s: %s", item["id"], exc)
        return results

    def get_message(self, message_id: str) -> Message:
        """Fetch a single Gmail message by ID."""
        return _parse_message(self._fetch(message_id))

    def _fetch(self, message_id: str) -> dict:
        try:
            return self._svc.users().messages().get(
                userId="me", id=message_id, format="full"
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to get message {message_id}: {exc}") from exc

    # ── Send ──────────────────────────────────────────────────────────────────

    def send_message(self, msg: Message, in_reply_to: str = "") -> Message:
        """
        Send `msg` and return the sent message as stored by Gmail.

        Args:
            msg:          Recipients, subject and body. A non-empty thread_id
                          attaches the message to that thread.
            in_reply_to:  RFC 2822 Message-ID for In-Reply-To / References.
        """
        if not msg.to:
            raise ValidationError("at least one recipient is required")
        try:
            sent = self._svc.users().messages().send(
                userId="me", body=_raw_body(msg, in_reply_to)
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to send message: {exc}") from exc
        logger.info("Sent message %s to %s", sent["id"], msg.to)
        return self.get_message(sent["id"])

    def reply_to_message(
        self,
        message_id: str,
        body: str,
        reply_all: bool = False,
        self_email: str = "",
    ) -> Message:
        """
        Reply in the original's thread.

        The reply goes to the original sender. With reply_all the original To
        and Cc recipients are added too, except `self_email`.
        """
        raw = self._fetch(message_id)
        original = _parse_message(raw)
        headers = {
            h["name"].lower(): h["value"]
            for h in raw.get("payload", {}).get("headers", [])
        }

        def _others(addresses: list[str]) -> list[str]:
            return [
                a for a in addresses
                if email.utils.parseaddr(a)[1].lower() != self_email.lower()
            ]

        reply = Message(
            id="",
            thread_id=original.thread_id,
            to=[original.sender],
            subject=reply_subject(original.subject),
            body=body,
        )
        if reply_all:
            reply.to += [a for a in _others(original.to) if a not in reply.to]
            reply.cc = _others(original.cc)
        return self.send_message(reply, in_reply_to=headers.get("message-id", ""))

    def forward_message(self, message_id: str, to: list[str], intro: str = "") -> Message:
        """Forward a message with its headers and plain-text body quoted below `intro`."""
        original = self.get_message(message_id)
        forward = Message(
            id="",
            to=list(to),
            subject=forward_subject(original.subject),
            body=_forward_body(intro, original),
        )
        return self.send_message(forward)

    # ── Mutations ─────────────────────────────────────────────────────────────

    def mark_as_read(self, message_id: str) -> None:
        """Remove the UNREAD label from a message."""
        self.modify_labels(message_id, remove=["UNREAD"])

    def mark_as_unread(self, message_id: str) -> None:
        """Add the UNREAD label to a message."""
        self.modify_labels(message_id, add=["UNREAD"])

    def archive_message(self, message_id: str) -> None:
        """Archive a message (remove from inbox, keep in All Mail)."""
        self.modify_labels(message_id, remove=["INBOX"])

    def trash_message(self, message_id: str) -> None:
        """Move a message to trash."""
        try:
            self._svc.users().messages().trash(userId="me", id=message_id).execute()
        except HttpError as exc:
            raise MailError(f"failed to trash message {message_id}: {exc}") from exc
        logger.info("Trashed message %s", message_id)

    def untrash_message(self, message_id: str) -> None:
        try:
            self._svc.users().messages().untrash(userId="me", id=message_id).execute()
        except HttpError as exc:
            raise MailError(f"failed to untrash message {message_id}: {exc}") from exc
        logger.info("Restored message %s from trash", message_id)

    def modify_labels(
        self,
        message_id: str,
        add: Optional[list[str]] = None,
        remove: Optional[list[str]] = None,
    ) -> None:
        """Add and/or remove label IDs on a message."""
        if not add and not remove:
            raise ValidationError("no labels to add or remove")
        body: dict = {}
        if add:
            body["addLabelIds"] = add
        if remove:
            body["removeLabelIds"] = remove
        try:
            self._svc.users().messages().modify(
                userId="me", id=message_id, body=body
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to modify message {message_id}: {exc}") from exc
        logger.info("Modified message %s: %s", message_id, body)

    # ── Threads ───────────────────────────────────────────────────────────────

    def list_threads(self, query: str = "", max_results: int = 20) -> list[Thread]:
        """List threads matching a Gmail query, each with its messages loaded."""
        try:
            resp = self._svc.users().threads().list(
                userId="me", q=query, maxResults=max_results
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to list threads: {exc}") from exc

        results: list[Thread] = []
        for item in resp.get("threads", []):
            try:
                thread = self.get_thread(item["id"], fmt="metadata")
            except MailError as exc:
                logger.warning("Skipping thread %s: %s", item["id"], exc)
                continue
            thread.snippet = item.get("snippet", thread.snippet)
            results.append(thread)
        return results

    def get_thread(self, thread_id: str, fmt: str = "full") -> Thread:
        """Fetch all messages in a Gmail thread."""
        try:
            raw = self._svc.users().threads().get(
                userId="me", id=thread_id, format=fmt
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to get thread {thread_id}: {exc}") from exc
        return _parse_thread(raw)

    # ── Drafts ────────────────────────────────────────────────────────────────

    def list_drafts(self, max_results: int = 20) -> list[Draft]:
        try:
            resp = self._svc.users().drafts().list(
                userId="me", maxResults=max_results
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to list drafts: {exc}") from exc

        results: list[Draft] = []
        for item in resp.get("drafts", []):
            try:
                results.append(self.get_draft(item["id"]))
            except MailError as exc:
                logger.warning("Skipping draft %s: %s", item["id"], exc)
        return results

    def get_draft(self, draft_id: str) -> Draft:
        try:
            raw = self._svc.users().drafts().get(
                userId="me", id=draft_id, format="full"
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to get draft {draft_id}: {exc}") from exc
        return _parse_draft(raw)

    def create_draft(self, msg: Message) -> Draft:
        """Save `msg` as a draft without sending it."""
        try:
            created = self._svc.users().drafts().create(
                userId="me", body={"message": _raw_body(msg)}
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to create draft: {exc}") from exc
        logger.info("Created draft %s", created["id"])
        return self.get_draft(created["id"])

    def send_draft(self, draft_id: str) -> Message:
        """Send an existing draft; the draft is removed and the sent message returned."""
        try:
            sent = self._svc.users().drafts().send(
                userId="me", body={"id": draft_id}
            ).execute()
        except HttpError as exc:
            raise MailError(f"failed to send draft {draft_id}: {exc}") from exc
        logger.info("Sent draft %s as message %s", draft_id, sent["id"])
        return self.get_message(sent["id"])

    def delete_draft(self, draft_id: str) -> None:
        try:
            self._svc.users().drafts().delete(userId="me", id=draft_id).execute()
        except HttpError as exc:
            raise MailError(f"failed to delete draft {draft_id}: {exc}") from exc
        logger.info("Deleted draft %s", draft_id)

    # ── Labels ────────────────────────────────────────────────────────────────

    def list_labels(self) -> list[Label]:
        """Return all labels in the mailbox."""
        try:
            resp = self._svc.users().labels().list(userId="me").execute()
        except HttpError as exc:
            raise MailError(f"failed to list labels: {exc}") from exc
        return [_parse_label(lbl) for lbl in resp.get("labels", [])]

    def get_label(self, label_id: str) -> Label:
        try:
            raw = self._svc.users().labels().get(userId="me", id=label_id).execute()
        except HttpError as exc:
            raise MailError(f"failed to get label {label_id}: {exc}") from exc
        return _parse_label(raw)

    def create_label(self, name: str) -> Label:
        """Create a user label, shown in both the label list and message list."""
        if not name.strip():
            raise ValidationError("label name cannot be empty")
        body = {
            "name": name,
            "labelListVisibility": "labelShow",
            "messageListVisibility": "show",
        }
        try:
            raw = self._svc.users().labels().create(userId="me", body=body).execute()
        except HttpError as exc:
            raise MailError(f"failed to create label {name}: {exc}") from exc
        logger.info("Created label %s (%s)", raw["id"], name)
        return _parse_label(raw)

    def delete_label(self, label_id: str) -> None:
        try:
            self._svc.users().labels().delete(userId="me", id=label_id).execute()
        except HttpError as exc:
            raise MailError(f"failed to delete label {label_id}: {exc}") from exc
        logger.info("Deleted label %s", label_id)

