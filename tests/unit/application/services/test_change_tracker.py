# tests/unit/application/services/test_change_tracker.py
from __future__ import annotations

from uuid import UUID

from exact_online.application.services.change_tracker import ChangeTracker, EntityController
from exact_online.domain.entities import Account, SalesInvoice, SalesInvoiceLine


def _invoice() -> SalesInvoice:
    return SalesInvoice(
        invoice_id=UUID(int=1),
        description="Original",
        sales_invoice_lines=[SalesInvoiceLine(quantity=1.0), SalesInvoiceLine(quantity=2.0)],
    )


def test_controller_snapshot_is_a_deep_copy() -> None:
    invoice = _invoice()
    controller = EntityController(invoice)
    invoice.sales_invoice_lines[0].quantity = 9.0
    original = controller.original_entity
    assert isinstance(original, SalesInvoice)
    assert original.sales_invoice_lines[0].quantity == 1.0
    assert controller.is_updated(invoice) is True


def test_read_only_changes_do_not_count_as_updates() -> None:
    account = Account(code="C1")
    controller = EntityController(account)
    account.division = 5
    assert controller.is_updated(account) is False
    account.code = "C2"
    assert controller.is_updated(account) is True


def test_track_is_idempotent_and_covers_nested_items() -> None:
    invoice = _invoice()
    tracker = ChangeTracker()
    controller = tracker.track(invoice)
    assert tracker.track(invoice) is controller
    assert len(tracker) == 3
    assert invoice.sales_invoice_lines[1] in tracker


def test_lookup_uses_identity_not_equality() -> None:
    tracker = ChangeTracker()
    account = Account(code="C1")
    tracker.track(account)
    assert tracker.lookup(account) is not None
    assert tracker.lookup(Account(code="C1")) is None
    assert tracker.original_of(Account(code="C1")) is None


def test_accept_rebaselines_entity_and_items() -> None:
    invoice = _invoice()
    tracker = ChangeTracker()
    tracker.track(invoice)
    line = invoice.sales_invoice_lines[0]
    line.quantity = 7.0
    invoice.description = "Saved"

    tracker.accept(invoice)

    line_controller = tracker.lookup(line)
    assert line_controller is not None
    assert line_controller.is_updated(line) is False
    original = tracker.original_of(invoice)
    assert isinstance(original, SalesInvoice)
    assert original.description == "Saved"


def test_accept_tracks_untracked_entities() -> None:
    tracker = ChangeTracker()
    account = Account(code="C1")
    tracker.accept(account)
    assert account in tracker


def test_forget_releases_entity_and_items() -> None:
    invoice = _invoice()
    tracker = ChangeTracker()
    tracker.track(invoice)
    tracker.forget(invoice)
    assert len(tracker) == 0
    tracker.forget(invoice)
