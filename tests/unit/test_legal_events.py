"""Domain event tests.

Covers:
- Write ownership: every event has exactly one writer aggregate.
- Envelope defaults: ids, UTC timestamps, correlation from the bound context.
- Dict serialization round trip through ``event_to_dict`` / ``event_from_dict``.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, timezone

import pytest

from kaisha.core.enums import EntityType, SealType
from kaisha.core.ids import CompanyId
from kaisha.core.values import BilingualName, CorporateNumber, FiscalYearEnd, Money
from kaisha.domain.events import (
    ALL_LEGAL_EVENTS,
    EVENT_REGISTRY,
    WRITE_OWNERSHIP,
    BoardEstablished,
    CapitalIncreased,
    CompanyIncorporated,
    CorporateSealRegistered,
    LegalEvent,
    SharesTransferred,
    event_from_dict,
    event_to_dict,
    with_causation,
    with_user,
)
from kaisha.observability.logger import bind_correlation_id, clear_correlation_id


class TestWriteOwnership:
    def test_twenty_one_events(self):
        assert len(ALL_LEGAL_EVENTS) == 21

    def test_owners_are_the_three_aggregates(self):
        assert set(WRITE_OWNERSHIP.values()) == {
            "company", "board", "shareholder_register",
        }

    @pytest.mark.parametrize("cls", ALL_LEGAL_EVENTS)
    def test_every_event_is_frozen_legal_event(self, cls):
        event = cls()
        assert isinstance(event, LegalEvent)
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.event_id = "x"

    def test_registry_keyed_by_class_name(self):
        assert EVENT_REGISTRY["SharesTransferred"] is SharesTransferred


class TestEnvelope:
    def test_unique_event_ids(self):
        assert CapitalIncreased().event_id != CapitalIncreased().event_id

    def test_occurred_at_is_utc(self):
        assert CapitalIncreased().occurred_at.tzinfo is timezone.utc

    def test_event_type_is_class_name(self):
        assert BoardEstablished().event_type == "BoardEstablished"

    def test_correlation_defaults_to_unbound(self):
        assert CapitalIncreased().correlation_id is None

    def test_correlation_from_context(self):
        cid = bind_correlation_id("req-123")
        assert cid == "req-123"
        assert CapitalIncreased().correlation_id == "req-123"

    def test_with_user(self):
        event = with_user(CapitalIncreased(), "user-1")
        assert event.user_id == "user-1"

    def test_with_causation_inherits_correlation(self):
        bind_correlation_id("req-1")
        cause = CapitalIncreased()
        clear_correlation_id()
        effect = with_causation(CorporateSealRegistered(), cause)
        assert effect.causation_id == cause.event_id
        assert effect.correlation_id == "req-1"


class TestSerialization:
    def test_incorporated_round_trip(self, tokyo_address):
        event = CompanyIncorporated(
            company_id=CompanyId("c-1"),
            corporate_number=CorporateNumber(value="1010401089234"),
            legal_name=BilingualName(japanese="テスト"),
            entity_type=EntityType.GODO_KAISHA,
            initial_capital=Money.yen(3_000_000),
            fiscal_year_end=FiscalYearEnd.december_31(),
            headquarters_address=tokyo_address,
            establishment_date=date(2024, 4, 1),
        )
        d = event_to_dict(event)
        assert d["__event_type__"] == "CompanyIncorporated"
        assert d["entity_type"] == "godo_kaisha"
        assert d["establishment_date"] == "2024-04-01"

        restored = event_from_dict(d)
        assert restored == event

    def test_dict_is_json_safe(self):
        d = event_to_dict(
            CorporateSealRegistered(
                seal_type=SealType.GINKOIN,
                registration_date=date(2024, 4, 2),
                legal_affairs_bureau="東京法務局",
            )
        )
        assert json.loads(json.dumps(d, ensure_ascii=False)) == d

    def test_unknown_type_returns_none(self):
        assert event_from_dict({"__event_type__": "NoSuchEvent"}) is None
        assert event_from_dict({}) is None

    def test_custom_registry(self):
        d = event_to_dict(CapitalIncreased())
        assert event_from_dict(d, registry={}) is None
