from datetime import date

import pytest

from rentroll.exceptions import ValidationError
from rentroll.models.charge import RoomCharge
from rentroll.models.property import Property
from rentroll.models.room import Room, RoomStatus
from rentroll.models.session import BillingSession, SessionState
from rentroll.services.period import billing_period_for
from rentroll.services.wizard import (
    begin_charges,
    choose_period,
    preview,
    select_rooms,
    start_session,
    submit_charges,
    toggle_room,
    toggle_select_all,
)


class TestStartSession:
    def test_carries_property(self, sample_property):
        session = start_session(sample_property)
        assert session.property_id == 1
        assert session.property_name == "Sunset Apartments"
        assert session.state == SessionState.DRAFT
        assert session.run_key


class TestToggleRoom:
    def test_adds_occupied_room(self, sample_rooms):
        assert toggle_room([], sample_rooms[0]) == ["r101"]

    def test_removes_selected_room(self, sample_rooms):
        assert toggle_room(["r101", "r102"], sample_rooms[0]) == ["r102"]

    @pytest.mark.parametrize("index", [2, 4])
    def test_non_billable_room_leaves_selection(self, sample_rooms, index):
        assert toggle_room(["r101"], sample_rooms[index]) == ["r101"]

    def test_does_not_mutate_input(self, sample_rooms):
        selected = ["r101"]
        toggle_room(selected, sample_rooms[1])
        assert selected == ["r101"]


class TestToggleSelectAll:
    def test_selects_every_billable_room(self, sample_rooms):
        assert toggle_select_all([], sample_rooms) == ["r101", "r102", "r201"]

    def test_partial_selection_selects_all(self, sample_rooms):
        assert toggle_select_all(["r102"], sample_rooms) == ["r101", "r102", "r201"]

    def test_clears_when_all_selected(self, sample_rooms):
        assert toggle_select_all(["r101", "r102", "r201"], sample_rooms) == []

    def test_no_billable_rooms(self, sample_rooms):
        vacant = [r for r in sample_rooms if not r.is_billable]
        assert toggle_select_all([], vacant) == []


class TestSelectRooms:
    def test_keeps_catalog_order(self, sample_property, sample_rooms):
        session = select_rooms(start_session(sample_property), sample_rooms, ["r201", "r101"])
        assert [r.id for r in session.selected_rooms] == ["r101", "r201"]

    def test_drops_non_billable_ids(self, sample_property, sample_rooms):
        session = select_rooms(start_session(sample_property), sample_rooms, ["r101", "r103"])
        assert [r.id for r in session.selected_rooms] == ["r101"]

    def test_empty_selection(self, sample_property, sample_rooms):
        with pytest.raises(ValidationError, match="Please select at least one room to continue."):
            select_rooms(start_session(sample_property), sample_rooms, [])

    def test_only_non_billable_selection(self, sample_property, sample_rooms):
        with pytest.raises(ValidationError):
            select_rooms(start_session(sample_property), sample_rooms, ["r103", "r203"])

    def test_input_session_unchanged(self, sample_property, sample_rooms):
        session = start_session(sample_property)
        select_rooms(session, sample_rooms, ["r101"])
        assert session.selected_rooms == []


class TestCharges:
    def _session(self, sample_property, sample_rooms, sample_period) -> BillingSession:
        session = select_rooms(start_session(sample_property), sample_rooms, ["r101", "r102"])
        return choose_period(session, sample_period())

    def test_begin_seeds_from_rent(self, sample_property, sample_rooms, sample_period):
        ledger = begin_charges(self._session(sample_property, sample_rooms, sample_period))
        assert ledger.room_ids == ["r101", "r102"]
        assert ledger.total == 600000

    def test_begin_reuses_existing_charges(self, sample_property, sample_rooms, sample_period):
        session = self._session(sample_property, sample_rooms, sample_period)
        ledger = begin_charges(session)
        ledger.update_field("r101", "water", "100")
        session = submit_charges(session, ledger)

        again = begin_charges(session)
        assert again.get("r101").water == "100"

    def test_submit_stores_charges_and_total(self, sample_property, sample_rooms, sample_period):
        session = self._session(sample_property, sample_rooms, sample_period)
        ledger = begin_charges(session)
        ledger.apply_to_all("wifi", "300")
        submitted = submit_charges(session, ledger)
        assert submitted.total_amount == 660000
        assert submitted.room_charges["r102"].wifi == "300"
        assert session.room_charges == {}

    def test_submit_rejects_invalid_rent(self, sample_property, sample_rooms, sample_period):
        session = self._session(sample_property, sample_rooms, sample_period)
        ledger = begin_charges(session)
        ledger.update_field("r101", "rent", "0")
        with pytest.raises(ValidationError) as exc_info:
            submit_charges(session, ledger)
        assert exc_info.value.invalid_rooms == ["r101"]


class TestPreview:
    def test_requires_period(self, sample_property, sample_rooms):
        session = select_rooms(start_session(sample_property), sample_rooms, ["r101"])
        with pytest.raises(ValidationError, match="billing period"):
            preview(session)

    def test_requires_charges(self, sample_property, sample_rooms, sample_period):
        session = choose_period(select_rooms(start_session(sample_property), sample_rooms, ["r101"]), sample_period())
        with pytest.raises(ValidationError, match="review the room charges"):
            preview(session)

    def test_requires_rooms(self, sample_property, sample_period):
        session = choose_period(start_session(sample_property), sample_period())
        with pytest.raises(ValidationError, match="at least one room"):
            preview(session)


class TestEndToEnd:
    def test_single_occupied_room(self):
        prop = Property(id=7, name="City Center Rooms")
        rooms = [
            Room(id="a", property_id=7, number="101", rent=280000, status=RoomStatus.OCCUPIED, tenant_name="Ana"),
            Room(id="b", property_id=7, number="103", rent=280000, status=RoomStatus.VACANT),
        ]

        selected = toggle_select_all([], rooms)
        selected = toggle_room(selected, rooms[1])
        assert selected == ["a"]

        session = select_rooms(start_session(prop), rooms, selected)
        session = choose_period(session, billing_period_for(2024, 1, today=date(2024, 2, 1)))
        ledger = begin_charges(session)
        assert ledger.get("a").model_dump(exclude={"room_id", "notes"}) == {
            "rent": "2800",
            "electricity": "0",
            "water": "0",
            "wifi": "0",
            "other": "0",
        }
        session = submit_charges(session, ledger)
        assert session.total_amount == 280000

        # session survives the hop between wizard steps
        session = BillingSession.from_params(session.to_params())

        previews = preview(session)
        assert len(previews) == 1
        assert previews[0].invoice_number == "INV-202402-101"
        assert [(i.description, i.amount) for i in previews[0].line_items] == [("Rent", 280000)]
        assert previews[0].total == 280000
        assert previews[0].due_date == date(2024, 2, 29)

    def test_rent_only_charges_preview(self, sample_property, sample_rooms, sample_period):
        session = choose_period(select_rooms(start_session(sample_property), sample_rooms, ["r101"]), sample_period())
        session = session.model_copy(update={"room_charges": {"r101": RoomCharge(room_id="r101", rent="2800")}})
        previews = preview(session)
        assert [(i.description, i.amount) for i in previews[0].line_items] == [("Rent", 280000)]
        assert previews[0].total == 280000


class TestPreviewRentCheck:
    def _params(self, sample_property, sample_rooms, sample_period, rent):
        session = choose_period(select_rooms(start_session(sample_property), sample_rooms, ["r101", "r102"]),
                                sample_period())
        session = session.model_copy(
            update={
                "room_charges": {
                    "r101": RoomCharge(room_id="r101", rent="2800"),
                    "r102": RoomCharge(room_id="r102", rent=rent, water="150"),
                },
            }
        )
        return session.to_params()

    @pytest.mark.parametrize("rent", ["", "0", "abc", "-100", "1e30"])
    def test_deserialized_session_with_invalid_rent_rejected(self, sample_property, sample_rooms, sample_period,
                                                              rent):
        session = BillingSession.from_params(self._params(sample_property, sample_rooms, sample_period, rent))
        with pytest.raises(ValidationError, match="valid rent") as exc_info:
            preview(session)
        assert exc_info.value.invalid_rooms == ["r102"]

    def test_deserialized_session_with_valid_rent_accepted(self, sample_property, sample_rooms, sample_period):
        session = BillingSession.from_params(self._params(sample_property, sample_rooms, sample_period, "3200"))
        assert [p.total for p in preview(session)] == [280000, 335000]
