from rentroll.models.charge import RoomCharge
from rentroll.services.invoice_builder import build_line_items, build_previews, invoice_number, preview_total


class TestInvoiceNumber:
    def test_month_is_one_based(self, sample_period):
        assert invoice_number(sample_period(), "101") == "INV-202401-101"

    def test_december(self, sample_period):
        period = sample_period(id="period_2024_12", billing_month=11, display_name="December 2024")
        assert invoice_number(period, "A1") == "INV-202412-A1"


class TestBuildLineItems:
    def test_skips_zero_amounts(self):
        items = build_line_items(RoomCharge(room_id="r1", rent="2800", water="150"))
        assert [(i.description, i.amount) for i in items] == [("Rent", 280000), ("Water", 15000)]

    def test_sort_order_is_dense(self):
        items = build_line_items(RoomCharge(room_id="r1", rent="2800", wifi="300", other="50"))
        assert [i.sort_order for i in items] == [0, 1, 2]
        assert [i.description for i in items] == ["Rent", "WiFi", "Other"]

    def test_field_order(self):
        charge = RoomCharge(room_id="r1", rent="1", electricity="1", water="1", wifi="1", other="1")
        assert [i.description for i in build_line_items(charge)] == ["Rent", "Electricity", "Water", "WiFi", "Other"]

    def test_invalid_and_negative_skipped(self):
        items = build_line_items(RoomCharge(room_id="r1", rent="2800", water="abc", other="-20"))
        assert [i.description for i in items] == ["Rent"]

    def test_all_zero(self):
        assert build_line_items(RoomCharge(room_id="r1")) == []


class TestBuildPreviews:
    def test_one_preview_per_room(self, sample_rooms, sample_period):
        rooms = [r for r in sample_rooms if r.is_billable]
        charges = {
            "r101": RoomCharge(room_id="r101", rent="2800", electricity="500", notes="Meter read 1/28"),
            "r102": RoomCharge(room_id="r102", rent="3200"),
            "r201": RoomCharge(room_id="r201", rent="4500", water="200"),
        }
        previews = build_previews(rooms, charges, sample_period())

        assert [p.invoice_number for p in previews] == ["INV-202401-101", "INV-202401-102", "INV-202401-201"]
        assert [p.total for p in previews] == [330000, 320000, 470000]
        assert previews[0].notes == "Meter read 1/28"
        assert all(str(p.due_date) == "2024-01-31" for p in previews)
        assert preview_total(previews) == 330000 + 320000 + 470000

    def test_total_matches_line_items(self, sample_rooms, sample_period):
        rooms = [r for r in sample_rooms if r.is_billable]
        charges = {r.id: RoomCharge(room_id=r.id, rent="1000.25", other="0.50") for r in rooms}
        for p in build_previews(rooms, charges, sample_period()):
            assert p.total == sum(item.amount for item in p.line_items)

    def test_missing_charge_gives_empty_invoice(self, sample_rooms, sample_period):
        previews = build_previews(sample_rooms[:1], {}, sample_period())
        assert previews[0].line_items == []
        assert previews[0].total == 0

    def test_empty_rooms(self, sample_period):
        assert build_previews([], {}, sample_period()) == []
        assert preview_total([]) == 0
