"""Unit tests for sale completion — stock reconciliation and bill creation."""

import pytest
from unittest.mock import AsyncMock, patch
from app.exceptions import StockConflict, ValidationFailed
from app.models.alert import Alert
from app.models.sale import Sale
from app.models.vehicle import VehicleModel, VehicleUnit
from app.services.bill_cache import BillCache
from app.services.change_feed import feed
from app.services.sale_service import complete_sale
from factories import make_vehicle, sale_request, saved_sale


def units_of(db, vehicle_id, status=None):
    q = db.query(VehicleUnit).filter(VehicleUnit.vehicle_id == vehicle_id)
    if status:
        q = q.filter(VehicleUnit.status == status)
    return q.all()


class TestBulkSale:
    @pytest.mark.asyncio
    async def test_decrements_quantity_and_marks_units(self, db):
        vehicle = make_vehicle(db, quantity=3)

        sale = await complete_sale(db, sale_request(vehicle.id, quantity=2))

        db.refresh(vehicle)
        assert vehicle.quantity == 1
        sold = units_of(db, vehicle.id, "sold")
        assert len(sold) == 2
        assert {u.sale_id for u in sold} == {sale.id}
        assert len(units_of(db, vehicle.id, "available")) == 1

    @pytest.mark.asyncio
    async def test_fewer_units_than_requested_still_decrements_by_quantity(self, db):
        vehicle = make_vehicle(db, quantity=3, units=1)

        await complete_sale(db, sale_request(vehicle.id, quantity=2))

        db.refresh(vehicle)
        assert vehicle.quantity == 1
        assert len(units_of(db, vehicle.id, "sold")) == 1

    @pytest.mark.asyncio
    async def test_amounts_use_model_price_by_default(self, db):
        vehicle = make_vehicle(db, quantity=3, price=1000)

        sale = await complete_sale(db, sale_request(vehicle.id, quantity=2))

        assert sale.total_amount == 2000
        assert sale.cgst == 50
        assert sale.sgst == 50
        assert sale.final_amount == 2100
        assert sale.vehicle_name == "Zeal"

    @pytest.mark.asyncio
    async def test_selling_price_overrides_model_price(self, db):
        vehicle = make_vehicle(db, quantity=1, price=1000)

        sale = await complete_sale(db, sale_request(vehicle.id, selling_price=900))

        assert sale.selling_price == 900
        assert sale.final_amount == pytest.approx(945)


class TestUnitSale:
    @pytest.mark.asyncio
    async def test_marks_that_unit_sold(self, db):
        vehicle = make_vehicle(db, quantity=2)
        target = units_of(db, vehicle.id)[1]

        sale = await complete_sale(db, sale_request(vehicle.id, unit_id=target.id, quantity=5,
                                                    motor_no="", chassis_no=""))

        db.refresh(target)
        db.refresh(vehicle)
        assert target.status == "sold"
        assert target.sale_id == sale.id
        assert vehicle.quantity == 1
        assert sale.quantity == 1
        assert sale.chassis_no == target.chassis_no
        assert sale.motor_no == target.motor_no
        assert sale.unit_id == target.id

    @pytest.mark.asyncio
    async def test_unit_cannot_be_sold_twice(self, db):
        vehicle = make_vehicle(db, quantity=2)
        target = units_of(db, vehicle.id)[0]
        await complete_sale(db, sale_request(vehicle.id, unit_id=target.id))

        with pytest.raises(ValidationFailed, match="already sold"):
            await complete_sale(db, sale_request(vehicle.id, unit_id=target.id))

    @pytest.mark.asyncio
    async def test_unit_of_other_model_rejected(self, db):
        first = make_vehicle(db, quantity=1)
        second = make_vehicle(db, quantity=1, name="Breeze")
        foreign = units_of(db, second.id)[0]

        with pytest.raises(ValidationFailed):
            await complete_sale(db, sale_request(first.id, unit_id=foreign.id))


class TestSaleValidation:
    @pytest.mark.asyncio
    async def test_quantity_above_stock_writes_nothing(self, db):
        vehicle = make_vehicle(db, quantity=2)

        with pytest.raises(ValidationFailed, match="Invalid quantity. Available: 2"):
            await complete_sale(db, sale_request(vehicle.id, quantity=3))

        db.refresh(vehicle)
        assert vehicle.quantity == 2
        assert db.query(Sale).count() == 0
        assert len(units_of(db, vehicle.id, "available")) == 2

    @pytest.mark.asyncio
    async def test_zero_quantity_rejected(self, db):
        vehicle = make_vehicle(db, quantity=2)
        with pytest.raises(ValidationFailed):
            await complete_sale(db, sale_request(vehicle.id, quantity=0))

    @pytest.mark.asyncio
    async def test_customer_name_required(self, db):
        vehicle = make_vehicle(db, quantity=2)
        with pytest.raises(ValidationFailed, match="Customer name"):
            await complete_sale(db, sale_request(vehicle.id, customer_name="  "))

    @pytest.mark.asyncio
    async def test_bulk_sale_needs_motor_and_chassis(self, db):
        vehicle = make_vehicle(db, quantity=2)
        with pytest.raises(ValidationFailed, match="Chassis and Motor"):
            await complete_sale(db, sale_request(vehicle.id, chassis_no=""))


class TestBillNumbers:
    @pytest.mark.asyncio
    async def test_first_sales_are_sequential(self, db):
        vehicle = make_vehicle(db, quantity=3)

        first = await complete_sale(db, sale_request(vehicle.id))
        second = await complete_sale(db, sale_request(vehicle.id))

        assert first.bill_number == "AM0001"
        assert second.bill_number == "AM0002"

    @pytest.mark.asyncio
    async def test_continues_from_last_saved_bill(self, db):
        saved_sale(db, "AM0007")
        vehicle = make_vehicle(db, quantity=1)

        sale = await complete_sale(db, sale_request(vehicle.id))

        assert sale.bill_number == "AM0008"


class TestConflicts:
    @pytest.mark.asyncio
    async def test_lost_unit_race_rolls_back_everything(self, db):
        vehicle = make_vehicle(db, quantity=2)

        with patch("app.services.sale_service._mark_sold", return_value=False):
            with pytest.raises(StockConflict):
                await complete_sale(db, sale_request(vehicle.id))

        assert db.query(Sale).count() == 0
        assert db.get(VehicleModel, vehicle.id).quantity == 2
        # the bill number was not consumed
        sale = await complete_sale(db, sale_request(vehicle.id))
        assert sale.bill_number == "AM0001"

    @pytest.mark.asyncio
    async def test_lost_stock_race_rolls_back_units(self, db):
        vehicle = make_vehicle(db, quantity=2)

        with patch("app.services.sale_service._decrement_stock", return_value=False):
            with pytest.raises(StockConflict):
                await complete_sale(db, sale_request(vehicle.id, quantity=2))

        assert len(units_of(db, vehicle.id, "available")) == 2


class TestAfterCommit:
    @pytest.mark.asyncio
    async def test_bill_appended_to_cache(self, db, bill_cache):
        vehicle = make_vehicle(db, quantity=2)

        sale = await complete_sale(db, sale_request(vehicle.id), bill_cache)

        bills = bill_cache.load()
        assert [b.bill_number for b in bills] == [sale.bill_number]
        assert bills[0].customer_name == "Ravi Patil"
        assert bills[0].final_amount == sale.final_amount

    @pytest.mark.asyncio
    async def test_out_of_stock_alert_when_last_unit_sold(self, db):
        vehicle = make_vehicle(db, quantity=1)

        with patch("app.services.sale_service.create_alert", new_callable=AsyncMock) as mock_alert:
            await complete_sale(db, sale_request(vehicle.id))
            mock_alert.assert_called_once()
            assert mock_alert.call_args[0][1] == "out_of_stock"

    @pytest.mark.asyncio
    async def test_no_alert_while_stock_remains(self, db):
        vehicle = make_vehicle(db, quantity=2)

        with patch("app.services.sale_service.create_alert", new_callable=AsyncMock) as mock_alert:
            await complete_sale(db, sale_request(vehicle.id))
            mock_alert.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreadable_cache_keeps_committed_sale(self, db, tmp_path):
        path = tmp_path / "saved_bills.json"
        path.write_text("{not json", encoding="utf-8")
        vehicle = make_vehicle(db, quantity=1)
        received = []

        with feed.subscribe("sales", received.append):
            sale = await complete_sale(db, sale_request(vehicle.id), BillCache(str(path)))

        assert sale.bill_number == "AM0001"
        assert db.query(Sale).count() == 1
        assert [c.record_id for c in received] == [sale.id]
        assert [a.alert_type for a in db.query(Alert).all()] == ["out_of_stock"]
        assert path.read_text(encoding="utf-8") == "{not json"
