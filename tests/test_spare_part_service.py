"""Unit tests for spare parts stock and transactions."""

import pytest
from unittest.mock import AsyncMock, patch
from app.exceptions import ConfirmationRequired, NotFound, ValidationFailed
from app.models.spare_part import PartTransaction, SparePart
from app.schemas.spare_part import SparePartCreate, TransactionCreate
from app.services.spare_part_service import (
    apply_transaction, create_part, delete_part, is_low_stock, list_parts,
    list_transactions, stock_level, update_part,
)


def make_part(db, quantity=10, name="Brake shoe set", part_number="BRK-001"):
    return create_part(db, SparePartCreate(name=name, part_number=part_number,
                                           quantity=quantity, price=350))


class TestStockFlags:
    def test_low_stock_boundary(self):
        assert is_low_stock(5) is True
        assert is_low_stock(0) is True
        assert is_low_stock(6) is False

    def test_stock_level(self):
        assert stock_level(5) == "low"
        assert stock_level(10) == "medium"
        assert stock_level(11) == "ok"

    def test_list_annotates_and_filters(self, db):
        make_part(db, quantity=5, part_number="P-LOW")
        make_part(db, quantity=6, part_number="P-OK")

        low = list_parts(db, low_stock_only=True)

        assert [p.part_number for p in low] == ["P-LOW"]
        assert low[0].is_low_stock is True
        assert {p.part_number: p.is_low_stock for p in list_parts(db)} == {"P-LOW": True, "P-OK": False}


class TestPartCrud:
    def test_name_and_number_required(self, db):
        with pytest.raises(ValidationFailed, match="Name and Part Number are required."):
            create_part(db, SparePartCreate(name="Throttle", part_number=" "))

    def test_update(self, db):
        part = make_part(db)
        updated = update_part(db, part.id, SparePartCreate(name="Brake shoe set (rear)",
                                                           part_number="BRK-001", quantity=12, price=360))
        assert updated.name == "Brake shoe set (rear)"
        assert updated.quantity == 12

    def test_delete_needs_confirmation(self, db):
        part = make_part(db)
        with pytest.raises(ConfirmationRequired):
            delete_part(db, part.id)
        assert db.query(SparePart).count() == 1

    @pytest.mark.asyncio
    async def test_delete_keeps_transactions(self, db):
        part = make_part(db, quantity=10)
        await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=2, type="sale"))

        delete_part(db, part.id, confirm=True)

        assert db.query(SparePart).count() == 0
        history = db.query(PartTransaction).all()
        assert len(history) == 1
        assert history[0].part_number == "BRK-001"
        assert history[0].new_quantity == 8


class TestTransactions:
    @pytest.mark.asyncio
    async def test_sale_reduces_stock_and_logs(self, db):
        part = make_part(db, quantity=10)

        txn = await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=3,
                                                            type="sale", notes="walk-in"))

        db.refresh(part)
        assert part.quantity == 7
        assert (txn.previous_quantity, txn.new_quantity) == (10, 7)
        assert txn.part_name == "Brake shoe set"
        assert txn.notes == "walk-in"

    @pytest.mark.asyncio
    async def test_purchase_adds_stock(self, db):
        part = make_part(db, quantity=2)

        await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=10, type="purchase"))

        db.refresh(part)
        assert part.quantity == 12

    @pytest.mark.asyncio
    async def test_oversell_rejected_without_writes(self, db):
        part = make_part(db, quantity=2)

        with pytest.raises(ValidationFailed, match="Not enough quantity"):
            await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=3, type="sale"))

        db.refresh(part)
        assert part.quantity == 2
        assert db.query(PartTransaction).count() == 0

    @pytest.mark.asyncio
    async def test_non_positive_quantity_rejected(self, db):
        part = make_part(db)
        with pytest.raises(ValidationFailed):
            await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=0))

    @pytest.mark.asyncio
    async def test_unknown_part(self, db):
        with pytest.raises(NotFound):
            await apply_transaction(db, TransactionCreate(part_id=404, quantity=1))

    @pytest.mark.asyncio
    async def test_history_newest_first(self, db):
        part = make_part(db, quantity=10)
        await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=1, type="sale"))
        await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=4, type="purchase"))

        history = list_transactions(db, part.id)

        assert [t.type for t in history] == ["purchase", "sale"]


class TestLowStockAlerts:
    @pytest.mark.asyncio
    async def test_alert_when_crossing_threshold(self, db):
        part = make_part(db, quantity=7)

        with patch("app.services.spare_part_service.create_alert", new_callable=AsyncMock) as mock_alert:
            await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=2, type="sale"))
            mock_alert.assert_called_once()
            assert mock_alert.call_args[0][1] == "low_stock"

    @pytest.mark.asyncio
    async def test_no_repeat_alert_when_already_low(self, db):
        part = make_part(db, quantity=4)

        with patch("app.services.spare_part_service.create_alert", new_callable=AsyncMock) as mock_alert:
            await apply_transaction(db, TransactionCreate(part_id=part.id, quantity=1, type="sale"))
            mock_alert.assert_not_called()
